"""Helpers for moving between numpy arrays and FixedPoint values."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

import numpy as np

from fxbinary.core.modes import ModeLike, OverflowEnum, RoundingEnum
from fxbinary.value.fixedpoint import FixedPoint


def _nested(data: Any, build: Callable[[float], FixedPoint]) -> Any:
    if isinstance(data, list):
        return [_nested(item, build) for item in data]
    return build(data)


def _map_values(data: Any, fn: Callable[[FixedPoint], Any]) -> Any:
    # FixedPoint supports len() and indexing over its bits, so numpy must never be
    # left to discover the shape of a container of them on its own.
    if isinstance(data, FixedPoint):
        return fn(data)
    if isinstance(data, np.ndarray):
        out = np.empty(data.shape, dtype=object)
        for idx, value in np.ndenumerate(data):
            out[idx] = _map_values(value, fn)
        return out
    if isinstance(data, (list, tuple)):
        return [_map_values(item, fn) for item in data]
    raise TypeError(f"expected FixedPoint elements, got {type(data).__name__}")


def list_from_array(
    array: Any,
    int_bits: int = 1,
    frac_bits: int = 0,
    signed: bool = True,
    format_inst: Optional[FixedPoint] = None,
) -> List[Any]:
    """Convert every element of `array` to a FixedPoint, keeping the nesting of the input.

    Elements are quantized the same way as the FixedPoint constructor does it.
    """
    data = np.asarray(array, dtype=np.float64).tolist()
    if format_inst is not None:
        return _nested(data, lambda v: FixedPoint(value=v, format_inst=format_inst))
    return _nested(data, lambda v: FixedPoint(int_bits, frac_bits, signed, value=v))


def array_resize(
    array: Any,
    format: Any,
    overflow_mode: ModeLike = OverflowEnum.wrap,
    round_mode: ModeLike = RoundingEnum.direct_neg_inf,
) -> Any:
    """Resize each FixedPoint in a nested list or object array.

    Returns a new container of the same kind; the input is left untouched.
    """
    return _map_values(array, lambda v: v.resize(format, overflow_mode, round_mode))


def to_float_array(values: Any) -> np.ndarray:
    """float64 array of the nearest double to each value."""
    floats = _map_values(values, float)
    if isinstance(floats, np.ndarray):
        return floats.astype(np.float64)
    return np.asarray(floats, dtype=np.float64)


def bits_array(values: Any) -> np.ndarray:
    """Unsigned bit pattern of each value, as Python ints in an object array."""
    patterns = _map_values(values, lambda v: v.__index__())
    if isinstance(patterns, np.ndarray):
        return patterns
    return np.array(patterns, dtype=object)
