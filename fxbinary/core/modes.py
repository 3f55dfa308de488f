"""Overflow and rounding policies applied by resize."""

from __future__ import annotations

import enum
from typing import Union


class OverflowEnum(enum.IntEnum):
    wrap = 0
    sat = 1
    excep = 2


class RoundingEnum(enum.IntEnum):
    near_pos_inf = 1
    direct_neg_inf = 2
    near_zero = 3
    direct_zero = 4
    near_even = 5


ModeLike = Union[int, str, enum.IntEnum]


def _parse(enum_cls, mode: ModeLike, kind: str):
    if isinstance(mode, enum_cls):
        return mode
    if isinstance(mode, str):
        try:
            return enum_cls[mode.strip().lower()]
        except KeyError:
            raise ValueError(f"unknown {kind} mode: {mode!r}") from None
    if isinstance(mode, bool) or not isinstance(mode, int):
        raise TypeError(f"{kind} mode must be an int or a name, got {type(mode).__name__}")
    try:
        return enum_cls(mode)
    except ValueError:
        raise ValueError(f"unknown {kind} mode: {mode!r}") from None


def parse_overflow_mode(mode: ModeLike) -> OverflowEnum:
    """Accept an OverflowEnum, its integer value or its name ("wrap", "sat", "excep")."""
    return _parse(OverflowEnum, mode, "overflow")


def parse_round_mode(mode: ModeLike) -> RoundingEnum:
    """Accept a RoundingEnum, its integer value or its name ("near_even", ...)."""
    return _parse(RoundingEnum, mode, "rounding")
