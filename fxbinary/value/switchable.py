"""A value that runs either as a FixedPoint or as a plain float.

FixedPointSwitchable lets one model be simulated in floating point first and in
fixed point later without touching the model code. The mode is fixed when the
object is built. In float mode the `value` property also records the lowest
and highest values assigned to it, which is how word lengths get sized before
switching to fixed point.

Mixed operations use fixed point as soon as either operand is a switchable in
fixed-point mode.
"""

from __future__ import annotations

import numbers
import operator
from typing import Any, Callable, Dict, Optional, Tuple

from fxbinary.core.modes import ModeLike, OverflowEnum, RoundingEnum
from fxbinary.value.fixedpoint import FixedPoint

_FLOAT_MODE_FORMAT = (1, 0)
_STATE_KEYS = ("fpm", "dv", "dmin", "dmax")


def _is_operand(value: Any) -> bool:
    if isinstance(value, (FixedPointSwitchable, FixedPoint)):
        return True
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_float(value: Any) -> float:
    if isinstance(value, str) or not hasattr(type(value), "__float__"):
        raise TypeError(f"cannot use {type(value).__name__} as a float value")
    return float(value)


class FixedPointSwitchable:
    """FixedPointSwitchable(fp_mode, fp_value=None, float_value=0.0)

    With `fp_mode` True, `fp_value` must be a FixedPoint and defines the format
    and the initial value. With `fp_mode` False, `float_value` (anything with a
    float conversion) is the initial value and `fp_value` is ignored.
    """

    __slots__ = ("_fp_mode", "_fp_value", "_float_value", "_min_value", "_max_value")

    def __init__(self, fp_mode: bool, fp_value: Optional[FixedPoint] = None, float_value: Any = 0.0):
        if not isinstance(fp_mode, bool):
            raise TypeError("fp_mode must be True or False")
        self._fp_mode = fp_mode
        self._fp_value: Optional[FixedPoint] = None
        self._float_value = self._min_value = self._max_value = 0.0
        if fp_mode:
            if not isinstance(fp_value, FixedPoint):
                raise TypeError("fixed point mode needs a FixedPoint fp_value")
            self._fp_value = fp_value
        else:
            start = _as_float(float_value)
            self._float_value = self._min_value = self._max_value = start

    @classmethod
    def _from_result(cls, result: Any) -> "FixedPointSwitchable":
        if isinstance(result, FixedPoint):
            return cls(True, fp_value=result)
        return cls(False, float_value=result)

    # Properties

    @property
    def fp_mode(self) -> bool:
        return self._fp_mode

    @property
    def format(self) -> Tuple[int, int]:
        """(int_bits, frac_bits) of the fixed-point value, (1, 0) in float mode."""
        if self._fp_mode:
            return self._fp_value.format
        return _FLOAT_MODE_FORMAT

    @property
    def value(self):
        """The FixedPoint in fixed-point mode, a float otherwise.

        Assigning in float mode accepts anything float-convertible and updates
        min_value / max_value. Assigning in fixed-point mode accepts a FixedPoint
        or a fixed-point switchable and does no tracking.
        """
        if self._fp_mode:
            return self._fp_value
        return self._float_value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._fp_mode:
            if isinstance(new_value, FixedPointSwitchable) and new_value.fp_mode:
                new_value = new_value.value
            if not isinstance(new_value, FixedPoint):
                raise TypeError("in fixed point mode the value must be a FixedPoint or FixedPointSwitchable")
            self._fp_value = new_value
            return

        current = _as_float(new_value)
        self._float_value = current
        if current < self._min_value:
            self._min_value = current
        if current > self._max_value:
            self._max_value = current

    @property
    def min_value(self) -> float:
        return self._min_value

    @property
    def max_value(self) -> float:
        return self._max_value

    def resize(
        self,
        format: Any,
        overflow_mode: ModeLike = OverflowEnum.wrap,
        round_mode: ModeLike = RoundingEnum.direct_neg_inf,
    ) -> "FixedPointSwitchable":
        """Resize the held FixedPoint in place and return self. Float mode ignores it."""
        if self._fp_mode:
            self._fp_value = self._fp_value.resize(format, overflow_mode, round_mode)
        return self

    # Arithmetic

    def _operand(self, fixed: bool):
        if not fixed:
            return self._float_value
        return self._fp_value if self._fp_mode else self._float_value

    @staticmethod
    def _uses_fixed(a: Any, b: Any) -> bool:
        return any(isinstance(x, FixedPointSwitchable) and x.fp_mode for x in (a, b))

    @staticmethod
    def _unwrap(x: Any, fixed: bool):
        if isinstance(x, FixedPointSwitchable):
            return x._operand(fixed)
        return x if fixed else float(x)

    def _binary(self, other: Any, op: Callable[[Any, Any], Any], reflected: bool = False):
        if not _is_operand(other):
            return NotImplemented
        a, b = (other, self) if reflected else (self, other)
        fixed = self._uses_fixed(a, b)
        return self._from_result(op(self._unwrap(a, fixed), self._unwrap(b, fixed)))

    def __add__(self, other):
        return self._binary(other, operator.add)

    def __radd__(self, other):
        return self._binary(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __rsub__(self, other):
        return self._binary(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    def __rmul__(self, other):
        return self._binary(other, operator.mul, reflected=True)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._binary(other, operator.truediv, reflected=True)

    def __neg__(self) -> "FixedPointSwitchable":
        if self._fp_mode:
            return self._from_result(-self._fp_value)
        return self._from_result(-self._float_value)

    def __abs__(self) -> "FixedPointSwitchable":
        if self._fp_mode:
            return self._from_result(abs(self._fp_value))
        return self._from_result(abs(self._float_value))

    # Shifts in float mode scale by powers of two, like the hardware they model.

    def __lshift__(self, n):
        if not isinstance(n, numbers.Integral):
            return NotImplemented
        if self._fp_mode:
            return self._from_result(self._fp_value << n)
        return self._from_result(self._float_value * 2.0 ** int(n))

    def __rshift__(self, n):
        if not isinstance(n, numbers.Integral):
            return NotImplemented
        if self._fp_mode:
            return self._from_result(self._fp_value >> n)
        return self._from_result(self._float_value / 2.0 ** int(n))

    # Comparison

    def _compare(self, other: Any, op: Callable[[Any, Any], bool]):
        if not _is_operand(other):
            return NotImplemented
        fixed = self._uses_fixed(self, other)
        return op(self._unwrap(self, fixed), self._unwrap(other, fixed))

    def __eq__(self, other):
        return self._compare(other, operator.eq)

    def __ne__(self, other):
        return self._compare(other, operator.ne)

    def __lt__(self, other):
        return self._compare(other, operator.lt)

    def __le__(self, other):
        return self._compare(other, operator.le)

    def __gt__(self, other):
        return self._compare(other, operator.gt)

    def __ge__(self, other):
        return self._compare(other, operator.ge)

    # The value can be reassigned, so instances are not hashable.
    __hash__ = None

    # Conversions

    def __float__(self) -> float:
        if self._fp_mode:
            return float(self._fp_value)
        return self._float_value

    def __int__(self) -> int:
        if self._fp_mode:
            return int(self._fp_value)
        return int(self._float_value)

    def __bool__(self) -> bool:
        if self._fp_mode:
            return bool(self._fp_value)
        return self._float_value != 0.0

    def __str__(self) -> str:
        if self._fp_mode:
            return str(self._fp_value)
        return str(self._float_value)

    def __repr__(self) -> str:
        if self._fp_mode:
            return f"FixedPointSwitchable(fp_mode=True, fp_value={self._fp_value!r})"
        return f"FixedPointSwitchable(fp_mode=False, float_value={self._float_value!r})"

    def __copy__(self) -> "FixedPointSwitchable":
        dup = FixedPointSwitchable.__new__(FixedPointSwitchable)
        dup.__setstate__(self.__getstate__())
        return dup

    def __deepcopy__(self, memo) -> "FixedPointSwitchable":
        return self.__copy__()

    # Pickling

    def __getstate__(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {
            "fpm": self._fp_mode,
            "dv": self._float_value,
            "dmin": self._min_value,
            "dmax": self._max_value,
        }
        if self._fp_value is not None:
            state["fpv"] = self._fp_value
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        for key in _STATE_KEYS:
            if key not in state:
                raise KeyError(f"switchable state is missing {key!r}")
        if state["fpm"] and "fpv" not in state:
            raise KeyError("switchable state is missing 'fpv'")
        self._fp_mode = bool(state["fpm"])
        self._fp_value = state.get("fpv")
        self._float_value = float(state["dv"])
        self._min_value = float(state["dmin"])
        self._max_value = float(state["dmax"])
