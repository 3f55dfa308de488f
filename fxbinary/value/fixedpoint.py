"""The FixedPoint value type.

A FixedPoint holds a scaled integer and a format (int_bits, frac_bits, signed);
its real value is scaled / 2**frac_bits. Values are immutable: operators and
resize() return new instances whose formats grow so that add, subtract,
multiply and divide never lose information. Widths up to the machine word use
the compact backend, wider ones the extended backend, and the switch is
invisible to callers.

Example:
    >>> a = FixedPoint(4, 4, value=1.875)
    >>> (a * a).format
    (8, 8)
    >>> (a * a).resize((4, 2), OverflowEnum.sat, RoundingEnum.near_even).to_exact_string()
    '3.5'
"""

from __future__ import annotations

import math
import numbers
from fractions import Fraction
from typing import Any, Dict, Optional, Tuple

from fxbinary.backends.compact import CompactValue
from fxbinary.core.formats import Format
from fxbinary.core.modes import ModeLike, OverflowEnum, RoundingEnum, parse_overflow_mode, parse_round_mode
from fxbinary.value import dispatch, state
from fxbinary.value.dispatch import Backend


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_non_finite(value: Any) -> bool:
    return isinstance(value, float) and not math.isfinite(value)


def _restore(record: Dict[str, Any]) -> "FixedPoint":
    return FixedPoint.from_state(record)


class FixedPoint:
    """Fixed-point number with hardware-style overflow and rounding control.

    FixedPoint(int_bits=1, frac_bits=0, signed=True, value=0.0, bit_field=None, format_inst=None)

    `value` is quantized with saturation and round-half-up. When `bit_field` is
    given it is taken as the raw two's-complement pattern instead. `format_inst`
    copies the format (and signedness) of another FixedPoint.
    """

    __slots__ = ("_rep",)

    def __init__(
        self,
        int_bits: int = 1,
        frac_bits: int = 0,
        signed: bool = True,
        value: numbers.Real = 0.0,
        bit_field: Optional[int] = None,
        format_inst: Optional["FixedPoint"] = None,
    ):
        if format_inst is not None:
            if not isinstance(format_inst, FixedPoint):
                raise TypeError("format_inst must be a FixedPoint instance")
            fmt = format_inst.fmt
        else:
            if not isinstance(signed, bool):
                raise TypeError("signed must be a bool")
            if not _is_integer(int_bits) or not _is_integer(frac_bits):
                raise TypeError("int_bits and frac_bits must be ints")
            fmt = Format(int(int_bits), int(frac_bits), signed)

        if bit_field is not None:
            if not _is_integer(bit_field):
                raise TypeError("bit_field must be an int")
            self._rep = dispatch.build_from_bits(int(bit_field), fmt)
        else:
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise TypeError(f"value must be a real number, got {type(value).__name__}")
            self._rep = dispatch.build_from_double(value, fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf)

    @classmethod
    def _wrap(cls, rep: Backend) -> "FixedPoint":
        obj = cls.__new__(cls)
        obj._rep = rep
        return obj

    @classmethod
    def from_double(
        cls,
        value: numbers.Real,
        int_bits: int,
        frac_bits: int,
        signed: bool = True,
        overflow_mode: ModeLike = OverflowEnum.sat,
        round_mode: ModeLike = RoundingEnum.near_pos_inf,
    ) -> "FixedPoint":
        """Quantize a real number into the given format with explicit policies."""
        fmt = Format(int_bits, frac_bits, signed)
        rep = dispatch.build_from_double(
            value, fmt, parse_overflow_mode(overflow_mode), parse_round_mode(round_mode)
        )
        return cls._wrap(rep)

    @classmethod
    def from_bits(cls, raw: int, int_bits: int, frac_bits: int, signed: bool = True) -> "FixedPoint":
        """Mask `raw` to the format width and read it as the scaled pattern."""
        return cls._wrap(dispatch.build_from_bits(raw, Format(int_bits, frac_bits, signed)))

    @classmethod
    def from_state(cls, record: Dict[str, Any]) -> "FixedPoint":
        return cls._wrap(state.load_state(record))

    @staticmethod
    def get_max_bits() -> None:
        """Widest supported format. None: the extended backend has no limit."""
        return None

    # Queries

    @property
    def fmt(self) -> Format:
        return self._rep.fmt

    @property
    def format(self) -> Tuple[int, int]:
        return self._rep.fmt.as_tuple()

    @property
    def is_signed(self) -> bool:
        return self._rep.fmt.signed

    @property
    def total_bits(self) -> int:
        return self._rep.fmt.total_bits

    @property
    def is_compact(self) -> bool:
        return isinstance(self._rep, CompactValue)

    def to_double(self) -> float:
        return self._rep.to_double()

    def to_exact_string(self) -> str:
        """Decimal text with every digit, e.g. '-3.0625'. Never uses exponent notation."""
        return self._rep.to_exact_string()

    def bits_to_signed(self) -> int:
        """The stored bit pattern read as a two's-complement integer, even for unsigned values."""
        return self._rep.bits_to_signed()

    def to_state(self) -> Dict[str, Any]:
        return self._rep.to_state()

    def copy(self) -> "FixedPoint":
        return self._wrap(self._rep.copy())

    def resize(
        self,
        format: Any,
        overflow_mode: ModeLike = OverflowEnum.wrap,
        round_mode: ModeLike = RoundingEnum.direct_neg_inf,
    ) -> "FixedPoint":
        """Return this value moved to a new format.

        `format` is a (int_bits, frac_bits) tuple, a Format or another FixedPoint;
        signedness never changes. Dropped fraction bits are rounded with
        `round_mode` and out of range values handled per `overflow_mode`. With
        OverflowEnum.excep an FpBinaryOverflowError is raised and this value is
        left as it was.
        """
        fmt = Format.of(format, self.is_signed)
        rep = dispatch.resize(self._rep, fmt, parse_overflow_mode(overflow_mode), parse_round_mode(round_mode))
        return self._wrap(rep)

    # Arithmetic

    def _binary(self, other: Any, op: str, reflected: bool = False):
        if isinstance(other, FixedPoint):
            rhs = other._rep
        else:
            rhs = dispatch.coerce_number(other)
            if rhs is None:
                return NotImplemented
        if reflected:
            return self._wrap(dispatch.binary_op(op, rhs, self._rep))
        return self._wrap(dispatch.binary_op(op, self._rep, rhs))

    def __add__(self, other):
        return self._binary(other, "add")

    def __radd__(self, other):
        return self._binary(other, "add", reflected=True)

    def __sub__(self, other):
        return self._binary(other, "sub")

    def __rsub__(self, other):
        return self._binary(other, "sub", reflected=True)

    def __mul__(self, other):
        return self._binary(other, "mul")

    def __rmul__(self, other):
        return self._binary(other, "mul", reflected=True)

    def __truediv__(self, other):
        return self._binary(other, "div")

    def __rtruediv__(self, other):
        return self._binary(other, "div", reflected=True)

    def __neg__(self) -> "FixedPoint":
        return self._wrap(dispatch.negate(self._rep))

    def __pos__(self) -> "FixedPoint":
        return self.copy()

    def __abs__(self) -> "FixedPoint":
        return self._wrap(dispatch.absolute(self._rep))

    def _shift_count(self, n: Any) -> Optional[int]:
        if not _is_integer(n):
            return None
        if n < 0:
            raise ValueError("negative shift count")
        return int(n)

    def __lshift__(self, n):
        count = self._shift_count(n)
        if count is None:
            return NotImplemented
        return self._wrap(self._rep.lshift(count))

    def __rshift__(self, n):
        count = self._shift_count(n)
        if count is None:
            return NotImplemented
        return self._wrap(self._rep.rshift(count))

    # Comparison

    def _compare(self, other: Any):
        if isinstance(other, FixedPoint):
            rhs = other._rep
        else:
            rhs = dispatch.coerce_number(other)
            if rhs is None:
                return NotImplemented
        return dispatch.compare(self._rep, rhs)

    def __eq__(self, other):
        # nan and inf never equal a fixed-point value; ordering them still raises.
        if _is_non_finite(other):
            return False
        result = self._compare(other)
        return result if result is NotImplemented else result == 0

    def __ne__(self, other):
        if _is_non_finite(other):
            return True
        result = self._compare(other)
        return result if result is NotImplemented else result != 0

    def __lt__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result < 0

    def __le__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result <= 0

    def __gt__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result > 0

    def __ge__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result >= 0

    def __hash__(self) -> int:
        # Equal values hash equal across formats and against int/float.
        scaled = self._rep.signed_value()
        frac_bits = self._rep.fmt.frac_bits
        if frac_bits <= 0:
            return hash(scaled << -frac_bits)
        return hash(Fraction(scaled, 1 << frac_bits))

    # Conversions

    def __float__(self) -> float:
        return self._rep.to_double()

    def __int__(self) -> int:
        """Truncate toward zero."""
        scaled = self._rep.signed_value()
        frac_bits = self._rep.fmt.frac_bits
        if frac_bits <= 0:
            return scaled << -frac_bits
        magnitude = abs(scaled) >> frac_bits
        return -magnitude if scaled < 0 else magnitude

    def __index__(self) -> int:
        """Unsigned bit pattern, for hex(), bin() and bit-field use."""
        return self._rep.bits()

    def __bool__(self) -> bool:
        return not self._rep.is_zero()

    def __len__(self) -> int:
        return self._rep.fmt.total_bits

    def __getitem__(self, key):
        """fp[i] is bit i (LSB 0) as a bool. fp[hi:lo] is bits hi down to lo, both included."""
        if isinstance(key, slice):
            if key.step is not None:
                raise ValueError("bit slices do not take a step")
            start = 0 if key.start is None else key.start
            stop = self._rep.fmt.total_bits - 1 if key.stop is None else key.stop
            return self._wrap(dispatch.bit_slice(self._rep, start, stop))
        if not _is_integer(key):
            raise TypeError(f"bit index must be an int, got {type(key).__name__}")
        return self._rep.index(int(key))

    def __str__(self) -> str:
        return str(self._rep.to_double())

    def __repr__(self) -> str:
        return f"FixedPoint({self.to_exact_string()}, format={self.format}, signed={self.is_signed})"

    def __reduce__(self):
        return (_restore, (self.to_state(),))

    def __copy__(self) -> "FixedPoint":
        return self.copy()

    def __deepcopy__(self, memo) -> "FixedPoint":
        return self.copy()
