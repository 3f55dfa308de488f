"""Complex fixed-point numbers: a real and an imaginary FixedPoint with one format.

Both parts always share the same format and signedness. Operators follow the
FixedPoint format rules part by part, so a complex multiply grows one int bit
more than a real multiply (for the add of the cross terms).
"""

from __future__ import annotations

import cmath
import math
import numbers
from typing import Any, Dict, Optional, Tuple

from fxbinary.core.modes import ModeLike, OverflowEnum, RoundingEnum
from fxbinary.value.dispatch import number_format
from fxbinary.value.fixedpoint import FixedPoint


def _from_number(value: numbers.Real) -> FixedPoint:
    """FixedPoint holding a plain number with as few bits as possible."""
    fmt = number_format(value)
    return FixedPoint.from_double(value, fmt.int_bits, fmt.frac_bits)


def _same_format(real: FixedPoint, imag: FixedPoint) -> Tuple[FixedPoint, FixedPoint]:
    """Grow both parts to the larger int bits and frac bits of the two."""
    fmt = (max(real.format[0], imag.format[0]), max(real.format[1], imag.format[1]))
    return (
        real.resize(fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf),
        imag.resize(fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf),
    )


def _restore(real: FixedPoint, imag: FixedPoint) -> "FixedPointComplex":
    return FixedPointComplex._from_parts(real, imag)


class FixedPointComplex:
    """FixedPointComplex(int_bits=None, frac_bits=None, value=0j, real_fp=None, imag_fp=None,
    real_bit_field=None, imag_bit_field=None, format_inst=None)

    Build from a complex `value` in (int_bits, frac_bits), from a pair of
    FixedPoints (`real_fp`, `imag_fp`) or from raw bit fields. `format_inst`
    (a FixedPoint or FixedPointComplex) supplies the format instead of
    int_bits/frac_bits. With no format at all, the smallest format holding both
    parts of `value` is used. Values are quantized with saturation and
    round-half-up.
    """

    __slots__ = ("_real", "_imag")

    def __init__(
        self,
        int_bits: Optional[int] = None,
        frac_bits: Optional[int] = None,
        value: numbers.Complex = 0j,
        real_fp: Optional[FixedPoint] = None,
        imag_fp: Optional[FixedPoint] = None,
        real_bit_field: Optional[int] = None,
        imag_bit_field: Optional[int] = None,
        format_inst: Any = None,
    ):
        if (int_bits is None) != (frac_bits is None):
            raise TypeError("both int_bits and frac_bits must be given")
        if (real_fp is None) != (imag_fp is None):
            raise TypeError("both real_fp and imag_fp must be given")
        if (real_bit_field is None) != (imag_bit_field is None):
            raise TypeError("both real_bit_field and imag_bit_field must be given")

        if isinstance(format_inst, FixedPointComplex):
            format_inst = format_inst.real
        elif format_inst is not None and not isinstance(format_inst, FixedPoint):
            raise TypeError("format_inst must be a FixedPoint or FixedPointComplex instance")

        if real_fp is not None:
            if not isinstance(real_fp, FixedPoint) or not isinstance(imag_fp, FixedPoint):
                raise TypeError("real_fp and imag_fp must be FixedPoint instances")
            if real_fp.is_signed != imag_fp.is_signed:
                raise ValueError("real_fp and imag_fp must have the same signedness")
            if format_inst is not None or int_bits is not None:
                fmt = format_inst if format_inst is not None else (int_bits, frac_bits)
                self._real = real_fp.resize(fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf)
                self._imag = imag_fp.resize(fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf)
            else:
                self._real, self._imag = _same_format(real_fp, imag_fp)
            return

        if isinstance(value, bool) or not isinstance(value, numbers.Complex):
            raise TypeError(f"value must be a complex number, got {type(value).__name__}")
        value = complex(value)

        if int_bits is not None or format_inst is not None:
            if int_bits is None:
                int_bits, frac_bits = format_inst.format
            self._real = FixedPoint(int_bits, frac_bits, value=value.real, bit_field=real_bit_field,
                                    format_inst=format_inst)
            self._imag = FixedPoint(int_bits, frac_bits, value=value.imag, bit_field=imag_bit_field,
                                    format_inst=format_inst)
            return

        if real_bit_field is not None:
            raise TypeError("bit fields need int_bits/frac_bits or format_inst")
        self._real, self._imag = _same_format(_from_number(value.real), _from_number(value.imag))

    @classmethod
    def _from_parts(cls, real: FixedPoint, imag: FixedPoint) -> "FixedPointComplex":
        obj = cls.__new__(cls)
        obj._real = real
        obj._imag = imag
        return obj

    @classmethod
    def _cast(cls, value: Any) -> Optional["FixedPointComplex"]:
        """Complex form of an operand, or None when the type is not supported."""
        if isinstance(value, FixedPointComplex):
            return value
        if isinstance(value, FixedPoint):
            zero = FixedPoint(1, 0, signed=value.is_signed)
            return cls._from_parts(*_same_format(value, zero))
        if isinstance(value, numbers.Complex) and not isinstance(value, bool):
            value = complex(value)
            return cls._from_parts(*_same_format(_from_number(value.real), _from_number(value.imag)))
        return None

    # Queries

    @property
    def real(self) -> FixedPoint:
        return self._real

    @property
    def imag(self) -> FixedPoint:
        return self._imag

    @property
    def format(self) -> Tuple[int, int]:
        return self._real.format

    @property
    def is_signed(self) -> bool:
        return self._real.is_signed

    def resize(
        self,
        format: Any,
        overflow_mode: ModeLike = OverflowEnum.wrap,
        round_mode: ModeLike = RoundingEnum.direct_neg_inf,
    ) -> "FixedPointComplex":
        """Both parts moved to a new format, as FixedPoint.resize does for one."""
        if isinstance(format, FixedPointComplex):
            format = format.real
        real = self._real.resize(format, overflow_mode, round_mode)
        imag = self._imag.resize(format, overflow_mode, round_mode)
        return self._from_parts(real, imag)

    def conjugate(self) -> "FixedPointComplex":
        imag = -self._imag
        real = self._real.resize(imag, OverflowEnum.wrap, RoundingEnum.direct_neg_inf)
        return self._from_parts(real, imag)

    def _energy(self) -> FixedPoint:
        return self._real * self._real + self._imag * self._imag

    def copy(self) -> "FixedPointComplex":
        return self._from_parts(self._real.copy(), self._imag.copy())

    def to_state(self) -> Dict[str, Any]:
        return {"real": self._real.to_state(), "imag": self._imag.to_state()}

    @classmethod
    def from_state(cls, record: Dict[str, Any]) -> "FixedPointComplex":
        return cls._from_parts(FixedPoint.from_state(record["real"]), FixedPoint.from_state(record["imag"]))

    # Arithmetic

    def _operands(self, other: Any, reflected: bool):
        rhs = self._cast(other)
        if rhs is None:
            return None
        return (rhs, self) if reflected else (self, rhs)

    def _add(self, other: Any, reflected: bool = False):
        pair = self._operands(other, reflected)
        if pair is None:
            return NotImplemented
        a, b = pair
        return self._from_parts(a._real + b._real, a._imag + b._imag)

    def _sub(self, other: Any, reflected: bool = False):
        pair = self._operands(other, reflected)
        if pair is None:
            return NotImplemented
        a, b = pair
        return self._from_parts(a._real - b._real, a._imag - b._imag)

    def _mul(self, other: Any, reflected: bool = False):
        pair = self._operands(other, reflected)
        if pair is None:
            return NotImplemented
        a, b = pair
        real = a._real * b._real - a._imag * b._imag
        imag = a._real * b._imag + a._imag * b._real
        return self._from_parts(real, imag)

    def _div(self, other: Any, reflected: bool = False):
        # (a / b) = a * conj(b) / |b|^2, each part divided by the real energy.
        pair = self._operands(other, reflected)
        if pair is None:
            return NotImplemented
        a, b = pair
        product = a._mul(b.conjugate())
        energy = b._energy()
        return self._from_parts(product._real / energy, product._imag / energy)

    def __add__(self, other):
        return self._add(other)

    def __radd__(self, other):
        return self._add(other, reflected=True)

    def __sub__(self, other):
        return self._sub(other)

    def __rsub__(self, other):
        return self._sub(other, reflected=True)

    def __mul__(self, other):
        return self._mul(other)

    def __rmul__(self, other):
        return self._mul(other, reflected=True)

    def __truediv__(self, other):
        return self._div(other)

    def __rtruediv__(self, other):
        return self._div(other, reflected=True)

    def __pow__(self, exponent, modulo=None):
        """Only squaring is supported."""
        if modulo is not None or exponent != 2:
            return NotImplemented
        return self._mul(self)

    def __rpow__(self, base):
        return base ** complex(self)

    def __neg__(self) -> "FixedPointComplex":
        return self._from_parts(-self._real, -self._imag)

    def __pos__(self) -> "FixedPointComplex":
        return self.copy()

    def __abs__(self) -> FixedPoint:
        """Magnitude, estimated through a float square root, in the energy's format."""
        energy = self._energy()
        return FixedPoint(value=math.sqrt(float(energy)), format_inst=energy)

    def __lshift__(self, n):
        if not isinstance(n, numbers.Integral):
            return NotImplemented
        return self._from_parts(self._real << n, self._imag << n)

    def __rshift__(self, n):
        if not isinstance(n, numbers.Integral):
            return NotImplemented
        return self._from_parts(self._real >> n, self._imag >> n)

    # Comparison

    def __eq__(self, other):
        if isinstance(other, numbers.Number) and not cmath.isfinite(complex(other)):
            return False
        rhs = self._cast(other)
        if rhs is None:
            return NotImplemented
        return self._real == rhs._real and self._imag == rhs._imag

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self) -> int:
        # Equal values give equal floats, which keeps hashes in line with complex.
        return hash(complex(self))

    # Conversions

    def __complex__(self) -> complex:
        return complex(float(self._real), float(self._imag))

    def __bool__(self) -> bool:
        return bool(self._real) or bool(self._imag)

    def _join(self, real: str, imag: str) -> str:
        sign = "" if self._imag < 0 else "+"
        return f"({real}{sign}{imag}j)"

    def to_exact_string(self) -> str:
        return self._join(self._real.to_exact_string(), self._imag.to_exact_string())

    def __str__(self) -> str:
        return self._join(str(self._real), str(self._imag))

    def __repr__(self) -> str:
        return f"FixedPointComplex({self.to_exact_string()}, format={self.format}, signed={self.is_signed})"

    def __reduce__(self):
        return (_restore, (self._real, self._imag))

    def __copy__(self) -> "FixedPointComplex":
        return self.copy()

    def __deepcopy__(self, memo) -> "FixedPointComplex":
        return self.copy()
