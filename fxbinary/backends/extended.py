"""Fixed-point values of any width backed by Python ints."""

from __future__ import annotations

import numbers
from typing import Any, Dict

from fxbinary.backends.base import BackendValue
from fxbinary.core.formats import (
    Format,
    abs_format,
    add_format,
    div_format,
    mul_format,
    neg_format,
    signed_format,
)
from fxbinary.core.modes import OverflowEnum, RoundingEnum
from fxbinary.engine.overflow import check_overflow, wrap
from fxbinary.engine.rounding import quantize, shift_round


class ExtendedValue(BackendValue):
    """Scaled integer kept as a plain (signed) Python int, so no manual sign handling."""

    __slots__ = ("value",)

    tag = 2

    def __init__(self, value: int, fmt: Format):
        self.value = value
        self.fmt = fmt

    @classmethod
    def from_double(
        cls,
        value: numbers.Real,
        fmt: Format,
        overflow_mode: OverflowEnum = OverflowEnum.sat,
        round_mode: RoundingEnum = RoundingEnum.near_pos_inf,
    ) -> "ExtendedValue":
        return cls(check_overflow(quantize(value, fmt.frac_bits, round_mode), fmt, overflow_mode), fmt)

    @classmethod
    def from_bits(cls, raw: int, fmt: Format) -> "ExtendedValue":
        return cls(wrap(raw, fmt), fmt)

    @classmethod
    def from_state(cls, record: Dict[str, Any]) -> "ExtendedValue":
        fmt = Format(record["ib"], record["fb"], bool(record["sgn"]))
        return cls.from_bits(record["sv"], fmt)

    def signed_value(self) -> int:
        return self.value

    def bits(self) -> int:
        return self.value & self.fmt.mask

    def state_scaled_value(self) -> int:
        return self.value

    def copy(self) -> "ExtendedValue":
        return ExtendedValue(self.value, self.fmt)

    def to_signed(self) -> "ExtendedValue":
        return ExtendedValue(self.value, signed_format(self.fmt))

    def resize(self, fmt: Format, overflow_mode: OverflowEnum, round_mode: RoundingEnum) -> "ExtendedValue":
        # A negative drop count is an exact left shift.
        value = shift_round(self.value, self.fmt.frac_bits - fmt.frac_bits, round_mode)
        return ExtendedValue(check_overflow(value, fmt, overflow_mode), fmt)

    def _aligned(self, frac_bits: int) -> int:
        return self.value << (frac_bits - self.fmt.frac_bits)

    def add(self, other: "ExtendedValue") -> "ExtendedValue":
        fmt = add_format(self.fmt, other.fmt)
        return ExtendedValue(self._aligned(fmt.frac_bits) + other._aligned(fmt.frac_bits), fmt)

    def sub(self, other: "ExtendedValue") -> "ExtendedValue":
        fmt = add_format(self.fmt, other.fmt)
        value = self._aligned(fmt.frac_bits) - other._aligned(fmt.frac_bits)
        if not fmt.signed:
            value = wrap(value, fmt)
        return ExtendedValue(value, fmt)

    def mul(self, other: "ExtendedValue") -> "ExtendedValue":
        return ExtendedValue(self.value * other.value, mul_format(self.fmt, other.fmt))

    def div(self, other: "ExtendedValue") -> "ExtendedValue":
        if other.value == 0:
            raise ZeroDivisionError("fixed point division by zero")
        fmt = div_format(self.fmt, other.fmt)
        quotient = (abs(self.value) << other.fmt.total_bits) // abs(other.value)
        if (self.value < 0) != (other.value < 0):
            quotient = -quotient
        return ExtendedValue(quotient, fmt)

    def neg(self) -> "ExtendedValue":
        fmt = neg_format(self.fmt)
        value = -self.value
        if not fmt.signed:
            value = wrap(value, fmt)
        return ExtendedValue(value, fmt)

    def abs(self) -> "ExtendedValue":
        if self.value < 0:
            return self.neg()
        return ExtendedValue(self.value, abs_format(self.fmt, False))

    def lshift(self, n: int) -> "ExtendedValue":
        return ExtendedValue(wrap(self.value << n, self.fmt), self.fmt)

    def rshift(self, n: int) -> "ExtendedValue":
        return ExtendedValue(self.value >> n, self.fmt)

    def compare(self, other: "ExtendedValue") -> int:
        common = min(self.fmt.frac_bits, other.fmt.frac_bits)
        drop_a = self.fmt.frac_bits - common
        drop_b = other.fmt.frac_bits - common
        a = self.value >> drop_a
        b = other.value >> drop_b
        if a != b:
            return -1 if a < b else 1
        if self.value & ((1 << drop_a) - 1):
            return 1
        if other.value & ((1 << drop_b) - 1):
            return -1
        return 0

    def slice(self, hi: int, lo: int) -> "ExtendedValue":
        width = hi - lo + 1
        return ExtendedValue((self.value >> lo) & ((1 << width) - 1), Format(width, 0, False))
