"""Fixed-point formats and the bit-growth rules of each operator."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from fxbinary.core.errors import FormatError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Format:
    """(int_bits, frac_bits, signed). Only the sum of the two widths must be >= 1."""

    int_bits: int
    frac_bits: int
    signed: bool = True

    def __post_init__(self) -> None:
        if not _is_int(self.int_bits) or not _is_int(self.frac_bits):
            raise FormatError("int_bits and frac_bits must be integers")
        if self.int_bits + self.frac_bits < 1:
            raise FormatError(
                f"total bits must be at least 1, got int_bits={self.int_bits} frac_bits={self.frac_bits}"
            )

    @property
    def total_bits(self) -> int:
        return self.int_bits + self.frac_bits

    @property
    def mask(self) -> int:
        return (1 << self.total_bits) - 1

    @property
    def sign_bit(self) -> int:
        return 1 << (self.total_bits - 1)

    @property
    def max_scaled(self) -> int:
        if self.signed:
            return (1 << (self.total_bits - 1)) - 1
        return self.mask

    @property
    def min_scaled(self) -> int:
        if self.signed:
            return -(1 << (self.total_bits - 1))
        return 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.int_bits, self.frac_bits)

    def with_signed(self, signed: bool) -> "Format":
        return replace(self, signed=signed)

    @classmethod
    def of(cls, obj: Any, signed: bool = True) -> "Format":
        """Build a Format from a (int_bits, frac_bits) tuple, a Format or anything with a `fmt`.

        Tuples take the signedness passed in; other sources keep their own width but
        also take `signed`, since a resize never changes signedness.
        """
        if isinstance(obj, Format):
            return obj.with_signed(signed)
        fmt = getattr(obj, "fmt", None)
        if isinstance(fmt, Format):
            return fmt.with_signed(signed)
        if not isinstance(obj, tuple):
            raise FormatError("format must be a (int_bits, frac_bits) tuple or a fixed point instance")
        if len(obj) != 2:
            raise FormatError(f"format tuple must have length 2, got {len(obj)}")
        return cls(obj[0], obj[1], signed)


def add_format(a: Format, b: Format) -> Format:
    """Result format of add and subtract. Wide enough that neither can overflow."""
    return Format(max(a.int_bits, b.int_bits) + 1, max(a.frac_bits, b.frac_bits), a.signed)


def mul_format(a: Format, b: Format) -> Format:
    return Format(a.int_bits + b.int_bits, a.frac_bits + b.frac_bits, a.signed)


def div_format(a: Format, b: Format) -> Format:
    """Quotient format for (|num| << total_b) // |den| truncated toward zero."""
    extra = 1 if a.signed else 0
    return Format(a.int_bits + b.frac_bits + extra, a.frac_bits + b.int_bits, a.signed)


def neg_format(a: Format) -> Format:
    return Format(a.int_bits + 1, a.frac_bits, a.signed)


def abs_format(a: Format, negative: bool) -> Format:
    if negative:
        return neg_format(a)
    return a


def signed_format(a: Format) -> Format:
    """Signed format able to hold every value of an unsigned one."""
    if a.signed:
        return a
    return Format(a.int_bits + 1, a.frac_bits, True)
