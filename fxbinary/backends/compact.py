"""Fixed-point values held in a single machine word.

The word always carries the two's-complement pattern sign-extended over all
WORD_BITS for signed formats, so native add, subtract and multiply give the
right answer without looking at the format. Unsigned values keep the bits
above total_bits clear.
"""

from __future__ import annotations

import numbers
from typing import Any, Dict

from fxbinary.backends.base import BackendValue
from fxbinary.core.errors import PlatformWidthError
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
from fxbinary.core.word import WORD_BITS, ZERO, Word
from fxbinary.engine.overflow import check_overflow
from fxbinary.engine.rounding import quantize, round_increment, shift_round


def _read(word: Word, fmt: Format) -> int:
    return word.as_signed() if fmt.signed else word.as_unsigned()


def _store(value: int, fmt: Format) -> Word:
    """Word for a value already known to lie inside fmt."""
    if fmt.signed:
        return Word.from_int(value)
    return Word.from_int(value).truncate(fmt.total_bits)


class CompactValue(BackendValue):
    __slots__ = ("word",)

    tag = 1

    def __init__(self, word: Word, fmt: Format):
        if fmt.total_bits > WORD_BITS:
            raise ValueError(f"compact values hold at most {WORD_BITS} bits, got {fmt.total_bits}")
        self.word = word
        self.fmt = fmt

    @classmethod
    def from_double(
        cls,
        value: numbers.Real,
        fmt: Format,
        overflow_mode: OverflowEnum = OverflowEnum.sat,
        round_mode: RoundingEnum = RoundingEnum.near_pos_inf,
    ) -> "CompactValue":
        scaled = check_overflow(quantize(value, fmt.frac_bits, round_mode), fmt, overflow_mode)
        return cls(_store(scaled, fmt), fmt)

    @classmethod
    def from_bits(cls, raw: int, fmt: Format) -> "CompactValue":
        word = Word.from_int(raw).truncate(fmt.total_bits)
        if fmt.signed:
            word = word.sign_extend(fmt.total_bits)
        return cls(word, fmt)

    @classmethod
    def from_state(cls, record: Dict[str, Any]) -> "CompactValue":
        fmt = Format(record["ib"], record["fb"], bool(record["sgn"]))
        if fmt.total_bits > WORD_BITS:
            raise PlatformWidthError(fmt.total_bits, WORD_BITS)
        return cls.from_bits(record["sv"], fmt)

    # Queries

    def signed_value(self) -> int:
        return _read(self.word, self.fmt)

    def bits(self) -> int:
        return self.word.truncate(self.fmt.total_bits).as_unsigned()

    def state_scaled_value(self) -> int:
        return self.word.as_unsigned()

    def is_zero(self) -> bool:
        return not self.word

    def is_negative(self) -> bool:
        return self.fmt.signed and self.word.is_negative()

    def copy(self) -> "CompactValue":
        return CompactValue(Word(self.word.bits), self.fmt)

    def to_signed(self) -> "CompactValue":
        """Same value in a signed format one int bit wider."""
        return CompactValue(self.word, signed_format(self.fmt))

    # Resize

    def resize(self, fmt: Format, overflow_mode: OverflowEnum, round_mode: RoundingEnum) -> "CompactValue":
        word = self.word
        negative = self.is_negative()
        force_positive = force_negative = False
        shift = fmt.frac_bits - self.fmt.frac_bits

        if shift > 0:
            # Left shifts can push significant bits off the top of the word. Those bits
            # must match the sign pattern, otherwise the word no longer holds the value.
            lost_mask = ~Word.mask(WORD_BITS - shift)
            lost = word & lost_mask
            shifted = word.lshift(shift)
            expected = lost_mask if negative else ZERO
            if lost != expected or (fmt.signed and shifted.is_negative() != negative):
                force_negative = negative
                force_positive = not negative
            word = shifted
        elif shift <= -WORD_BITS:
            # Every stored bit is dropped. The half bit may sit above the word,
            # in the sign extension, so round on the signed value.
            word = Word.from_int(shift_round(self.signed_value(), -shift, round_mode))
        elif shift < 0:
            k = -shift
            shifted = word.arshift(k) if self.fmt.signed else word.rshift(k)
            chopped = (word & Word.mask(k)).as_unsigned()
            inc = round_increment(round_mode, chopped, k, shifted.bit(0), negative)
            word = shifted + Word(inc)

        value = check_overflow(_read(word, fmt), fmt, overflow_mode, force_positive, force_negative)
        return CompactValue(_store(value, fmt), fmt)

    # Arithmetic

    def _aligned(self, frac_bits: int) -> Word:
        return self.word.lshift(frac_bits - self.fmt.frac_bits)

    def add(self, other: "CompactValue") -> "CompactValue":
        fmt = add_format(self.fmt, other.fmt)
        word = self._aligned(fmt.frac_bits) + other._aligned(fmt.frac_bits)
        return CompactValue(word, fmt)

    def sub(self, other: "CompactValue") -> "CompactValue":
        fmt = add_format(self.fmt, other.fmt)
        word = self._aligned(fmt.frac_bits) - other._aligned(fmt.frac_bits)
        if not fmt.signed:
            # Unsigned results below zero wrap around like the hardware would.
            value = check_overflow(word.as_unsigned(), fmt, OverflowEnum.wrap)
            word = _store(value, fmt)
        return CompactValue(word, fmt)

    def mul(self, other: "CompactValue") -> "CompactValue":
        return CompactValue(self.word * other.word, mul_format(self.fmt, other.fmt))

    def div(self, other: "CompactValue") -> "CompactValue":
        if other.is_zero():
            raise ZeroDivisionError("fixed point division by zero")
        fmt = div_format(self.fmt, other.fmt)
        num = self.signed_value()
        den = other.signed_value()
        quotient = Word(abs(num)).lshift(other.fmt.total_bits) // Word(abs(den))
        if (num < 0) != (den < 0):
            quotient = -quotient
        return CompactValue(quotient, fmt)

    def neg(self) -> "CompactValue":
        fmt = neg_format(self.fmt)
        word = -self.word
        if not fmt.signed:
            word = _store(check_overflow(word.as_unsigned(), fmt, OverflowEnum.wrap), fmt)
        return CompactValue(word, fmt)

    def abs(self) -> "CompactValue":
        if self.is_negative():
            return self.neg()
        return CompactValue(self.word, abs_format(self.fmt, False))

    def lshift(self, n: int) -> "CompactValue":
        word = self.word.lshift(n)
        if self.fmt.signed:
            word = word.sign_extend(self.fmt.total_bits)
        else:
            word = word.truncate(self.fmt.total_bits)
        return CompactValue(word, self.fmt)

    def rshift(self, n: int) -> "CompactValue":
        word = self.word.arshift(n) if self.fmt.signed else self.word.rshift(n)
        return CompactValue(word, self.fmt)

    # Comparison and bits

    def compare(self, other: "CompactValue") -> int:
        """-1, 0 or 1. Aligns by right shifting only so nothing is lost off the top."""
        common = min(self.fmt.frac_bits, other.fmt.frac_bits)
        drop_a = self.fmt.frac_bits - common
        drop_b = other.fmt.frac_bits - common
        if self.fmt.signed:
            a = self.word.arshift(drop_a).as_signed()
            b = other.word.arshift(drop_b).as_signed()
        else:
            a = self.word.rshift(drop_a).as_unsigned()
            b = other.word.rshift(drop_b).as_unsigned()
        if a != b:
            return -1 if a < b else 1

        # Only one side can have bits left below the common point.
        if self.word & Word.mask(drop_a):
            return 1
        if other.word & Word.mask(drop_b):
            return -1
        return 0

    def slice(self, hi: int, lo: int) -> "CompactValue":
        width = hi - lo + 1
        word = self.word.rshift(lo).truncate(width)
        return CompactValue(word, Format(width, 0, False))
