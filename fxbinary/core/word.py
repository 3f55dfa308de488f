"""Fixed-width unsigned machine word with explicit two's-complement views."""

from __future__ import annotations

WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1
WORD_SIGN = 1 << (WORD_BITS - 1)


def _width_mask(width: int) -> int:
    if width >= WORD_BITS:
        return WORD_MASK
    if width <= 0:
        return 0
    return (1 << width) - 1


class Word:
    """An unsigned WORD_BITS integer. Every operation wraps modulo 2**WORD_BITS."""

    __slots__ = ("bits",)

    def __init__(self, bits: int = 0):
        self.bits = bits & WORD_MASK

    @classmethod
    def from_int(cls, value: int) -> "Word":
        """Two's-complement pattern of any Python int, truncated to the word."""
        return cls(value)

    @classmethod
    def mask(cls, width: int) -> "Word":
        return cls(_width_mask(width))

    def as_unsigned(self) -> int:
        return self.bits

    def as_signed(self) -> int:
        if self.bits & WORD_SIGN:
            return self.bits - (1 << WORD_BITS)
        return self.bits

    def is_negative(self) -> bool:
        return bool(self.bits & WORD_SIGN)

    def truncate(self, width: int) -> "Word":
        """Keep the low `width` bits, clearing the rest."""
        return Word(self.bits & _width_mask(width))

    def sign_extend(self, width: int) -> "Word":
        """Copy bit `width - 1` into every bit above it."""
        if width >= WORD_BITS:
            return Word(self.bits)
        low = self.bits & _width_mask(width)
        if low & (1 << (width - 1)):
            return Word(low | (WORD_MASK & ~_width_mask(width)))
        return Word(low)

    def bit(self, index: int) -> bool:
        return bool((self.bits >> index) & 1)

    def lshift(self, n: int) -> "Word":
        if n >= WORD_BITS:
            return Word(0)
        return Word(self.bits << n)

    def rshift(self, n: int) -> "Word":
        """Logical right shift."""
        if n >= WORD_BITS:
            return Word(0)
        return Word(self.bits >> n)

    def arshift(self, n: int) -> "Word":
        """Arithmetic right shift, replicating the top bit."""
        if n >= WORD_BITS:
            return Word(WORD_MASK if self.is_negative() else 0)
        return Word(self.as_signed() >> n)

    def __add__(self, other: "Word") -> "Word":
        return Word(self.bits + other.bits)

    def __sub__(self, other: "Word") -> "Word":
        return Word(self.bits - other.bits)

    def __mul__(self, other: "Word") -> "Word":
        return Word(self.bits * other.bits)

    def __floordiv__(self, other: "Word") -> "Word":
        return Word(self.bits // other.bits)

    def __neg__(self) -> "Word":
        return Word(-self.bits)

    def __invert__(self) -> "Word":
        return Word(~self.bits)

    def __and__(self, other: "Word") -> "Word":
        return Word(self.bits & other.bits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self) -> int:
        return hash(self.bits)

    def __bool__(self) -> bool:
        return self.bits != 0

    def __repr__(self) -> str:
        return f"Word(0x{self.bits:016X})"


ZERO = Word(0)