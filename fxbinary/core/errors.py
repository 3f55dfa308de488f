"""Exception types raised by the fixed-point engine."""

from __future__ import annotations


class FormatError(TypeError, ValueError):
    """Bad (int_bits, frac_bits) pair: total width below 1 or a malformed tuple."""


class FpBinaryOverflowError(OverflowError):
    """Raised when a value leaves its format and the overflow mode is excep."""


class PlatformWidthError(ValueError):
    """A compact state record is wider than the native word of this platform."""

    def __init__(self, total_bits: int, word_bits: int):
        super().__init__(f"compact record needs {total_bits} bits, native word has {word_bits}")
        self.total_bits = total_bits
        self.word_bits = word_bits
