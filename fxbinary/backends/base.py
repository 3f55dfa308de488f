"""Queries shared by the compact and extended backends."""

from __future__ import annotations

from typing import Any, Dict

from fxbinary.core.formats import Format
from fxbinary.engine.render import render_exact, to_float


class BackendValue:
    """A scaled integer in a Format. Subclasses store the integer their own way."""

    __slots__ = ("fmt",)

    # Representation tag written to state records.
    tag = 0

    def signed_value(self) -> int:
        """The scaled integer read according to the format's signedness."""
        raise NotImplementedError

    def bits(self) -> int:
        """The low total_bits of the stored pattern, as an unsigned int."""
        raise NotImplementedError

    def state_scaled_value(self) -> int:
        raise NotImplementedError

    def is_zero(self) -> bool:
        return self.signed_value() == 0

    def bits_to_signed(self) -> int:
        """Read the stored bit pattern as two's complement, whatever the signedness."""
        raw = self.bits()
        if raw & self.fmt.sign_bit:
            return raw - (1 << self.fmt.total_bits)
        return raw

    def index(self, i: int) -> bool:
        if i < 0 or i >= self.fmt.total_bits:
            raise IndexError(f"bit index {i} out of range for {self.fmt.total_bits} bits")
        return bool((self.bits() >> i) & 1)

    def to_double(self) -> float:
        return to_float(self.signed_value(), self.fmt.frac_bits)

    def to_exact_string(self) -> str:
        return render_exact(self.signed_value(), self.fmt.frac_bits)

    def to_state(self) -> Dict[str, Any]:
        return {
            "ib": self.fmt.int_bits,
            "fb": self.fmt.frac_bits,
            "sv": self.state_scaled_value(),
            "sgn": self.fmt.signed,
            "bid": self.tag,
        }

    def __repr__(self) -> str:
        f: Format = self.fmt
        return f"{type(self).__name__}({self.to_exact_string()}, ({f.int_bits}, {f.frac_bits}), signed={f.signed})"
