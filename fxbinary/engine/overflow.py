"""Overflow handling once a value has been moved into a new format."""

from __future__ import annotations

from fxbinary.core.errors import FpBinaryOverflowError
from fxbinary.core.formats import Format
from fxbinary.core.modes import OverflowEnum


def wrap(value: int, fmt: Format) -> int:
    """Keep the low total_bits of `value`, reading the sign bit back for signed formats."""
    masked = value & fmt.mask
    if fmt.signed and masked & fmt.sign_bit:
        return masked - (1 << fmt.total_bits)
    return masked


def check_overflow(
    value: int,
    fmt: Format,
    mode: OverflowEnum,
    force_positive: bool = False,
    force_negative: bool = False,
) -> int:
    """Bring a scaled integer back inside `fmt`.

    The force flags mark an overflow already detected by the caller, for values whose
    upper bits have been lost and so can no longer be compared against the limits.
    """
    too_big = force_positive or value > fmt.max_scaled
    too_small = force_negative or value < fmt.min_scaled
    if not too_big and not too_small:
        return value

    if mode == OverflowEnum.wrap:
        return wrap(value, fmt)
    if mode == OverflowEnum.sat:
        return fmt.max_scaled if too_big else fmt.min_scaled
    if mode == OverflowEnum.excep:
        raise FpBinaryOverflowError(
            f"fixed point resize overflow: value does not fit ({fmt.int_bits}, {fmt.frac_bits})"
        )
    raise ValueError(f"unknown overflow mode: {mode!r}")
