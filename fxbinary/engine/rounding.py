"""Rounding applied when a resize drops fractional bits."""

from __future__ import annotations

import math
import numbers

from fxbinary.core.modes import RoundingEnum


def round_increment(mode: RoundingEnum, chopped: int, num_chopped: int, new_lsb: bool, negative: bool) -> int:
    """Return 0 or 1 to add to a value after an arithmetic right shift.

    `chopped` is the unsigned pattern of the `num_chopped` discarded bits, `new_lsb`
    the lowest bit kept and `negative` the sign of the value before the shift.
    """
    if num_chopped <= 0:
        return 0
    if mode == RoundingEnum.direct_neg_inf:
        return 0
    if mode == RoundingEnum.direct_zero:
        return 1 if negative and chopped != 0 else 0

    half = 1 << (num_chopped - 1)
    if not chopped & half:
        return 0
    below_half = chopped & (half - 1)

    if mode == RoundingEnum.near_pos_inf:
        return 1
    if mode == RoundingEnum.near_zero:
        # Ties go toward zero: negatives still step up, positives only if past the tie.
        return 1 if negative or below_half else 0
    if mode == RoundingEnum.near_even:
        return 1 if below_half or new_lsb else 0
    raise ValueError(f"unknown rounding mode: {mode!r}")


def shift_round(value: int, num_chopped: int, mode: RoundingEnum) -> int:
    """Right shift a signed Python int by `num_chopped` bits, rounding per `mode`."""
    if num_chopped <= 0:
        return value << -num_chopped
    shifted = value >> num_chopped
    chopped = value & ((1 << num_chopped) - 1)
    return shifted + round_increment(mode, chopped, num_chopped, bool(shifted & 1), value < 0)


def quantize(value: numbers.Real, frac_bits: int, mode: RoundingEnum) -> int:
    """Scale a real number by 2**frac_bits and round it to an integer.

    Floats are binary fractions, so the scaling is exact and the only
    approximation is the rounding step itself.
    """
    if isinstance(value, numbers.Integral):
        num, den = int(value), 1
    else:
        f = float(value)
        if not math.isfinite(f):
            raise ValueError(f"cannot convert {f} to fixed point")
        num, den = f.as_integer_ratio()
    den_bits = den.bit_length() - 1
    return shift_round(num, den_bits - frac_bits, mode)
