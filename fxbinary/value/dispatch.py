"""Choose between compact and extended backends and line operands up before an operator.

Every operator goes through here: plain numbers are turned into backend values,
signedness is unified, mixed backends are promoted, and results that would not
fit the machine word are computed on the extended backend instead.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Callable, Dict, Optional, Tuple, Union

from fxbinary.backends.compact import CompactValue
from fxbinary.backends.extended import ExtendedValue
from fxbinary.core.formats import Format, add_format, div_format, mul_format
from fxbinary.core.modes import OverflowEnum, RoundingEnum
from fxbinary.core.word import WORD_BITS

logger = logging.getLogger(__name__)

Backend = Union[CompactValue, ExtendedValue]

_RESULT_FORMATS: Dict[str, Callable[[Format, Format], Format]] = {
    "add": add_format,
    "sub": add_format,
    "mul": mul_format,
    "div": div_format,
}


def fits_word(fmt: Format) -> bool:
    return fmt.total_bits <= WORD_BITS


def build_from_double(
    value: numbers.Real, fmt: Format, overflow_mode: OverflowEnum, round_mode: RoundingEnum
) -> Backend:
    if fits_word(fmt):
        return CompactValue.from_double(value, fmt, overflow_mode, round_mode)
    return ExtendedValue.from_double(value, fmt, overflow_mode, round_mode)


def build_from_bits(raw: int, fmt: Format) -> Backend:
    if fits_word(fmt):
        return CompactValue.from_bits(raw, fmt)
    return ExtendedValue.from_bits(raw, fmt)


def promote(rep: Backend) -> ExtendedValue:
    """Same value on the extended backend. Extended values pass through."""
    if isinstance(rep, ExtendedValue):
        return rep
    logger.debug("promoting %r to extended", rep)
    return ExtendedValue.from_bits(rep.bits(), rep.fmt)


def demote_if_fits(rep: Backend) -> Backend:
    if isinstance(rep, ExtendedValue) and fits_word(rep.fmt):
        logger.debug("demoting %r to compact", rep)
        return CompactValue.from_bits(rep.bits(), rep.fmt)
    return rep


def number_format(value: numbers.Real) -> Format:
    """Smallest signed format holding a plain int or float exactly."""
    if isinstance(value, numbers.Integral):
        return Format(abs(int(value)).bit_length() + 1, 0, True)
    f = float(value)
    if not math.isfinite(f):
        raise ValueError(f"cannot convert {f} to fixed point")
    num, den = f.as_integer_ratio()
    frac_bits = den.bit_length() - 1
    int_bits = max(abs(num).bit_length() - frac_bits, 0) + 1
    return Format(int_bits, frac_bits, True)


def coerce_number(value: object) -> Optional[Backend]:
    """Backend value for a plain number, or None when the type is not supported."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    fmt = number_format(value)
    return build_from_double(value, fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf)


def to_signed(rep: Backend) -> Backend:
    if rep.fmt.signed:
        return rep
    if rep.fmt.total_bits + 1 > WORD_BITS:
        rep = promote(rep)
    return rep.to_signed()


def prepare_binary(a: Backend, b: Backend) -> Tuple[Backend, Backend]:
    """Give both operands the same signedness and the same backend."""
    if a.fmt.signed != b.fmt.signed:
        a, b = to_signed(a), to_signed(b)
    if type(a) is not type(b):
        a, b = promote(a), promote(b)
    return a, b


def binary_op(op: str, a: Backend, b: Backend) -> Backend:
    a, b = prepare_binary(a, b)
    if isinstance(a, CompactValue):
        needed = _RESULT_FORMATS[op](a.fmt, b.fmt).total_bits
        if op == "div":
            # The shifted numerator needs both widths plus a sign bit of native room.
            needed = max(needed, a.fmt.total_bits + b.fmt.total_bits + 1)
        if needed > WORD_BITS:
            a, b = promote(a), promote(b)
    return getattr(a, op)(b)


def negate(rep: Backend) -> Backend:
    if rep.fmt.total_bits + 1 > WORD_BITS:
        rep = promote(rep)
    return rep.neg()


def absolute(rep: Backend) -> Backend:
    if rep.fmt.total_bits + 1 > WORD_BITS:
        rep = promote(rep)
    return rep.abs()


def resize(rep: Backend, fmt: Format, overflow_mode: OverflowEnum, round_mode: RoundingEnum) -> Backend:
    if not fits_word(fmt):
        rep = promote(rep)
    return demote_if_fits(rep.resize(fmt, overflow_mode, round_mode))


def compare(a: Backend, b: Backend) -> int:
    a, b = prepare_binary(a, b)
    return a.compare(b)


def bit_slice(rep: Backend, hi: int, lo: int) -> Backend:
    """Bits hi..lo (inclusive, either order) as an unsigned integer value."""
    if hi < lo:
        hi, lo = lo, hi
    if lo < 0:
        raise IndexError(f"negative bit index {lo}")
    hi = min(hi, rep.fmt.total_bits - 1)
    if lo > hi:
        raise IndexError(f"bit index {lo} out of range for {rep.fmt.total_bits} bits")
    return demote_if_fits(rep.slice(hi, lo))
