"""Exact decimal text for a scaled integer."""

from __future__ import annotations


def render_exact(scaled_value: int, frac_bits: int) -> str:
    """Render scaled_value / 2**frac_bits with every fractional digit it needs.

    Each binary fraction digit needs exactly one decimal digit, because
    r / 2**n == r * 5**n / 10**n. Trailing zero digits are dropped but at least
    one digit always follows the point.
    """
    if frac_bits < 0:
        scaled_value <<= -frac_bits
        frac_bits = 0

    negative = scaled_value < 0
    magnitude = -scaled_value if negative else scaled_value
    int_part = magnitude >> frac_bits
    frac_part = (magnitude & ((1 << frac_bits) - 1)) * 5 ** frac_bits

    places = frac_bits
    while places > 0 and frac_part % 10 == 0:
        frac_part //= 10
        places -= 1

    frac_text = str(frac_part).zfill(places) if places else "0"
    sign = "-" if negative else ""
    return f"{sign}{int_part}.{frac_text}"


def to_float(scaled_value: int, frac_bits: int) -> float:
    """Nearest double to scaled_value / 2**frac_bits."""
    if frac_bits >= 0:
        return scaled_value / (1 << frac_bits)
    return float(scaled_value << -frac_bits)
