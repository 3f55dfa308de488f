"""Little-endian byte packing of fixed-point values for test benches."""

from __future__ import annotations

import numbers
from pathlib import Path
from typing import Iterable, List, Union

from fxbinary.core.formats import Format
from fxbinary.core.modes import OverflowEnum, RoundingEnum
from fxbinary.value.fixedpoint import FixedPoint


def byte_width(fmt: Format) -> int:
    return (fmt.total_bits + 7) // 8


def _to_bits(value: Union[FixedPoint, numbers.Real], fmt: Format) -> int:
    if isinstance(value, FixedPoint):
        if value.fmt != fmt:
            value = value.resize(fmt, OverflowEnum.sat, RoundingEnum.near_pos_inf)
        return value.__index__()
    q = FixedPoint.from_double(value, fmt.int_bits, fmt.frac_bits, fmt.signed)
    return q.__index__()


def pack_values(values: Iterable[Union[FixedPoint, numbers.Real]], fmt: Format) -> bytes:
    """Pack values into little-endian two's-complement bytes, ceil(total_bits / 8) per value.

    Floats are quantized with saturation and round-half-up, FixedPoint values in
    another format are resized the same way.
    """
    step = byte_width(fmt)
    out = bytearray()
    for v in values:
        out.extend(_to_bits(v, fmt).to_bytes(step, byteorder="little", signed=False))
    return bytes(out)


def unpack_ints(payload: bytes, fmt: Format) -> List[int]:
    """Unpack little-endian bytes into scaled integers (signed when the format is)."""
    step = byte_width(fmt)
    if len(payload) % step:
        raise ValueError(f"payload length {len(payload)} is not a multiple of {step}")
    out: List[int] = []
    for i in range(0, len(payload), step):
        raw = int.from_bytes(payload[i : i + step], byteorder="little", signed=False) & fmt.mask
        if fmt.signed and raw & fmt.sign_bit:
            raw = raw - (1 << fmt.total_bits)
        out.append(raw)
    return out


def unpack_values(payload: bytes, fmt: Format) -> List[FixedPoint]:
    return [FixedPoint.from_bits(raw, fmt.int_bits, fmt.frac_bits, fmt.signed) for raw in unpack_ints(payload, fmt)]


def write_hex_bytes(path: str | Path, data: bytes) -> None:
    """One byte per line, uppercase hex, as read by $readmemh."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        for b in data:
            f.write(f"{b:02X}\n")


def read_hex_bytes(path: str | Path) -> bytes:
    data = []
    for line in Path(path).read_text().splitlines():
        s = line.strip()
        if not s:
            continue
        data.append(int(s, 16))
    return bytes(data)
