"""Decode a hex fixture (one byte per line) into exact fixed-point values.

Usage:
  python fxbinary/scripts/decode_vectors.py --hex vectors/mul_basic_out.hex --format 8 8
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fxbinary.core.formats import Format
from fxbinary.io import packing
from fxbinary.utils import logs


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--hex", required=True, help="Hex fixture, one byte per line")
    ap.add_argument("--format", nargs=2, type=int, required=True, metavar=("INT_BITS", "FRAC_BITS"))
    ap.add_argument("--unsigned", action="store_true", help="Values are unsigned")
    ap.add_argument("--log-level", default="WARNING", help="Logging level for fxbinary modules")
    args = ap.parse_args()

    logs.setup_logging(args.log_level)
    fmt = Format(args.format[0], args.format[1], not args.unsigned)
    values = packing.unpack_values(packing.read_hex_bytes(Path(args.hex)), fmt)
    print(f"{len(values)} values in {fmt.as_tuple()} {'signed' if fmt.signed else 'unsigned'}:")
    for v in values:
        print(f"  {v.to_exact_string()}  bits=0x{v.__index__():0{(fmt.total_bits + 3) // 4}X}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
