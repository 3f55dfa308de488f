"""Generate golden fixed-point vectors for HDL test benches.

Reads a vector config (see fxbinary/configs/vectors.yaml), evaluates each
vector with FixedPoint and writes <name>_in.hex / <name>_out.hex fixtures (one
byte per line, little-endian values) plus a vectors.json summary with exact
decimal results and state records.
"""

from __future__ import annotations

import argparse
import logging
import operator
from pathlib import Path
import sys
from typing import Any, Dict, List, Tuple

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fxbinary.core.modes import parse_overflow_mode, parse_round_mode
from fxbinary.io import packing
from fxbinary.io.records import save_json
from fxbinary.utils import config as config_mod
from fxbinary.utils import logs
from fxbinary.value.fixedpoint import FixedPoint

logger = logging.getLogger(__name__)

_BINARY = {"add": operator.add, "sub": operator.sub, "mul": operator.mul, "div": operator.truediv}


def build_operand(spec: Dict[str, Any]) -> FixedPoint:
    int_bits, frac_bits = spec["format"]
    signed = bool(spec.get("signed", True))
    if "bits" in spec:
        return FixedPoint.from_bits(int(spec["bits"]), int_bits, frac_bits, signed)
    return FixedPoint(int_bits, frac_bits, signed, value=spec["value"])


def evaluate(vec: Dict[str, Any], defaults: Dict[str, Any]) -> Tuple[List[FixedPoint], FixedPoint]:
    """Run one vector. Returns (operands, result)."""
    op = vec["op"]
    a = build_operand(vec["a"])
    if op in config_mod.BINARY_OPS:
        b = build_operand(vec["b"])
        return [a, b], _BINARY[op](a, b)
    if op == "neg":
        return [a], -a
    if op == "abs":
        return [a], abs(a)
    if op == "lshift":
        return [a], a << int(vec["amount"])
    if op == "rshift":
        return [a], a >> int(vec["amount"])

    overflow_mode = parse_overflow_mode(vec.get("overflow_mode", defaults["overflow_mode"]))
    round_mode = parse_round_mode(vec.get("round_mode", defaults["round_mode"]))
    return [a], a.resize(tuple(vec["format"]), overflow_mode, round_mode)


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", required=True, help="Vector config (YAML)")
    ap.add_argument("--out-dir", default=None, help="Output directory, overrides outputs.dir")
    ap.add_argument("--log-level", default="WARNING", help="Logging level for fxbinary modules")
    args = ap.parse_args()

    logs.setup_logging(args.log_level)
    cfg = config_mod.load_config(args.config)
    out_dir = Path(args.out_dir or cfg["outputs"].get("dir", "vectors"))

    summary: Dict[str, Any] = {"vectors": []}
    for vec in cfg["vectors"]:
        operands, result = evaluate(vec, cfg["defaults"])
        payload_in = b"".join(packing.pack_values([v], v.fmt) for v in operands)
        payload_out = packing.pack_values([result], result.fmt)
        packing.write_hex_bytes(out_dir / f"{vec['name']}_in.hex", payload_in)
        packing.write_hex_bytes(out_dir / f"{vec['name']}_out.hex", payload_out)
        logger.info("vector %s: %s -> %r", vec["name"], vec["op"], result)
        summary["vectors"].append(
            {
                "name": vec["name"],
                "op": vec["op"],
                "inputs": [v.to_exact_string() for v in operands],
                "result": result.to_exact_string(),
                "format": list(result.format),
                "signed": result.is_signed,
                "state": result.to_state(),
            }
        )
        print(f"{vec['name']}: {vec['op']} -> {result.to_exact_string()} {result.format}")

    save_json(out_dir / "vectors.json", summary)
    print(f"Wrote {len(summary['vectors'])} vectors to {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
