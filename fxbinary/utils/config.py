"""Vector config loading and minimal validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from fxbinary.core.modes import parse_overflow_mode, parse_round_mode

OPS = ("add", "sub", "mul", "div", "neg", "abs", "resize", "lshift", "rshift")
BINARY_OPS = ("add", "sub", "mul", "div")


def load_config(path: str | Path) -> Dict[str, Any]:
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"config must be a mapping: {cfg_path}")

    # Minimal validation
    for key in ["defaults", "vectors", "outputs"]:
        if key not in cfg:
            raise ValueError(f"missing config section: {key}")

    defaults = cfg["defaults"] or {}
    defaults["overflow_mode"] = parse_overflow_mode(defaults.get("overflow_mode", "wrap"))
    defaults["round_mode"] = parse_round_mode(defaults.get("round_mode", "direct_neg_inf"))
    cfg["defaults"] = defaults

    for vec in cfg["vectors"]:
        _check_vector(vec)
    return cfg


def _check_vector(vec: Dict[str, Any]) -> None:
    name = vec.get("name")
    if not name:
        raise ValueError("every vector needs a name")
    op = vec.get("op")
    if op not in OPS:
        raise ValueError(f"vector {name}: unknown op {op!r}")
    if "a" not in vec:
        raise ValueError(f"vector {name}: missing operand a")
    if op in BINARY_OPS and "b" not in vec:
        raise ValueError(f"vector {name}: op {op} needs operand b")
    if op == "resize" and "format" not in vec:
        raise ValueError(f"vector {name}: resize needs a format")
    if op in ("lshift", "rshift") and "amount" not in vec:
        raise ValueError(f"vector {name}: {op} needs an amount")
