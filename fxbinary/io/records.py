"""JSON files of fixed-point state records and vector summaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List

from fxbinary.value.fixedpoint import FixedPoint


def save_json(path: str | Path, data: Any) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)


def save_states(path: str | Path, values: Iterable[FixedPoint]) -> None:
    """Write one state record per value. Scaled values stay exact, JSON ints are unbounded."""
    save_json(path, [v.to_state() for v in values])


def load_states(path: str | Path) -> List[FixedPoint]:
    with Path(path).open("r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"expected a list of state records in {path}")
    return [FixedPoint.from_state(r) for r in records]
