"""Serialized state records for fixed-point values.

A record is a flat dict: ib/fb (int and frac bits), sv (scaled value), sgn
(signed) and bid (1 for a compact value, where sv is the raw unsigned word, 2
for an extended value, where sv is a signed int).
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fxbinary.backends.compact import CompactValue
from fxbinary.backends.extended import ExtendedValue
from fxbinary.core.errors import PlatformWidthError
from fxbinary.value.dispatch import Backend

logger = logging.getLogger(__name__)

STATE_KEYS = ("ib", "fb", "sv", "sgn", "bid")


def load_state(record: Dict[str, Any]) -> Backend:
    for key in STATE_KEYS:
        if key not in record:
            raise KeyError(f"state record is missing {key!r}")

    tag = record["bid"]
    if tag == CompactValue.tag:
        try:
            return CompactValue.from_state(record)
        except PlatformWidthError as exc:
            # Written on a platform with a wider native word.
            logger.warning("%s; rebuilding as extended", exc)
            return ExtendedValue.from_state(record)
    if tag == ExtendedValue.tag:
        return ExtendedValue.from_state(record)
    raise ValueError(f"unknown representation tag in state record: {tag!r}")
