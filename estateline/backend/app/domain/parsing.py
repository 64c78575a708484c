# app/domain/parsing.py
from __future__ import annotations

import math
import re
from typing import Any

_NON_DIGIT = re.compile(r"[^0-9]")


def parse_price_digits(x: Any) -> int:
    """
    Spoken/upstream prices arrive as 200000, "200,000", "£200,000"...
    Keep digits only; anything without digits is 0 (meaning: no price).
    """
    if x is None or isinstance(x, bool):
        return 0
    if isinstance(x, float):
        return int(x) if math.isfinite(x) else 0
    if isinstance(x, int):
        return x
    digits = _NON_DIGIT.sub("", str(x))
    return int(digits) if digits else 0


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None


def as_text(x: Any) -> str:
    if x is None:
        return ""
    return str(x).strip()
