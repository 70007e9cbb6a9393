from __future__ import annotations

import math
from typing import Any


def parse_score(value: Any) -> float | None:
    """
    Coerce a raw score field into a float, or None when the score is unset.
    Accepts numbers and numeric strings; booleans, blanks, NaN and anything
    non-numeric are treated as unset.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out
