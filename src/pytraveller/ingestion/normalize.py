"""Normalization helpers.

Centralizes defensive numeric parsing for partially-populated records.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def float_or_zero(value: Any) -> float:
    parsed = safe_float(value)
    return 0.0 if parsed is None else parsed


def record_field(record: Any, name: str) -> Any:
    """Read *name* from a mapping or an attribute-style record, ``None`` when absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)
