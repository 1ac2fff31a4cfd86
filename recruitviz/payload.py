"""Coercion helpers for loosely-shaped backend payloads.

Every backend field is treated as untyped and possibly absent. Numeric fields
resolve to ``0`` (never ``None``/``NaN``), mapping fields to ``{}`` and list
fields to ``[]``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

Number = Union[int, float]

NA_TOKENS = {"", "nan", "none", "null", "<na>", "na", "n/a"}


def as_number(value: object, default: Number = 0) -> Number:
    """Coerce a payload value to ``int``/``float``; missing or unparsable -> ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, np.integer)):
        return int(value)
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if math.isnan(out) or math.isinf(out):
        return default
    return out


def as_count(value: object) -> Number:
    count = as_number(value)
    if count < 0:
        logger.warning("negative count %r clamped to 0", value)
        return 0
    return count


def as_label(value: object) -> Optional[str]:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    s = str(value).strip()
    if s.lower() in NA_TOKENS:
        return None
    return s


def as_mapping(value: object) -> Dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def as_list(value: object) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    return []


def as_label_list(values: object) -> List[str]:
    """Labels in first-seen order, blanks and duplicates dropped."""
    out: List[str] = []
    seen = set()
    for v in as_list(values):
        label = as_label(v)
        if label is None or label in seen:
            continue
        seen.add(label)
        out.append(label)
    return out


def as_number_list(values: object) -> List[Number]:
    return [as_number(v) for v in as_list(values)]


def padded(values: Sequence[Number], length: int) -> List[Number]:
    """Truncate or zero-pad ``values`` to exactly ``length`` items."""
    out = list(values[:length])
    out.extend([0] * (length - len(out)))
    return out


def first_argmax(values: Iterable[object]) -> Optional[int]:
    """Index of the first maximal value, ``None`` for an empty sequence."""
    series = pd.Series([as_number(v) for v in values], dtype="float64")
    if series.empty:
        return None
    return int(series.idxmax())
