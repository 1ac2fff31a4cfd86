"""Five-number summaries and outlier points for boxplot rendering.

Outliers are backend-supplied; nothing here detects them. They are only
reshaped into ``[category_index, value]`` pairs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from recruitviz.payload import Number, as_list, as_mapping, as_number, padded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistributionStatistics:
    min: Number = 0
    q1: Number = 0
    median: Number = 0
    q3: Number = 0
    max: Number = 0
    mean: Number = 0
    mode: Number = 0

    @classmethod
    def from_raw(cls, raw: object) -> "DistributionStatistics":
        data = as_mapping(raw)
        quartiles = padded([as_number(q) for q in as_list(data.get("quartiles"))], 3)
        median = data.get("median")
        return cls(
            min=as_number(data.get("min")),
            q1=quartiles[0],
            median=as_number(median) if median is not None else quartiles[1],
            q3=quartiles[2],
            max=as_number(data.get("max")),
            mean=as_number(data.get("mean")),
            mode=as_number(data.get("mode")),
        )

    def to_dict(self) -> Dict[str, Number]:
        return {
            "mean": self.mean,
            "median": self.median,
            "mode": self.mode,
            "min": self.min,
            "max": self.max,
            "quartiles": [self.q1, self.median, self.q3],
        }


@dataclass(frozen=True)
class FiveNumberSummary:
    min: Number = 0
    q1: Number = 0
    median: Number = 0
    q3: Number = 0
    max: Number = 0

    @classmethod
    def from_statistics(cls, stats: DistributionStatistics) -> "FiveNumberSummary":
        return cls(stats.min, stats.q1, stats.median, stats.q3, stats.max)

    @classmethod
    def from_row(cls, row: object) -> "FiveNumberSummary":
        values = padded([as_number(v) for v in as_list(row)], 5)
        return cls(*values)

    @property
    def is_ordered(self) -> bool:
        return self.min <= self.q1 <= self.median <= self.q3 <= self.max

    def to_list(self) -> List[Number]:
        return [self.min, self.q1, self.median, self.q3, self.max]


def _checked(label: str, summary: FiveNumberSummary) -> FiveNumberSummary:
    if not summary.is_ordered:
        logger.warning("five-number summary for %r is out of order: %s", label, summary.to_list())
    return summary


def build_five_number_summaries(
    categories: Sequence[str],
    stats_by_category: Mapping[str, object],
) -> List[FiveNumberSummary]:
    """One summary per category, in ``categories`` order; absent categories are all zeros."""
    stats_by_category = as_mapping(stats_by_category)
    return [
        _checked(c, FiveNumberSummary.from_statistics(DistributionStatistics.from_raw(stats_by_category.get(c))))
        for c in categories
    ]


def build_boxplot_from_statistics(categories: Sequence[str], statistics: object) -> List[FiveNumberSummary]:
    """Repeat one global statistics block for every category.

    The salary payload only carries overall statistics, so every category row
    gets the same box. Known data-fidelity gap until the backend ships
    per-category quartiles (use ``build_five_number_summaries`` then).
    """
    summary = _checked("<global>", FiveNumberSummary.from_statistics(DistributionStatistics.from_raw(statistics)))
    return [summary for _ in categories]


def summaries_from_rows(categories: Sequence[str], rows: object) -> List[FiveNumberSummary]:
    """Summaries from pre-built ``[min, q1, median, q3, max]`` rows aligned with ``categories``."""
    raw_rows = as_list(rows)
    out = []
    for i, c in enumerate(categories):
        row = raw_rows[i] if i < len(raw_rows) else []
        out.append(_checked(c, FiveNumberSummary.from_row(row)))
    return out


def _is_pair(value: object) -> bool:
    items = as_list(value)
    return len(items) == 2 and not any(isinstance(x, (list, tuple, Mapping)) for x in items)


def _as_point(pair: object) -> List[Number]:
    index, value = as_list(pair)
    return [int(as_number(index)), as_number(value)]


def reshape_outliers(outliers: object, categories: Optional[Sequence[str]] = None) -> List[List[Number]]:
    """Flatten backend outliers into ``[category_index, value]`` pairs.

    Accepts an already-flat list of ``[index, value]`` pairs (passed through),
    a list grouped per category (index = category index) whose items are plain
    values or indexed pairs, or a mapping ``label -> values`` resolved against
    ``categories``. Unknown labels are skipped.
    """
    if isinstance(outliers, Mapping):
        labels = list(categories or [])
        groups: List[Any] = [[] for _ in labels]
        for label, values in outliers.items():
            if label in labels:
                groups[labels.index(label)] = values
    else:
        groups = as_list(outliers)
        if groups and all(_is_pair(item) for item in groups):
            return [_as_point(item) for item in groups]

    points: List[List[Number]] = []
    for index, group in enumerate(groups):
        for item in as_list(group):
            if _is_pair(item):
                points.append(_as_point(item))
            else:
                points.append([index, as_number(item)])
    return points
