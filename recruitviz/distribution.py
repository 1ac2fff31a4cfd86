from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from recruitviz.payload import Number, as_count, as_label, as_list, padded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryCount:
    label: str
    count: Number = 0


@dataclass(frozen=True)
class Distribution:
    """Labeled count breakdown. Built fresh per payload; never merged."""

    entries: Tuple[CategoryCount, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[object, object]]) -> "Distribution":
        entries = []
        for label, count in pairs:
            name = as_label(label)
            if name is None:
                logger.debug("dropping distribution entry without label (count=%r)", count)
                continue
            entries.append(CategoryCount(name, as_count(count)))
        labels = [e.label for e in entries]
        if len(set(labels)) != len(labels):
            logger.warning("duplicate labels in distribution: %s", sorted({x for x in labels if labels.count(x) > 1}))
        return cls(tuple(entries))

    @classmethod
    def from_records(
        cls,
        records: object,
        *,
        label_key: str = "label",
        count_key: str = "count",
    ) -> "Distribution":
        rows = [r for r in as_list(records) if isinstance(r, Mapping)]
        return cls.from_pairs((r.get(label_key), r.get(count_key)) for r in rows)

    @classmethod
    def from_columns(cls, labels: object, counts: object) -> "Distribution":
        label_list = as_list(labels)
        count_list = padded(as_list(counts), len(label_list))
        return cls.from_pairs(zip(label_list, count_list))

    @property
    def labels(self) -> List[str]:
        return [e.label for e in self.entries]

    @property
    def counts(self) -> List[Number]:
        return [e.count for e in self.entries]

    @property
    def total(self) -> Number:
        return sum(self.counts)

    def __len__(self) -> int:
        return len(self.entries)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"label": self.labels, "count": self.counts})


def percentage_of(count: Number, total: Number) -> float:
    if not total or total <= 0:
        return 0.0
    return count / total * 100


def rank_counts(counts: Sequence[Number]) -> List[int]:
    """Dense 1..N ranks, highest count first; ties keep input order."""
    if not counts:
        return []
    df = pd.DataFrame({"count": list(counts), "position": range(len(counts))})
    ordered = df.sort_values(["count", "position"], ascending=[False, True])["position"].tolist()
    ranks = [0] * len(counts)
    for rank, position in enumerate(ordered, start=1):
        ranks[position] = rank
    return ranks


def normalize_distribution(distribution: Distribution) -> List[Dict[str, Any]]:
    """Per-entry ``label``, ``count``, ``percentage`` and ``rank``, in input order."""
    total = distribution.total
    ranks = rank_counts(distribution.counts)
    return [
        {
            "label": entry.label,
            "count": entry.count,
            "percentage": percentage_of(entry.count, total),
            "rank": rank,
        }
        for entry, rank in zip(distribution.entries, ranks)
    ]


def top_ranked(rows: List[Dict[str, Any]], n: int) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda r: r["rank"])[: max(0, n)]
