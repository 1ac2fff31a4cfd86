"""Multi-entity comparison view (e.g. a handful of selected cities).

Percentages and ranks are scoped to the selected subset, not to every entity
in the payload: adding or removing one entity changes everyone else's share.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from recruitviz.crosstab import CrossTabMatrix, build_crosstab, union_keys
from recruitviz.distribution import percentage_of, rank_counts
from recruitviz.filters import SelectionContext
from recruitviz.payload import Number, as_count, as_mapping, as_number

logger = logging.getLogger(__name__)

BREAKDOWN_FIELDS = {
    "company_size": "city_company_size",
    "education": "city_education",
}


@dataclass(frozen=True)
class SalaryStats:
    avg: Number = 0
    min: Number = 0
    max: Number = 0

    @classmethod
    def from_raw(cls, raw: object) -> "SalaryStats":
        data = as_mapping(raw)
        return cls(
            avg=as_number(data.get("avg")),
            min=as_number(data.get("min")),
            max=as_number(data.get("max")),
        )

    def to_dict(self) -> Dict[str, Number]:
        return {"avg": self.avg, "min": self.min, "max": self.max}


@dataclass(frozen=True)
class ComparisonPayload:
    """Raw per-entity comparison payload; every section may be absent."""

    job_counts: Dict[str, Any] = field(default_factory=dict)
    salary: Dict[str, Any] = field(default_factory=dict)
    breakdowns: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: object) -> "ComparisonPayload":
        if isinstance(raw, ComparisonPayload):
            return raw
        data = as_mapping(raw)
        return cls(
            job_counts=as_mapping(data.get("city_job_counts")),
            salary=as_mapping(data.get("city_salary")),
            breakdowns={dim: as_mapping(data.get(key)) for dim, key in BREAKDOWN_FIELDS.items()},
        )

    def job_count(self, entity: str) -> Number:
        return as_count(self.job_counts.get(entity))

    def salary_for(self, entity: str) -> SalaryStats:
        return SalaryStats.from_raw(self.salary.get(entity))


@dataclass(frozen=True)
class ComparisonView:
    entities: Tuple[str, ...] = ()
    counts: Tuple[Number, ...] = ()
    percentages: Tuple[float, ...] = ()
    ranking: Tuple[int, ...] = ()
    salary: Mapping[str, SalaryStats] = field(default_factory=dict)
    breakdowns: Mapping[str, CrossTabMatrix] = field(default_factory=dict)
    comparison: Mapping[str, Number] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("salary", "breakdowns", "comparison"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def total(self) -> Number:
        return sum(self.counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": list(self.entities),
            "counts": list(self.counts),
            "percentages": list(self.percentages),
            "ranking": list(self.ranking),
            "salary": {k: v.to_dict() for k, v in self.salary.items()},
            "breakdowns": {k: v.to_dict() for k, v in self.breakdowns.items()},
            "comparison": dict(self.comparison),
        }


def _selected_entities(payload: ComparisonPayload, selection: SelectionContext) -> List[str]:
    entities = [label for label in selection if label in payload.salary]
    dropped = [label for label in selection if label not in payload.salary]
    if dropped:
        logger.debug("selection entities without data dropped: %s", dropped)
    return entities


def _breakdown(payload: ComparisonPayload, dimension: str, entities: List[str]) -> CrossTabMatrix:
    if not entities:
        return CrossTabMatrix.empty()
    nested = payload.breakdowns.get(dimension, {})
    return build_crosstab(entities, nested, union_keys(nested, entities))


def compose_comparison(
    raw: Union[Mapping[str, Any], ComparisonPayload],
    selection: Union[SelectionContext, Iterable[str]],
    previous: Optional[ComparisonView] = None,
) -> Optional[ComparisonView]:
    """Build the comparison view for exactly the selected entities.

    An empty selection is a no-op: ``previous`` is returned unchanged.
    """
    if not isinstance(selection, SelectionContext):
        selection = SelectionContext.of(selection)
    if selection.is_empty:
        return previous

    payload = ComparisonPayload.from_raw(raw)
    entities = _selected_entities(payload, selection)
    counts = [payload.job_count(e) for e in entities]
    selected_total = sum(counts)

    # rank lookup by label over a stable descending order
    ranks = rank_counts(counts)
    rank_by_entity = {e: r for e, r in zip(entities, ranks)}

    return ComparisonView(
        entities=tuple(entities),
        counts=tuple(counts),
        percentages=tuple(percentage_of(c, selected_total) for c in counts),
        ranking=tuple(rank_by_entity[e] for e in entities),
        salary={e: payload.salary_for(e) for e in entities},
        breakdowns={dim: _breakdown(payload, dim, entities) for dim in BREAKDOWN_FIELDS},
        comparison=dict(zip(entities, counts)),
    )


class ComparisonComposer:
    """Holds the latest comparison view and recomposes it on demand."""

    def __init__(self) -> None:
        self.view: Optional[ComparisonView] = None

    def update(
        self,
        raw: Union[Mapping[str, Any], ComparisonPayload],
        selection: Union[SelectionContext, Iterable[str]],
    ) -> Optional[ComparisonView]:
        self.view = compose_comparison(raw, selection, previous=self.view)
        return self.view
