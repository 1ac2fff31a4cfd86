from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from recruitviz.payload import as_label


@dataclass(frozen=True)
class SelectionContext:
    """Ordered set of selected entity labels (e.g. chosen cities).

    Replaced wholesale on every selection change; there is no incremental update path.
    """

    labels: Tuple[str, ...] = ()

    @classmethod
    def of(cls, values: Optional[Iterable[object]] = None) -> "SelectionContext":
        return cls(tuple(_as_str_list(values)))

    def replace(self, values: Optional[Iterable[object]]) -> "SelectionContext":
        return SelectionContext.of(values)

    def __iter__(self):
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)

    def __contains__(self, label: object) -> bool:
        return label in self.labels

    @property
    def is_empty(self) -> bool:
        return not self.labels


@dataclass(frozen=True)
class ViewFilters:
    selected_cities: List[str] = field(default_factory=list)
    selected_education: List[str] = field(default_factory=list)
    selected_company_sizes: List[str] = field(default_factory=list)
    top_n: int = 20
    heatmap_limit: int = 10
    city_limit: int = 5
    industry_display_count: int = 10
    salary_interval: int = 1000


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values or isinstance(values, str):
        return []
    out: List[str] = []
    for v in values:
        label = as_label(v)
        if label is None or label in out:
            continue
        out.append(label)
    return out


def _as_int(value: object, default: int, *, lo: int = 1, hi: Optional[int] = None) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        out = default
    out = max(lo, out)
    if hi is not None:
        out = min(hi, out)
    return out


def normalize_filters(raw: Optional[dict]) -> ViewFilters:
    raw = raw or {}
    return ViewFilters(
        selected_cities=_as_str_list(raw.get("selected_cities")),
        selected_education=_as_str_list(raw.get("selected_education")),
        selected_company_sizes=_as_str_list(raw.get("selected_company_sizes")),
        top_n=_as_int(raw.get("top_n", 20), 20, hi=200),
        heatmap_limit=_as_int(raw.get("heatmap_limit", 10), 10),
        city_limit=_as_int(raw.get("city_limit", 5), 5),
        industry_display_count=_as_int(raw.get("industry_display_count", 10), 10),
        salary_interval=_as_int(raw.get("salary_interval", 1000), 1000),
    )


def selection_context(filters: ViewFilters) -> SelectionContext:
    return SelectionContext.of(filters.selected_cities)
