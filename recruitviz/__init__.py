"""Core (UI-agnostic) recruitment-market view logic.

This package contains:
- payload coercion (loosely-shaped JSON -> typed, zero-defaulted values)
- view filters and the selection context
- derived-metric transforms (distribution, cross-tab, heatmap, boxplot, comparison)
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""

from recruitviz.boxplot import FiveNumberSummary, build_boxplot_from_statistics, build_five_number_summaries, reshape_outliers
from recruitviz.comparison import ComparisonComposer, ComparisonView, compose_comparison
from recruitviz.crosstab import CrossTabMatrix, ShapeError, build_crosstab
from recruitviz.distribution import CategoryCount, Distribution, normalize_distribution, rank_counts
from recruitviz.filters import SelectionContext, ViewFilters, normalize_filters
from recruitviz.heatmap import HeatmapPoint, HeatmapProjection, project_heatmap

__all__ = [
    "CategoryCount",
    "ComparisonComposer",
    "ComparisonView",
    "CrossTabMatrix",
    "Distribution",
    "FiveNumberSummary",
    "HeatmapPoint",
    "HeatmapProjection",
    "SelectionContext",
    "ShapeError",
    "ViewFilters",
    "build_boxplot_from_statistics",
    "build_crosstab",
    "build_five_number_summaries",
    "compose_comparison",
    "normalize_distribution",
    "normalize_filters",
    "project_heatmap",
    "rank_counts",
    "reshape_outliers",
]
