from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from recruitviz.charts import bar_chart, grouped_bar_chart, heatmap_chart
from recruitviz.comparison import ComparisonView, compose_comparison
from recruitviz.crosstab import CrossTabMatrix
from recruitviz.distribution import Distribution, normalize_distribution, top_ranked
from recruitviz.filters import ViewFilters, selection_context
from recruitviz.heatmap import project_heatmap
from recruitviz.payload import as_list, as_mapping

CITY_LABEL_KEY = "工作地点"


def comparison_profile(view: ComparisonView) -> List[Dict[str, Any]]:
    """Per-entity row with count, salary stats and share, for radar/table views."""
    return [
        {
            "entity": entity,
            "count": count,
            "avg_salary": view.salary[entity].avg,
            "min_salary": view.salary[entity].min,
            "max_salary": view.salary[entity].max,
            "percentage": pct,
            "rank": rank,
        }
        for entity, count, pct, rank in zip(view.entities, view.counts, view.percentages, view.ranking)
    ]


def compute_city(filters: ViewFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    distribution = Distribution.from_records(ctx.get("city_distribution"), label_key=CITY_LABEL_KEY)
    rows = normalize_distribution(distribution)
    top = top_ranked(rows, filters.top_n)

    heatmap_raw = as_mapping(ctx.get("salary_city_heatmap"))
    heatmap_matrix = CrossTabMatrix.from_dense(
        as_list(heatmap_raw.get("cities"))[: filters.heatmap_limit],
        heatmap_raw.get("salary_ranges"),
        heatmap_raw.get("heatmap_data"),
    )
    projection = project_heatmap(heatmap_matrix)

    previous = ctx.get("previous_comparison")
    if not isinstance(previous, ComparisonView):
        previous = None
    comparison = compose_comparison(ctx.get("city_comparison"), selection_context(filters), previous=previous)

    charts: Dict[str, Any] = {}
    if top:
        charts["city_ranking"] = bar_chart(
            [r["label"] for r in top], [r["count"] for r in top], label_title="City", value_title="Jobs", horizontal=True
        )
    if heatmap_matrix.row_labels and heatmap_matrix.col_labels:
        charts["salary_city_heatmap"] = heatmap_chart(heatmap_matrix, projection, row_title="City", col_title="Salary Range")
    if comparison is not None and comparison.entities:
        charts["comparison_counts"] = bar_chart(list(comparison.entities), list(comparison.counts), label_title="City", value_title="Jobs")
        charts["comparison_company_size"] = grouped_bar_chart(
            comparison.breakdowns["company_size"], group_title="Company Size", series_title="City", value_title="Jobs"
        )
        charts["comparison_education"] = grouped_bar_chart(
            comparison.breakdowns["education"], group_title="Education", series_title="City", value_title="Jobs"
        )

    return {
        "filters": asdict(filters),
        "kpis": {"total_cities": len(distribution), "total_jobs": distribution.total},
        "distribution": rows,
        "top": top,
        "heatmap": {"matrix": heatmap_matrix.to_dict(), **projection.to_dict()},
        "comparison": comparison.to_dict() if comparison is not None else None,
        "comparison_profile": comparison_profile(comparison) if comparison is not None else [],
        "charts": charts,
    }
