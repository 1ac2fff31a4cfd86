from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping

import pandas as pd

from recruitviz.boxplot import DistributionStatistics, build_boxplot_from_statistics
from recruitviz.charts import bar_chart, boxplot_chart, heatmap_chart, line_chart
from recruitviz.crosstab import CrossTabMatrix, build_crosstab
from recruitviz.distribution import Distribution, normalize_distribution, percentage_of
from recruitviz.filters import ViewFilters
from recruitviz.heatmap import project_heatmap
from recruitviz.payload import as_label, as_label_list, as_list, as_mapping, as_number, as_number_list, padded


def histogram_rows(detailed: Mapping[str, Any], interval: int = 1) -> List[Dict[str, Any]]:
    """Salary histogram rebinned to ``interval``-wide buckets.

    Reported percentages are summed per bucket when the backend sends one per
    point; otherwise they are computed from the bucketed counts.
    """
    points = as_number_list(detailed.get("salary_points"))
    if not points:
        return []
    counts = padded(as_number_list(detailed.get("counts")), len(points))
    reported = as_number_list(detailed.get("percentages"))

    df = pd.DataFrame({"salary_point": points, "count": counts})
    step = max(1, int(interval))
    df["salary_point"] = (df["salary_point"] // step) * step
    if len(reported) >= len(points):
        df["percentage"] = reported[: len(points)]
        binned = df.groupby("salary_point", sort=True)[["count", "percentage"]].sum().reset_index()
    else:
        binned = df.groupby("salary_point", sort=True)["count"].sum().reset_index()
        total = binned["count"].sum()
        binned["percentage"] = [percentage_of(c, total) for c in binned["count"]]
    return [
        {"salary_point": as_number(r["salary_point"]), "count": as_number(r["count"]), "percentage": float(r["percentage"])}
        for r in binned.to_dict("records")
    ]


def density_curve(detailed: Mapping[str, Any]) -> List[Dict[str, Any]]:
    curve = as_mapping(detailed.get("distribution_curve"))
    xs = as_number_list(curve.get("x_axis"))
    ys = padded(as_number_list(curve.get("y_axis")), len(xs))
    return [{"x": x, "y": y} for x, y in zip(xs, ys)]


def salary_range_crosstab(records: object, *, row_key: str = "学历", col_key: str = "薪资区间", value_key: str = "数量") -> CrossTabMatrix:
    """Education x salary-range matrix from flat ``{学历, 薪资区间, 数量}`` records."""
    rows = [r for r in as_list(records) if isinstance(r, Mapping)]
    df = pd.DataFrame(rows, columns=[row_key, col_key, value_key])
    df[row_key] = df[row_key].map(as_label)
    df[col_key] = df[col_key].map(as_label)
    df = df.dropna(subset=[row_key, col_key])
    if df.empty:
        return CrossTabMatrix.empty()
    df = df.assign(**{value_key: pd.to_numeric(df[value_key], errors="coerce").fillna(0)})

    grouped = df.groupby([row_key, col_key], sort=False)[value_key].sum()
    table = grouped.unstack(fill_value=0)
    return build_crosstab(df[row_key].unique().tolist(), table.to_dict("index"), df[col_key].unique().tolist())

def compute_salary(filters: ViewFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    overview_raw = as_mapping(ctx.get("salary_overview"))
    overview = Distribution.from_columns(overview_raw.get("salary_ranges"), overview_raw.get("counts"))

    detailed = as_mapping(ctx.get("salary_detailed"))
    statistics = DistributionStatistics.from_raw(detailed.get("statistics"))
    histogram = histogram_rows(detailed, filters.salary_interval)
    curve = density_curve(detailed)

    salary_chart = as_mapping(ctx.get("salary_chart"))
    education_levels = as_label_list(salary_chart.get("education_levels"))
    if filters.selected_education:
        education_levels = [e for e in education_levels if e in filters.selected_education]
    boxes = build_boxplot_from_statistics(education_levels, detailed.get("statistics"))

    high_raw = as_mapping(ctx.get("high_salary_chart"))
    high_salary = Distribution.from_columns(high_raw.get("education_levels"), high_raw.get("counts"))

    by_education = salary_range_crosstab(ctx.get("salary_distribution"))
    by_education_heatmap = project_heatmap(by_education)

    charts: Dict[str, Any] = {}
    if len(overview):
        charts["salary_ranges"] = bar_chart(overview.labels, overview.counts, label_title="Salary Range", value_title="Jobs")
    if histogram:
        charts["histogram"] = bar_chart(
            [str(r["salary_point"]) for r in histogram], [r["count"] for r in histogram], label_title="Monthly Salary", value_title="Jobs"
        )
    if curve:
        charts["density"] = line_chart([p["x"] for p in curve], [p["y"] for p in curve], x_title="Monthly Salary", y_title="Jobs")
    if education_levels:
        charts["boxplot"] = boxplot_chart(education_levels, boxes, category_title="Education", value_title="Salary")
    if by_education.row_labels and by_education.col_labels:
        charts["education_salary_heatmap"] = heatmap_chart(by_education, by_education_heatmap, row_title="Education", col_title="Salary Range")

    return {
        "filters": asdict(filters),
        "overview": {"total": as_number(overview_raw.get("total"), overview.total), "rows": normalize_distribution(overview)},
        "histogram": histogram,
        "density_curve": curve,
        "statistics": statistics.to_dict(),
        "boxplot": {
            "categories": education_levels,
            "data": [b.to_list() for b in boxes],
            "per_category_statistics": False,
        },
        "high_salary": normalize_distribution(high_salary),
        "education_salary": {"matrix": by_education.to_dict(), **by_education_heatmap.to_dict()},
        "charts": charts,
    }
