from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from recruitviz.charts import bar_chart, heatmap_chart, share_chart, stacked_bar_chart
from recruitviz.crosstab import CrossTabMatrix
from recruitviz.distribution import Distribution, normalize_distribution
from recruitviz.filters import ViewFilters
from recruitviz.heatmap import project_heatmap
from recruitviz.payload import as_label, as_list, as_mapping, as_number_list, first_argmax, padded

EDUCATION_LABEL_KEY = "学历"
DEFAULT_RADAR_CITIES = 2


def education_distribution(ctx: Dict[str, Any]) -> Distribution:
    records = as_list(ctx.get("education_distribution"))
    if records:
        return Distribution.from_records(records, label_key=EDUCATION_LABEL_KEY)
    chart = as_mapping(ctx.get("education_chart"))
    return Distribution.from_columns(chart.get("education_levels"), chart.get("counts"))


def highest_demand(matrix: CrossTabMatrix, reported: object = None) -> Dict[str, str]:
    """Most demanded column per row; backend-reported values win over the computed arg-max."""
    reported = as_mapping(reported)
    out: Dict[str, str] = {}
    for label, row in zip(matrix.row_labels, matrix.cells):
        value = as_label(reported.get(label))
        if value is None:
            idx = first_argmax(row)
            if idx is None:
                continue
            value = matrix.col_labels[idx]
        out[label] = value
    return out


def stacked_series(matrix: CrossTabMatrix) -> List[Dict[str, Any]]:
    """One series per column label, values running over the row labels."""
    flipped = matrix.transpose()
    return [{"name": name, "data": list(row)} for name, row in zip(flipped.row_labels, flipped.cells)]


def radar_rows(matrix: CrossTabMatrix, selected: List[str]) -> List[Dict[str, Any]]:
    """Rows for the selected cities present in the matrix; unknown cities are skipped."""
    if not selected:
        selected = list(matrix.row_labels[:DEFAULT_RADAR_CITIES])
    return [{"name": c, "value": matrix.row(c)} for c in selected if c in matrix.row_labels]


def salary_by_category(chart: Dict[str, Any], label_field: str) -> List[Dict[str, Any]]:
    labels = [str(x) for x in as_list(chart.get(label_field))]
    columns = {
        name: padded(as_number_list(chart.get(name)), len(labels))
        for name in ("avg_salaries", "min_salaries", "max_salaries", "job_counts")
    }
    return [
        {
            "label": label,
            "avg_salary": columns["avg_salaries"][i],
            "min_salary": columns["min_salaries"][i],
            "max_salary": columns["max_salaries"][i],
            "job_count": columns["job_counts"][i],
        }
        for i, label in enumerate(labels)
    ]


def compute_education(filters: ViewFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    distribution = education_distribution(ctx)
    rows = normalize_distribution(distribution)

    analysis = as_mapping(ctx.get("city_education"))
    matrix = CrossTabMatrix.from_dense(
        as_list(analysis.get("cities"))[: filters.city_limit], analysis.get("education_levels"), analysis.get("distribution")
    )
    projection = project_heatmap(matrix)

    salary_table = salary_by_category(as_mapping(ctx.get("salary_chart")), "education_levels")
    if filters.selected_education:
        salary_table = [r for r in salary_table if r["label"] in filters.selected_education]

    charts: Dict[str, Any] = {}
    if len(distribution):
        charts["education_distribution"] = share_chart(distribution.labels, distribution.counts, title="Education")
    if matrix.row_labels and matrix.col_labels:
        charts["city_education_stacked"] = stacked_bar_chart(matrix, row_title="City", stack_title="Education", value_title="Share (%)")
        charts["city_education_heatmap"] = heatmap_chart(matrix, projection, row_title="City", col_title="Education")
    if salary_table:
        charts["education_salary"] = bar_chart(
            [r["label"] for r in salary_table], [r["avg_salary"] for r in salary_table], label_title="Education", value_title="Average Salary"
        )

    return {
        "filters": asdict(filters),
        "distribution": rows,
        "city_education": {
            "matrix": matrix.to_dict(),
            "stacked_series": stacked_series(matrix),
            "highest_demand": highest_demand(matrix, analysis.get("highest_demand")),
            "radar": radar_rows(matrix, filters.selected_cities),
            "heatmap": projection.to_dict(),
        },
        "salary": salary_table,
        "charts": charts,
    }
