from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from recruitviz.boxplot import reshape_outliers, summaries_from_rows
from recruitviz.charts import bar_chart, boxplot_chart, share_chart, stacked_bar_chart
from recruitviz.crosstab import CrossTabMatrix, build_crosstab
from recruitviz.distribution import Distribution, normalize_distribution
from recruitviz.filters import ViewFilters
from recruitviz.metrics_education import salary_by_category
from recruitviz.metrics_overview import rank_by_average_salary
from recruitviz.payload import as_label_list, as_list, as_mapping

COMPANY_SIZE_LABEL_KEY = "公司规模"


def company_size_distribution(ctx: Dict[str, Any]) -> Distribution:
    records = as_list(ctx.get("company_size_distribution"))
    if records:
        return Distribution.from_records(records, label_key=COMPANY_SIZE_LABEL_KEY)
    chart = as_mapping(ctx.get("company_size_chart"))
    return Distribution.from_columns(chart.get("sizes"), chart.get("counts"))


def size_salary_matrix(raw: Dict[str, Any]) -> CrossTabMatrix:
    """Company size x salary range; dense ``data`` grid or nested ``salary_distributions`` map."""
    nested = as_mapping(raw.get("salary_distributions"))
    sizes = as_label_list(raw.get("company_sizes"))
    if nested and sizes:
        return build_crosstab(sizes, nested, as_label_list(raw.get("salary_ranges")) or None)
    # dense rows line up with the raw label list by position
    return CrossTabMatrix.from_dense(raw.get("company_sizes"), raw.get("salary_ranges"), raw.get("data"))


def compute_company(filters: ViewFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    distribution = company_size_distribution(ctx)
    rows = normalize_distribution(distribution)

    stacked = size_salary_matrix(as_mapping(ctx.get("company_size_salary_distribution")))
    stacked_totals = dict(zip(stacked.row_labels, stacked.row_totals()))

    levels_raw = as_mapping(ctx.get("company_size_salary"))
    levels = salary_by_category(levels_raw, "company_sizes")
    if filters.selected_company_sizes:
        levels = [r for r in levels if r["label"] in filters.selected_company_sizes]
    levels_matrix = size_salary_matrix(levels_raw)

    box_raw = as_mapping(ctx.get("company_size_boxplot"))
    box_sizes = [str(x) for x in as_list(box_raw.get("company_sizes"))]
    boxes = summaries_from_rows(box_sizes, box_raw.get("boxplot_data"))
    outliers = reshape_outliers(box_raw.get("outliers"), box_sizes)

    type_raw = as_mapping(ctx.get("company_type_salary"))
    company_types = rank_by_average_salary(type_raw.get("company_types"), type_raw.get("avg_salaries"))
    industry_raw = as_mapping(ctx.get("industry_salary"))
    industries = rank_by_average_salary(industry_raw.get("industries"), industry_raw.get("avg_salaries"))

    charts: Dict[str, Any] = {}
    if len(distribution):
        charts["company_size_distribution"] = share_chart(distribution.labels, distribution.counts, title="Company Size")
    if stacked.row_labels and stacked.col_labels:
        charts["size_salary_stacked"] = stacked_bar_chart(stacked, row_title="Company Size", stack_title="Salary Range", value_title="Jobs")
    if box_sizes:
        charts["size_salary_boxplot"] = boxplot_chart(box_sizes, boxes, category_title="Company Size", value_title="Salary", outliers=outliers)
    if company_types:
        charts["company_type_salary"] = bar_chart(
            [r["name"] for r in company_types], [r["avg_salary"] for r in company_types], label_title="Company Type", value_title="Average Salary"
        )
    if industries:
        charts["industry_salary"] = bar_chart(
            [r["name"] for r in industries], [r["avg_salary"] for r in industries], label_title="Industry", value_title="Average Salary", horizontal=True
        )

    return {
        "filters": asdict(filters),
        "distribution": rows,
        "size_salary": {"matrix": stacked.to_dict(), "totals": stacked_totals},
        "salary_levels": levels,
        "salary_levels_matrix": levels_matrix.to_dict(),
        "boxplot": {"categories": box_sizes, "data": [b.to_list() for b in boxes], "outliers": outliers},
        "company_types": company_types,
        "industries": industries,
        "charts": charts,
    }
