from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from recruitviz.charts import bar_chart, share_chart
from recruitviz.distribution import Distribution
from recruitviz.filters import ViewFilters
from recruitviz.payload import as_list, as_mapping, as_number, as_number_list, first_argmax, padded


def _most_popular(distribution: Distribution) -> Optional[Dict[str, Any]]:
    idx = first_argmax(distribution.counts)
    if idx is None:
        return None
    entry = distribution.entries[idx]
    return {"name": entry.label, "count": entry.count}


def rank_by_average_salary(labels: object, avg_salaries: object) -> List[Dict[str, Any]]:
    """Rows sorted by average salary, highest first; ties keep payload order."""
    names = [str(x) for x in as_list(labels)]
    salaries = padded(as_number_list(avg_salaries), len(names))
    if not names:
        return []
    df = pd.DataFrame({"avg_salary": salaries, "position": range(len(names))})
    ordered = df.sort_values(["avg_salary", "position"], ascending=[False, True])["position"].tolist()
    return [{"rank": rank, "name": names[i], "avg_salary": salaries[i]} for rank, i in enumerate(ordered, start=1)]


def compute_overview(filters: ViewFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    city_chart = as_mapping(ctx.get("city_chart"))
    salary_overview = as_mapping(ctx.get("salary_overview"))
    education_chart = as_mapping(ctx.get("education_chart"))
    company_size_chart = as_mapping(ctx.get("company_size_chart"))
    industry_salary = as_mapping(ctx.get("industry_salary"))

    cities = Distribution.from_columns(city_chart.get("cities"), city_chart.get("counts"))
    salary_ranges = Distribution.from_columns(salary_overview.get("salary_ranges"), salary_overview.get("counts"))
    education = Distribution.from_columns(education_chart.get("education_levels"), education_chart.get("counts"))
    company_sizes = Distribution.from_columns(company_size_chart.get("sizes"), company_size_chart.get("counts"))

    # the city chart payload is already ordered by count
    most_popular_city = {"name": cities.entries[0].label, "count": cities.entries[0].count} if len(cities) else None
    dominant_range = _most_popular(salary_ranges)

    industries = rank_by_average_salary(industry_salary.get("industries"), industry_salary.get("avg_salaries"))
    top_industries = industries[: filters.industry_display_count]

    charts: Dict[str, Any] = {}
    if len(cities):
        charts["city_distribution"] = share_chart(cities.labels, cities.counts, title="City")
    if len(salary_ranges):
        charts["salary_ranges"] = bar_chart(salary_ranges.labels, salary_ranges.counts, label_title="Salary Range", value_title="Jobs")
    if top_industries:
        charts["industry_salary"] = bar_chart(
            [r["name"] for r in top_industries],
            [r["avg_salary"] for r in top_industries],
            label_title="Industry",
            value_title="Average Salary",
            horizontal=True,
        )

    return {
        "filters": asdict(filters),
        "kpis": {
            "total_jobs": as_number(salary_overview.get("total")),
            "most_popular_city": most_popular_city,
            "most_popular_education": _most_popular(education),
            "most_popular_company_size": _most_popular(company_sizes),
            "dominant_salary_range": dominant_range["name"] if dominant_range else None,
        },
        "industries": top_industries,
        "charts": charts,
    }
