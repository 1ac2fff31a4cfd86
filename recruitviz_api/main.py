from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from recruitviz.comparison import compose_comparison
from recruitviz.crosstab import CrossTabMatrix, ShapeError, build_crosstab
from recruitviz.distribution import Distribution
from recruitviz.filters import SelectionContext, ViewFilters, normalize_filters
from recruitviz.heatmap import project_heatmap
from recruitviz.metrics_city import CITY_LABEL_KEY, compute_city
from recruitviz.metrics_company import company_size_distribution, compute_company
from recruitviz.metrics_education import compute_education, education_distribution
from recruitviz.metrics_overview import compute_overview
from recruitviz.metrics_salary import compute_salary
from recruitviz.payload import as_mapping
from recruitviz_api.schemas import ComparisonRequest, CrossTabRequest, HeatmapRequest, PageRequest, ViewFiltersModel


app = FastAPI(title="Recruitment Market View API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: ViewFiltersModel) -> ViewFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _run(name: str, fn: Callable[[], object]) -> JSONResponse:
    try:
        return _json(fn())
    except ShapeError as exc:
        logger.warning("%s rejected: %s", name, exc)
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("%s failed", name)
        return _error(exc, 500)


@app.post("/overview")
def overview(req: PageRequest):
    return _run("overview", lambda: compute_overview(_filters_from_model(req.filters), req.payload))


@app.post("/city")
def city(req: PageRequest):
    return _run("city", lambda: compute_city(_filters_from_model(req.filters), req.payload))


@app.post("/education")
def education(req: PageRequest):
    return _run("education", lambda: compute_education(_filters_from_model(req.filters), req.payload))


@app.post("/salary")
def salary(req: PageRequest):
    return _run("salary", lambda: compute_salary(_filters_from_model(req.filters), req.payload))


@app.post("/company")
def company(req: PageRequest):
    return _run("company", lambda: compute_company(_filters_from_model(req.filters), req.payload))


@app.post("/comparison")
def comparison(req: ComparisonRequest):
    def build() -> Dict[str, Any]:
        view = compose_comparison(req.payload, SelectionContext.of(req.selection))
        return {"comparison": view.to_dict() if view is not None else None}

    return _run("comparison", build)


@app.post("/crosstab")
def crosstab(req: CrossTabRequest):
    return _run("crosstab", lambda: build_crosstab(req.row_labels, req.mapping, req.col_labels).to_dict())


@app.post("/heatmap")
def heatmap(req: HeatmapRequest):
    def build() -> Dict[str, Any]:
        matrix = CrossTabMatrix.from_dense(req.row_labels, req.col_labels, req.data)
        return {"matrix": matrix.to_dict(), **project_heatmap(matrix).to_dict()}

    return _run("heatmap", build)


def export_frame(page: str, filters: ViewFilters, ctx: Dict[str, Any]) -> pd.DataFrame:
    if page == "city":
        dist = Distribution.from_records(ctx.get("city_distribution"), label_key=CITY_LABEL_KEY)
        return dist.to_frame().rename(columns={"label": "城市", "count": "职位数量"})
    if page == "education":
        return education_distribution(ctx).to_frame().rename(columns={"label": "学历", "count": "职位数量"})
    if page == "company":
        return company_size_distribution(ctx).to_frame().rename(columns={"label": "公司规模", "count": "职位数量"})
    if page == "salary":
        overview_raw = as_mapping(ctx.get("salary_overview"))
        dist = Distribution.from_columns(overview_raw.get("salary_ranges"), overview_raw.get("counts"))
        return dist.to_frame().rename(columns={"label": "薪资区间", "count": "职位数量"})
    if page == "comparison":
        view = compose_comparison(ctx.get("city_comparison"), SelectionContext.of(filters.selected_cities))
        if view is None:
            return pd.DataFrame()
        return pd.DataFrame(
            {
                "城市": list(view.entities),
                "职位数量": list(view.counts),
                "占比": list(view.percentages),
                "排名": list(view.ranking),
                "平均薪资": [view.salary[e].avg for e in view.entities],
            }
        )
    return pd.DataFrame()


@app.post("/export/{page}")
def export_page(page: str, req: PageRequest):
    filters = _filters_from_model(req.filters)
    export_df = export_frame(page, filters, req.payload)
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    filename = f"{page}.csv"
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
