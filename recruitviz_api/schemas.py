from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ViewFiltersModel(BaseModel):
    selected_cities: List[str] = Field(default_factory=list)
    selected_education: List[str] = Field(default_factory=list)
    selected_company_sizes: List[str] = Field(default_factory=list)
    top_n: int = 20
    heatmap_limit: int = 10
    city_limit: int = 5
    industry_display_count: int = 10
    salary_interval: int = 1000


class PageRequest(BaseModel):
    filters: ViewFiltersModel = Field(default_factory=ViewFiltersModel)
    payload: Dict[str, Any] = Field(default_factory=dict)


class ComparisonRequest(BaseModel):
    selection: List[str] = Field(default_factory=list)
    payload: Dict[str, Any] = Field(default_factory=dict)


class CrossTabRequest(BaseModel):
    row_labels: List[str] = Field(default_factory=list)
    mapping: Dict[str, Any] = Field(default_factory=dict)
    col_labels: Optional[List[str]] = None


class HeatmapRequest(BaseModel):
    row_labels: List[str] = Field(default_factory=list)
    col_labels: List[str] = Field(default_factory=list)
    data: List[List[Any]] = Field(default_factory=list)
