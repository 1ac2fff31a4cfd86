from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import altair as alt
import pandas as pd

from recruitviz.boxplot import FiveNumberSummary
from recruitviz.crosstab import CrossTabMatrix
from recruitviz.heatmap import HeatmapProjection

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def matrix_long_frame(matrix: CrossTabMatrix, row_field: str = "row", col_field: str = "col") -> pd.DataFrame:
    frame = matrix.to_frame()
    if frame.empty:
        return pd.DataFrame(columns=[row_field, col_field, "value"])
    frame.index.name = row_field
    return frame.reset_index().melt(id_vars=row_field, var_name=col_field, value_name="value")


def bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    *,
    label_title: str,
    value_title: str,
    horizontal: bool = False,
) -> Dict[str, Any]:
    df = pd.DataFrame({"label": list(labels), "value": list(values)})
    label_enc = alt.X("label:N", title=label_title, sort=None, axis=alt.Axis(labelAngle=-30))
    value_enc = alt.Y("value:Q", title=value_title, axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False))
    if horizontal:
        label_enc = alt.Y("label:N", title=label_title, sort=None)
        value_enc = alt.X("value:Q", title=value_title)
    hover = alt.selection_point(fields=["label"], on="mouseover", empty="all")
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=label_enc if not horizontal else value_enc,
            y=value_enc if not horizontal else label_enc,
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[alt.Tooltip("label:N", title=label_title), alt.Tooltip("value:Q", title=value_title, format=",")],
        )
        .add_params(hover)
    )
    return to_vega_spec(chart)


def share_chart(labels: Sequence[str], values: Sequence[float], *, title: str) -> Dict[str, Any]:
    df = pd.DataFrame({"label": list(labels), "value": list(values)})
    chart = (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("label:N", title=title, sort=None),
            tooltip=[alt.Tooltip("label:N", title=title), alt.Tooltip("value:Q", format=",")],
        )
    )
    return to_vega_spec(chart)


def heatmap_chart(
    matrix: CrossTabMatrix,
    projection: HeatmapProjection,
    *,
    row_title: str,
    col_title: str,
) -> Dict[str, Any]:
    df = matrix_long_frame(matrix)
    chart = (
        alt.Chart(df)
        .mark_rect()
        .encode(
            x=alt.X("col:N", title=col_title, sort=list(matrix.col_labels)),
            y=alt.Y("row:N", title=row_title, sort=list(matrix.row_labels)),
            color=alt.Color("value:Q", scale=alt.Scale(domain=[projection.min, projection.max])),
            tooltip=[alt.Tooltip("row:N", title=row_title), alt.Tooltip("col:N", title=col_title), "value:Q"],
        )
    )
    return to_vega_spec(chart)


def stacked_bar_chart(matrix: CrossTabMatrix, *, row_title: str, stack_title: str, value_title: str) -> Dict[str, Any]:
    df = matrix_long_frame(matrix)
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("row:N", title=row_title, sort=list(matrix.row_labels)),
            y=alt.Y("value:Q", title=value_title, stack="zero"),
            color=alt.Color("col:N", title=stack_title, sort=list(matrix.col_labels)),
            tooltip=[alt.Tooltip("row:N", title=row_title), alt.Tooltip("col:N", title=stack_title), "value:Q"],
        )
    )
    return to_vega_spec(chart)


def grouped_bar_chart(matrix: CrossTabMatrix, *, group_title: str, series_title: str, value_title: str) -> Dict[str, Any]:
    """Columns on the x axis, one bar per row label within each column group."""
    df = matrix_long_frame(matrix)
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("col:N", title=group_title, sort=list(matrix.col_labels), axis=alt.Axis(labelAngle=-30)),
            xOffset=alt.XOffset("row:N"),
            y=alt.Y("value:Q", title=value_title),
            color=alt.Color("row:N", title=series_title, sort=list(matrix.row_labels)),
            tooltip=[alt.Tooltip("row:N", title=series_title), alt.Tooltip("col:N", title=group_title), "value:Q"],
        )
    )
    return to_vega_spec(chart)


def boxplot_chart(
    categories: Sequence[str],
    summaries: Sequence[FiveNumberSummary],
    *,
    category_title: str,
    value_title: str,
    outliers: Optional[List[List[float]]] = None,
) -> Dict[str, Any]:
    boxes = pd.DataFrame(
        [{"category": c, "min": s.min, "q1": s.q1, "median": s.median, "q3": s.q3, "max": s.max} for c, s in zip(categories, summaries)],
        columns=["category", "min", "q1", "median", "q3", "max"],
    )
    base = alt.Chart(boxes).encode(x=alt.X("category:N", title=category_title, sort=list(categories)))
    whisker = base.mark_rule().encode(y=alt.Y("min:Q", title=value_title), y2="max")
    box = base.mark_bar(size=24).encode(
        y="q1:Q",
        y2="q3",
        tooltip=["category:N", "min:Q", "q1:Q", "median:Q", "q3:Q", "max:Q"],
    )
    median = base.mark_tick(size=24, thickness=2).encode(y="median:Q")
    layers = [whisker, box, median]

    index_to_label = dict(enumerate(categories))
    points = [
        {"category": index_to_label[int(i)], "value": v}
        for i, v in (outliers or [])
        if int(i) in index_to_label
    ]
    if points:
        layers.append(
            alt.Chart(pd.DataFrame(points))
            .mark_point()
            .encode(x=alt.X("category:N", sort=list(categories)), y="value:Q", tooltip=["category:N", "value:Q"])
        )
    return to_vega_spec(alt.layer(*layers))


def line_chart(x: Sequence[float], y: Sequence[float], *, x_title: str, y_title: str) -> Dict[str, Any]:
    df = pd.DataFrame({"x": list(x), "y": list(y)})
    chart = (
        alt.Chart(df)
        .mark_area(line=True, opacity=0.5, interpolate="monotone")
        .encode(
            x=alt.X("x:Q", title=x_title),
            y=alt.Y("y:Q", title=y_title),
            tooltip=[alt.Tooltip("x:Q", title=x_title), alt.Tooltip("y:Q", title=y_title)],
        )
    )
    return to_vega_spec(chart)
