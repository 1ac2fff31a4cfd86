from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Tuple

from recruitviz.crosstab import CrossTabMatrix
from recruitviz.payload import Number


class HeatmapPoint(NamedTuple):
    col: int
    row: int
    value: Number


@dataclass(frozen=True)
class HeatmapProjection:
    points: Tuple[HeatmapPoint, ...]
    min: Number = 0
    max: Number = 0

    @property
    def value_range(self) -> Dict[str, Number]:
        return {"min": self.min, "max": self.max}

    def to_dict(self) -> Dict[str, Any]:
        return {"points": [list(p) for p in self.points], "value_range": self.value_range}


def project_heatmap(matrix: CrossTabMatrix) -> HeatmapProjection:
    """One ``(col, row, value)`` point per cell, row-major, with the min/max over every cell."""
    points: List[HeatmapPoint] = []
    for i, row in enumerate(matrix.cells):
        for j, value in enumerate(row):
            points.append(HeatmapPoint(j, i, value))
    if not points:
        return HeatmapProjection(())
    values = [p.value for p in points]
    return HeatmapProjection(tuple(points), min(values), max(values))
