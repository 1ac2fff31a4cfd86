from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from recruitviz.payload import Number, as_list, as_mapping, as_number, padded


class ShapeError(ValueError):
    """Structurally invalid input to the cross-tab builder."""


@dataclass(frozen=True)
class CrossTabMatrix:
    row_labels: Tuple[str, ...]
    col_labels: Tuple[str, ...]
    cells: Tuple[Tuple[Number, ...], ...]

    def __post_init__(self) -> None:
        if len(self.cells) != len(self.row_labels):
            raise ShapeError(f"{len(self.cells)} rows of cells for {len(self.row_labels)} row labels")
        width = len(self.col_labels)
        for label, row in zip(self.row_labels, self.cells):
            if len(row) != width:
                raise ShapeError(f"row {label!r} has {len(row)} cells, expected {width}")

    @classmethod
    def empty(cls) -> "CrossTabMatrix":
        return cls((), (), ())

    @classmethod
    def from_dense(cls, row_labels: object, col_labels: object, data: object) -> "CrossTabMatrix":
        """Wrap a backend-supplied dense grid; ragged rows are zero-padded or truncated."""
        rows = [str(x) for x in as_list(row_labels)]
        cols = [str(x) for x in as_list(col_labels)]
        grid = as_list(data)
        cells = []
        for i in range(len(rows)):
            raw_row = as_list(grid[i]) if i < len(grid) else []
            cells.append(tuple(padded([as_number(v) for v in raw_row], len(cols))))
        return cls(tuple(rows), tuple(cols), tuple(cells))

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self.row_labels), len(self.col_labels)

    def cell(self, row_label: str, col_label: str) -> Number:
        return self.cells[self.row_labels.index(row_label)][self.col_labels.index(col_label)]

    def row(self, row_label: str) -> List[Number]:
        return list(self.cells[self.row_labels.index(row_label)])

    def column(self, col_label: str) -> List[Number]:
        j = self.col_labels.index(col_label)
        return [row[j] for row in self.cells]

    def row_totals(self) -> List[Number]:
        return [sum(row) for row in self.cells]

    def transpose(self) -> "CrossTabMatrix":
        cells = tuple(tuple(row[j] for row in self.cells) for j in range(len(self.col_labels)))
        return CrossTabMatrix(self.col_labels, self.row_labels, cells)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([list(r) for r in self.cells], index=list(self.row_labels), columns=list(self.col_labels))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_labels": list(self.row_labels),
            "col_labels": list(self.col_labels),
            "cells": [list(r) for r in self.cells],
        }


def _str_keyed(value: object) -> Dict[str, object]:
    return {str(k): v for k, v in as_mapping(value).items() if k is not None}


def union_keys(mapping: Mapping[str, object], rows: Iterable[str]) -> List[str]:
    """Column keys across ``rows`` in first-seen order (row-major scan)."""
    seen: List[str] = []
    for row in rows:
        for key in _str_keyed(mapping.get(row)):
            if key not in seen:
                seen.append(key)
    return seen


def build_crosstab(
    row_labels: Sequence[str],
    mapping: Mapping[str, object],
    col_labels: Optional[Sequence[str]] = None,
) -> CrossTabMatrix:
    """Dense ``[row][col]`` matrix from a nested ``row -> col -> count`` mapping.

    ``col_labels`` defaults to the union of column keys over ``row_labels``.
    Missing combinations resolve to 0.
    """
    rows = [str(r) for r in row_labels]
    if not rows:
        raise ShapeError("row_labels must not be empty")
    mapping = _str_keyed(mapping)
    cols = [str(c) for c in col_labels] if col_labels is not None else union_keys(mapping, rows)
    cells = []
    for r in rows:
        source = _str_keyed(mapping.get(r))
        cells.append(tuple(as_number(source.get(c)) for c in cols))
    return CrossTabMatrix(tuple(rows), tuple(cols), tuple(cells))
