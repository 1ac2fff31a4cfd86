"""
Test heatmap projector and five-number summary builder

Pure unit tests for recruitviz/heatmap.py and recruitviz/boxplot.py.
"""

import logging

from recruitviz.boxplot import (
    DistributionStatistics,
    FiveNumberSummary,
    build_boxplot_from_statistics,
    build_five_number_summaries,
    reshape_outliers,
    summaries_from_rows,
)
from recruitviz.crosstab import CrossTabMatrix, build_crosstab
from recruitviz.heatmap import HeatmapPoint, project_heatmap


class TestProjectHeatmap:
    """Test project_heatmap()"""

    def test_one_point_per_cell(self):
        """rows x cols points, zeros included"""
        matrix = CrossTabMatrix.from_dense(["a", "b"], ["x", "y", "z"], [[1, 0, 3], [0, 5, 0]])
        projection = project_heatmap(matrix)
        assert len(projection.points) == 6

    def test_points_are_col_row_value(self):
        """Points are (col, row, value), row-major"""
        matrix = CrossTabMatrix.from_dense(["a", "b"], ["x", "y"], [[1, 2], [3, 4]])
        assert list(project_heatmap(matrix).points) == [
            HeatmapPoint(0, 0, 1),
            HeatmapPoint(1, 0, 2),
            HeatmapPoint(0, 1, 3),
            HeatmapPoint(1, 1, 4),
        ]

    def test_value_range_includes_zero(self):
        """min anchors at a zero cell"""
        matrix = build_crosstab(["a", "b"], {"a": {"x": 7}, "b": {"y": 2}})
        projection = project_heatmap(matrix)
        assert projection.value_range == {"min": 0, "max": 7}
        assert all(projection.min <= p.value <= projection.max for p in projection.points)

    def test_empty_matrix(self):
        """No cells gives a {0, 0} range"""
        projection = project_heatmap(CrossTabMatrix.empty())
        assert projection.points == ()
        assert projection.value_range == {"min": 0, "max": 0}

    def test_to_dict(self):
        """Serialized points are [col, row, value] lists"""
        matrix = CrossTabMatrix.from_dense(["a"], ["x"], [[9]])
        assert project_heatmap(matrix).to_dict() == {"points": [[0, 0, 9]], "value_range": {"min": 9, "max": 9}}


STATS = {"min": 3000, "max": 50000, "median": 12000, "mean": 14000, "mode": 10000, "quartiles": [8000, 12000, 18000]}


class TestFiveNumberSummaries:
    """Test five-number summary construction"""

    def test_from_statistics_order(self):
        """Tuple is [min, q1, median, q3, max]"""
        summary = FiveNumberSummary.from_statistics(DistributionStatistics.from_raw(STATS))
        assert summary.to_list() == [3000, 8000, 12000, 18000, 50000]

    def test_median_falls_back_to_middle_quartile(self):
        """Without a median field the middle quartile is used"""
        stats = DistributionStatistics.from_raw({"min": 1, "max": 9, "quartiles": [2, 5, 7]})
        assert stats.median == 5

    def test_missing_fields_default_to_zero(self):
        """Absent statistics resolve to zeros"""
        assert FiveNumberSummary.from_statistics(DistributionStatistics.from_raw(None)).to_list() == [0, 0, 0, 0, 0]

    def test_global_statistics_repeated_per_category(self):
        """Every category receives the same global box"""
        boxes = build_boxplot_from_statistics(["大专", "本科", "硕士"], STATS)
        assert len(boxes) == 3
        assert boxes[0] == boxes[1] == boxes[2]

    def test_per_category_statistics(self):
        """Per-category stats follow category order; unknown categories are zeros"""
        boxes = build_five_number_summaries(
            ["本科", "博士"],
            {"本科": {"min": 1, "quartiles": [2, 3, 4], "max": 5}},
        )
        assert [b.to_list() for b in boxes] == [[1, 2, 3, 4, 5], [0, 0, 0, 0, 0]]

    def test_out_of_order_is_logged_not_raised(self, caplog):
        """Violations are a data-quality warning"""
        with caplog.at_level(logging.WARNING, logger="recruitviz.boxplot"):
            boxes = build_five_number_summaries(["x"], {"x": {"min": 10, "quartiles": [5, 6, 7], "max": 1}})
        assert not boxes[0].is_ordered
        assert "out of order" in caplog.text

    def test_summaries_from_rows(self):
        """Pre-built rows are padded to five values"""
        boxes = summaries_from_rows(["a", "b"], [[1, 2, 3, 4, 5], [1, 2]])
        assert boxes[1].to_list() == [1, 2, 0, 0, 0]


class TestReshapeOutliers:
    """Test reshape_outliers()"""

    def test_grouped_pairs_are_flattened(self):
        """Per-category [index, value] pairs pass through unchanged"""
        outliers = [[[0, 16000], [0, 17000]], [[1, 20000]]]
        assert reshape_outliers(outliers) == [[0, 16000], [0, 17000], [1, 20000]]

    def test_flat_pairs_pass_through(self):
        """An already-flat [index, value] list is returned unchanged"""
        assert reshape_outliers([[0, 16000], [1, 20000]]) == [[0, 16000], [1, 20000]]

    def test_flat_pairs_keep_their_own_index(self):
        """Flat pairs are not re-indexed by list position"""
        assert reshape_outliers([[2, 5000.5], [2, 6000], [0, 100]]) == [[2, 5000.5], [2, 6000], [0, 100]]

    def test_grouped_values_get_category_index(self):
        """Plain values take their group index"""
        assert reshape_outliers([[100, 200], [], [300]]) == [[0, 100], [0, 200], [2, 300]]

    def test_mapping_resolved_against_categories(self):
        """Label-keyed outliers use the category position; unknown labels skipped"""
        out = reshape_outliers({"大型": [9000], "未知": [1]}, ["小型", "大型"])
        assert out == [[1, 9000]]

    def test_missing_outliers(self):
        """No outliers, no points"""
        assert reshape_outliers(None) == []
