"""
Test distribution normalizer

Pure unit tests for recruitviz/distribution.py: percentages of total and
stable dense ranking.
"""

import math

import pytest

from recruitviz.distribution import (
    CategoryCount,
    Distribution,
    normalize_distribution,
    percentage_of,
    rank_counts,
    top_ranked,
)


class TestRankCounts:
    """Test rank_counts() ordering"""

    def test_highest_count_ranks_first(self):
        """Largest count gets rank 1"""
        assert rank_counts([10, 30, 20]) == [3, 1, 2]

    def test_ties_follow_input_order(self):
        """Equal counts get distinct ranks in input order"""
        assert rank_counts([5, 5, 3]) == [1, 2, 3]

    def test_tie_order_is_positional_not_alphabetical(self):
        """Later label with the same count ranks after the earlier one"""
        dist = Distribution.from_pairs([("Zhuhai", 5), ("Anshan", 5), ("Beijing", 3)])
        ranks = {r["label"]: r["rank"] for r in normalize_distribution(dist)}
        assert ranks == {"Zhuhai": 1, "Anshan": 2, "Beijing": 3}

    @pytest.mark.parametrize(
        "counts",
        [[1, 1, 1, 1], [0, 7, 7, 2, 0], [3], [9, 8, 7, 6], [1, 2, 3, 4]],
    )
    def test_ranks_are_a_permutation(self, counts):
        """Ranks are exactly 1..N regardless of ties"""
        assert sorted(rank_counts(counts)) == list(range(1, len(counts) + 1))

    def test_empty(self):
        """No counts, no ranks"""
        assert rank_counts([]) == []


class TestNormalizeDistribution:
    """Test normalize_distribution() percentages"""

    def test_percentages_sum_to_100(self):
        """Percentages add up to 100 when total > 0"""
        dist = Distribution.from_pairs([("a", 1), ("b", 2), ("c", 7), ("d", 3)])
        rows = normalize_distribution(dist)
        assert math.isclose(sum(r["percentage"] for r in rows), 100.0, abs_tol=1e-9)

    def test_percentage_values(self):
        """Each percentage is count / total * 100"""
        rows = normalize_distribution(Distribution.from_pairs([("a", 1), ("b", 3)]))
        assert rows[0]["percentage"] == pytest.approx(25.0)
        assert rows[1]["percentage"] == pytest.approx(75.0)

    def test_zero_total_gives_zero_percentages(self):
        """All-zero counts yield 0, never NaN or inf"""
        rows = normalize_distribution(Distribution.from_pairs([("a", 0), ("b", 0)]))
        assert [r["percentage"] for r in rows] == [0.0, 0.0]
        assert all(math.isfinite(r["percentage"]) for r in rows)

    def test_rows_keep_input_order(self):
        """Output rows are in the input order, not sorted"""
        rows = normalize_distribution(Distribution.from_pairs([("a", 1), ("b", 9)]))
        assert [r["label"] for r in rows] == ["a", "b"]
        assert [r["rank"] for r in rows] == [2, 1]

    def test_empty_distribution(self):
        """Empty input gives empty output"""
        assert normalize_distribution(Distribution()) == []


class TestDistributionConstruction:
    """Test Distribution builders and missing-data defaults"""

    def test_from_records_with_backend_keys(self):
        """Records use backend label keys"""
        dist = Distribution.from_records(
            [{"工作地点": "北京", "count": 12}, {"工作地点": "上海", "count": 8}],
            label_key="工作地点",
        )
        assert dist.labels == ["北京", "上海"]
        assert dist.total == 20

    def test_missing_count_defaults_to_zero(self):
        """Absent count is 0"""
        dist = Distribution.from_records([{"label": "a"}, {"label": "b", "count": None}])
        assert dist.counts == [0, 0]

    def test_record_without_label_dropped(self):
        """Entries without a label are skipped"""
        dist = Distribution.from_records([{"count": 3}, {"label": "b", "count": 2}])
        assert dist.entries == (CategoryCount("b", 2),)

    def test_from_columns_pads_short_counts(self):
        """Labels without a count get 0"""
        dist = Distribution.from_columns(["a", "b", "c"], [4])
        assert dist.counts == [4, 0, 0]

    def test_negative_count_clamped(self):
        """Negative counts are clamped to 0"""
        assert Distribution.from_pairs([("a", -3)]).counts == [0]

    def test_non_list_payload(self):
        """A non-list payload is an empty distribution"""
        assert len(Distribution.from_records(None)) == 0


class TestHelpers:
    """Test percentage_of() and top_ranked()"""

    def test_percentage_of_zero_total(self):
        """Zero total is guarded"""
        assert percentage_of(5, 0) == 0.0

    def test_top_ranked(self):
        """Top-N rows come back in rank order"""
        rows = normalize_distribution(Distribution.from_pairs([("a", 1), ("b", 5), ("c", 3)]))
        assert [r["label"] for r in top_ranked(rows, 2)] == ["b", "c"]
