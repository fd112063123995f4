"""Tests for age classification."""

from datetime import datetime

from nmsweep.timeutils import (
    MONTH_MILLIS,
    elapsed_millis,
    from_timestamp,
    months_to_millis,
    qualifies,
)


class TestMonthsToMillis:
    def test_one_month(self):
        assert months_to_millis(1) == 2_628_000_000

    def test_scales_linearly(self):
        assert months_to_millis(6) == 6 * MONTH_MILLIS

    def test_fractional_months(self):
        assert months_to_millis(0.5) == 1_314_000_000


class TestQualifies:
    def test_exactly_at_threshold(self):
        assert qualifies(2_628_000_000, 1) is True

    def test_just_below_threshold(self):
        assert qualifies(2_627_999_999, 1) is False

    def test_well_past_threshold(self):
        assert qualifies(3 * MONTH_MILLIS, 2) is True

    def test_zero_elapsed(self):
        assert qualifies(0, 1) is False

    def test_matches_formula_over_a_range(self):
        for cap in (1, 2, 3, 12, 0.5):
            threshold = cap * 2.628e9
            for elapsed in (0, threshold - 1, threshold, threshold + 1, threshold * 10):
                assert qualifies(elapsed, cap) == (elapsed >= threshold)

    def test_negative_elapsed_does_not_raise(self):
        """Modification times in the future just don't qualify."""
        assert qualifies(-1000, 1) is False


class TestHelpers:
    def test_elapsed_millis(self):
        assert elapsed_millis(100.0, 102.5) == 2500

    def test_from_timestamp(self):
        ts = datetime(2024, 1, 15, 12, 0, 0).timestamp()
        assert from_timestamp(ts) == datetime(2024, 1, 15, 12, 0, 0)
