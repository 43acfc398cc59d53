"""Tests for CorrelationAnalyzer."""

from datetime import date, timedelta

import pytest

from mindcoach.domain.models.analytics import CoachDaySummary, DailyMoodFocus
from mindcoach.services.correlation_service import CorrelationAnalyzer, pearson

D1, D2, D3, D4 = (date(2025, 3, d) for d in (10, 11, 12, 13))


def coach_day(day, plans):
    return CoachDaySummary(day=day, journaling_entries=plans + 1, plans_committed=plans)


def focus_day(day, minutes, mood=None):
    return DailyMoodFocus(
        day=day,
        session_count=1,
        total_duration=timedelta(minutes=minutes),
        avg_duration=timedelta(minutes=minutes),
        mood_median=mood,
    )


class TestPearson:
    def test_perfectly_proportional(self):
        assert pearson([1, 2, 3], [10, 20, 30]) == pytest.approx(1.0)

    def test_perfectly_inverse(self):
        assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_too_few_pairs(self):
        assert pearson([1], [2]) is None
        assert pearson([], []) is None

    def test_zero_variance(self):
        assert pearson([2, 2, 2], [1, 5, 9]) is None

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            pearson([1, 2], [1, 2, 3])

    def test_bounded(self):
        r = pearson([1, 5, 2, 8, 3], [2, 3, 9, 1, 4])

        assert -1.0 <= r <= 1.0


class TestCorrelate:
    def test_joins_on_day(self):
        coach = [coach_day(D1, 1), coach_day(D2, 2), coach_day(D3, 3), coach_day(D4, 9)]
        focus = [focus_day(D1, 10), focus_day(D2, 20), focus_day(D3, 30)]

        # D4 has no focus data and is ignored
        assert CorrelationAnalyzer().correlate(coach, focus) == pytest.approx(1.0)

    def test_fewer_than_two_paired_days(self):
        coach = [coach_day(D1, 1), coach_day(D2, 2)]
        focus = [focus_day(D2, 20), focus_day(D3, 30)]

        assert CorrelationAnalyzer().correlate(coach, focus) is None

    def test_no_data(self):
        assert CorrelationAnalyzer().correlate([], []) is None


class TestMoodVsFocus:
    def test_only_days_with_mood(self):
        rows = [
            focus_day(D1, 10, mood=2.0),
            focus_day(D2, 40, mood=5.0),
            focus_day(D3, 25),
            focus_day(D4, 20, mood=3.0),
        ]

        r = CorrelationAnalyzer().mood_vs_focus(rows)

        assert r == pytest.approx(1.0)

    def test_insufficient_mood_data(self):
        assert CorrelationAnalyzer().mood_vs_focus([focus_day(D1, 10, mood=4.0)]) is None
