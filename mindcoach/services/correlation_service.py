"""Correlation between coaching activity and focus/mood.

The headline question: on days the user commits to more plans, do they also
focus for longer? ``correlate`` answers with a Pearson coefficient over the
days present in both series, or None when there is not enough signal.
"""

from typing import Iterable, List, Optional, Sequence

import numpy as np
import structlog

from mindcoach.domain.models.analytics import CoachDaySummary, DailyMoodFocus

log = structlog.get_logger(__name__)

MIN_PAIRS = 2


def pearson(xs: Sequence[float], ys: Sequence[float]) -> Optional[float]:
    """
    Pearson correlation coefficient of two equal-length series.

    Returns:
        r in [-1.0, 1.0], or None with fewer than two pairs or when either
        series has zero variance
    """
    if len(xs) != len(ys):
        raise ValueError(f"Series lengths differ: {len(xs)} != {len(ys)}")
    if len(xs) < MIN_PAIRS:
        return None

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt((dx * dx).sum() * (dy * dy).sum())
    if denominator == 0:
        return None

    r = float((dx * dy).sum() / denominator)
    return max(-1.0, min(1.0, r))


class CorrelationAnalyzer:
    """Joins coaching and focus day series and correlates them."""

    def correlate(
        self,
        coach_days: Iterable[CoachDaySummary],
        mood_focus_days: Iterable[DailyMoodFocus],
    ) -> Optional[float]:
        """
        Correlate plans committed with total focus minutes per day.

        Days are joined on ``day``; days present in only one series are ignored.
        """
        focus_by_day = {row.day: row for row in mood_focus_days}
        pairs = [
            (summary.plans_committed, focus_by_day[summary.day].total_minutes)
            for summary in coach_days
            if summary.day in focus_by_day
        ]
        r = self._pearson_pairs(pairs)

        log.info("plans_focus_correlated", pair_count=len(pairs), coefficient=r)
        return r

    def mood_vs_focus(self, rows: Iterable[DailyMoodFocus]) -> Optional[float]:
        """Correlate mood median with total focus minutes over days with a mood."""
        pairs = [
            (row.mood_median, row.total_minutes)
            for row in rows
            if row.mood_median is not None
        ]
        r = self._pearson_pairs(pairs)

        log.info("mood_focus_correlated", pair_count=len(pairs), coefficient=r)
        return r

    @staticmethod
    def _pearson_pairs(pairs: List[tuple]) -> Optional[float]:
        if len(pairs) < MIN_PAIRS:
            return None
        xs, ys = zip(*pairs)
        return pearson(xs, ys)
