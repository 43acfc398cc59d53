"""Daily aggregation of focus sessions and mood check-ins.

A session belongs to the day it completes on (start + duration), so a
session running past midnight counts toward the following day.
"""

from datetime import date, timedelta
from statistics import median
from typing import Dict, Iterable, List

import structlog

from mindcoach.domain.models.analytics import DailyMoodFocus
from mindcoach.domain.models.profile import FocusSession, MoodEntry

log = structlog.get_logger(__name__)


class FocusAnalytics:
    """Builds DailyMoodFocus rows from raw history."""

    @staticmethod
    def compute_daily_mood_focus(
        sessions: Iterable[FocusSession],
        moods: Iterable[MoodEntry] = (),
    ) -> List[DailyMoodFocus]:
        """
        Aggregate sessions and moods per day, ascending by day.

        Days with only mood entries are included with zero sessions; days
        without moods have ``mood_median`` None.
        """
        durations: Dict[date, List[timedelta]] = {}
        for session in sessions:
            durations.setdefault(session.completed_at.date(), []).append(
                timedelta(minutes=session.duration_minutes)
            )

        scores: Dict[date, List[int]] = {}
        for mood in moods:
            scores.setdefault(mood.at.date(), []).append(mood.score)

        rows = []
        for day in sorted(set(durations) | set(scores)):
            day_durations = durations.get(day, [])
            total = sum(day_durations, timedelta(0))
            day_scores = scores.get(day)
            rows.append(
                DailyMoodFocus(
                    day=day,
                    session_count=len(day_durations),
                    total_duration=total,
                    avg_duration=total / len(day_durations) if day_durations else timedelta(0),
                    mood_median=float(median(day_scores)) if day_scores else None,
                )
            )

        log.debug("daily_mood_focus_computed", day_count=len(rows))
        return rows
