"""Per-day summaries of coaching activity.

Summaries are always derived from the event list on demand and never stored.
For each calendar day (``event.at.date()``):
    - journaling_entries: number of events that day
    - reframes: events with outcome REFRAMED
    - plans_committed: events with outcome PLANNED
    - top_tags: tags by descending frequency, ties broken by first appearance
"""

from collections import Counter
from datetime import date
from typing import Dict, Iterable, List, Optional

import structlog

from mindcoach.domain.models.analytics import CoachDaySummary
from mindcoach.domain.models.coach import CoachEvent, CoachOutcome

log = structlog.get_logger(__name__)


class ActivitySummarizer:
    """Groups CoachEvents into CoachDaySummary rows."""

    def __init__(self, top_n: Optional[int] = None):
        """
        Args:
            top_n: Keep at most this many top tags per day (None = all)
        """
        self.top_n = top_n

    def summarize(
        self, events: Iterable[CoachEvent], top_n: Optional[int] = None
    ) -> List[CoachDaySummary]:
        """
        Summarize events per day, ascending by day.

        Args:
            events: Events in any order
            top_n: Override the instance's top-tag limit

        Returns:
            One CoachDaySummary per day that has events; empty for no events
        """
        limit = top_n if top_n is not None else self.top_n

        by_day: Dict[date, List[CoachEvent]] = {}
        for event in events:
            by_day.setdefault(event.at.date(), []).append(event)

        summaries = [
            self._summarize_day(day, day_events, limit)
            for day, day_events in sorted(by_day.items())
        ]

        log.debug("coach_activity_summarized", day_count=len(summaries))
        return summaries

    @staticmethod
    def _summarize_day(
        day: date, events: List[CoachEvent], limit: Optional[int]
    ) -> CoachDaySummary:
        tag_counts: Counter = Counter()
        for event in events:
            tag_counts.update(event.tags)

        # Counter preserves insertion order and sorted() is stable,
        # so equal counts keep first-seen order
        top_tags = [
            tag for tag, _ in sorted(tag_counts.items(), key=lambda item: -item[1])
        ]
        if limit is not None:
            top_tags = top_tags[:limit]

        return CoachDaySummary(
            day=day,
            journaling_entries=len(events),
            reframes=sum(1 for e in events if e.outcome == CoachOutcome.REFRAMED),
            plans_committed=sum(1 for e in events if e.outcome == CoachOutcome.PLANNED),
            top_tags=top_tags,
        )


def summarize(
    events: Iterable[CoachEvent], top_n: Optional[int] = None
) -> List[CoachDaySummary]:
    """Module-level shortcut for ``ActivitySummarizer().summarize``."""
    return ActivitySummarizer().summarize(events, top_n=top_n)
