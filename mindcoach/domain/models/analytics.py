"""Analytics models derived from coaching and focus history.

Core Models:
    - CoachDaySummary: per-day aggregate of CoachEvents (derived, never stored)
    - DailyMoodFocus: per-day aggregate of focus sessions and mood check-ins
    - CoachFilter: query object for selecting events
"""

from datetime import date, timedelta
from typing import List, Optional, Set

from pydantic import BaseModel, Field


class CoachDaySummary(BaseModel):
    """Daily summary of coaching activity."""

    day: date
    journaling_entries: int = Field(default=0, ge=0)
    reframes: int = Field(default=0, ge=0)
    plans_committed: int = Field(default=0, ge=0)
    top_tags: List[str] = Field(
        default_factory=list, description="Tags by descending frequency"
    )

    model_config = {"frozen": True}


class DailyMoodFocus(BaseModel):
    """Daily aggregation of focus sessions and mood."""

    day: date
    session_count: int = Field(default=0, ge=0)
    total_duration: timedelta = timedelta(0)
    avg_duration: timedelta = timedelta(0)
    mood_median: Optional[float] = None

    model_config = {"frozen": True}

    @property
    def total_minutes(self) -> float:
        return self.total_duration.total_seconds() / 60


class CoachFilter(BaseModel):
    """Filter criteria for coaching events.

    All criteria are optional and combined with AND:
        - tags_any: event has at least one of these tags (case-insensitive)
        - from_date / to_date: inclusive calendar-date bounds on ``event.at``
        - text_query: case-insensitive substring of guidance or prompt id
    """

    tags_any: Optional[Set[str]] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    text_query: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def is_active(self) -> bool:
        """True when at least one criterion would narrow the result."""
        return bool(
            self.tags_any
            or self.from_date is not None
            or self.to_date is not None
            or (self.text_query and self.text_query.strip())
        )
