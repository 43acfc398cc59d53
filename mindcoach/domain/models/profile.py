"""User profile and focus history models.

These are read-only inputs supplied by the host application through the
ProfileSource and HistorySource collaborators.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field


class UserSnapshot(BaseModel):
    """Current user state used to personalise guidance."""

    now: datetime
    weekly_goal_minutes: int = Field(default=0, ge=0)
    current_streak_days: int = Field(default=0, ge=0)
    best_day_minutes: int = Field(default=0, ge=0)
    badges: List[str] = Field(default_factory=list)  # e.g. ["Owl", "Wolf"]

    model_config = {"frozen": True}


class FocusSession(BaseModel):
    """A completed focus session."""

    date_time: datetime  # session start
    duration_minutes: int = Field(ge=0)
    tags: List[str] = Field(default_factory=list)
    note: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def completed_at(self) -> datetime:
        return self.date_time + timedelta(minutes=self.duration_minutes)


class MoodEntry(BaseModel):
    """Self-reported mood check-in (1 = low, 5 = high)."""

    at: datetime
    score: int = Field(ge=1, le=5)
    tags: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}
