"""Domain models package."""

from .coach import (
    CoachPhase,
    CoachOutcome,
    CoachPrompt,
    CoachStep,
    CoachEvent,
    JournalEntry,
    PHASE_ORDER,
)
from .profile import UserSnapshot, FocusSession, MoodEntry
from .analytics import CoachDaySummary, DailyMoodFocus, CoachFilter

__all__ = [
    "CoachPhase",
    "CoachOutcome",
    "CoachPrompt",
    "CoachStep",
    "CoachEvent",
    "JournalEntry",
    "PHASE_ORDER",
    "UserSnapshot",
    "FocusSession",
    "MoodEntry",
    "CoachDaySummary",
    "DailyMoodFocus",
    "CoachFilter",
]
