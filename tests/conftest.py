"""
Shared test fixtures for the coaching engine.

Provides a frozen clock plus in-memory fakes for the collaborators the
engine talks to (event sink, journal, profile, focus history).
"""

from datetime import datetime

import pytest

from mindcoach.core.config import CoachConfig
from mindcoach.domain.models.profile import FocusSession, UserSnapshot
from mindcoach.services.phase_engine import PhaseEngine
from mindcoach.services.protocols import FixedClock

# Monday 10 March 2025, 09:00
START = datetime(2025, 3, 10, 9, 0)


class RecordingJournal:
    """JournalSink that keeps every entry in memory."""

    def __init__(self):
        self.entries = []

    def append(self, entry):
        self.entries.append(entry)


class StaticProfile:
    """ProfileSource returning a fixed snapshot."""

    def __init__(self, snapshot: UserSnapshot):
        self._snapshot = snapshot

    def snapshot(self) -> UserSnapshot:
        return self._snapshot


class ListHistory:
    """HistorySource backed by a list of sessions."""

    def __init__(self, sessions=None):
        self._sessions = list(sessions or [])

    def sessions(self, from_=None, to=None):
        return [
            s
            for s in self._sessions
            if (from_ is None or s.date_time >= from_)
            and (to is None or s.date_time <= to)
        ]


@pytest.fixture
def clock():
    """Clock frozen at START."""
    return FixedClock(START)


@pytest.fixture
def events():
    """List used as an event sink via ``events.append``."""
    return []


@pytest.fixture
def journal():
    return RecordingJournal()


@pytest.fixture
def snapshot():
    """A user with some history to personalise against."""
    return UserSnapshot(
        now=START,
        weekly_goal_minutes=100,
        current_streak_days=4,
        best_day_minutes=50,
        badges=["Owl", "Wolf"],
    )


@pytest.fixture
def profile(snapshot):
    return StaticProfile(snapshot)


@pytest.fixture
def make_history():
    """Factory for list-backed HistorySource fakes."""
    return ListHistory


@pytest.fixture
def history():
    return ListHistory(
        [
            FocusSession(date_time=datetime(2025, 3, 10, 7, 0), duration_minutes=25),
            FocusSession(date_time=datetime(2025, 3, 3, 7, 0), duration_minutes=90),
        ]
    )


@pytest.fixture
def coach_config():
    """Default coaching configuration, independent of config/ on disk."""
    return CoachConfig()


@pytest.fixture
def engine(events, journal, clock, coach_config):
    """Engine without profile or history."""
    return PhaseEngine(
        event_sink=events.append,
        journal=journal,
        clock=clock,
        config=coach_config,
    )
