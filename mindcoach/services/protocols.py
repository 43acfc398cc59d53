"""
Collaborator protocol definitions (interfaces).

The coaching core never touches storage, UI or the system clock directly.
Everything it reads or writes goes through these structural interfaces,
injected by the host application (or by fakes in tests).
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional, Protocol

from mindcoach.domain.models.coach import CoachEvent, JournalEntry
from mindcoach.domain.models.profile import FocusSession, UserSnapshot


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by real time; the default when none is injected."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant, optionally advanced manually.

    Used for tests and for replaying conversations reproducibly.
    """

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> None:
        self._instant = self._instant + delta


class ProfileSource(Protocol):
    """Read-only access to the user's profile."""

    def snapshot(self) -> UserSnapshot:
        """
        Get the current user snapshot.

        Returns:
            UserSnapshot with goal, streak, best day and badges
        """
        ...


class HistorySource(Protocol):
    """Read-only access to completed focus sessions."""

    def sessions(
        self,
        from_: Optional[datetime] = None,
        to: Optional[datetime] = None,
    ) -> Iterable[FocusSession]:
        """
        Get completed focus sessions.

        Args:
            from_: Inclusive lower bound on session start (None = unbounded)
            to: Inclusive upper bound on session start (None = unbounded)

        Returns:
            Iterable of FocusSession
        """
        ...


class JournalSink(Protocol):
    """Write-only journal stream; storage is the host's concern."""

    def append(self, entry: JournalEntry) -> Any:
        """
        Append an entry. May return an awaitable in async hosts.

        Args:
            entry: Raw reply with its timestamp
        """
        ...


# Called with every produced CoachEvent. May return an awaitable.
EventSink = Callable[[CoachEvent], Any]
