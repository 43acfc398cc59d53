"""Personalised guidance text for each coaching phase.

Guidance responds to what the user just said and, where possible, anchors it
in their own track record (streak, best day, badges, weekly focus progress).
All inputs are read-only; the builder holds no conversation state.
"""

from datetime import datetime, timedelta
from typing import List, Optional

import structlog

from mindcoach.domain.models.profile import UserSnapshot
from mindcoach.services.protocols import HistorySource
from mindcoach.signals.signal_detector import SignalDetector

log = structlog.get_logger(__name__)


class GuidanceBuilder:
    """Builds reflection, reframe, plan and closing guidance."""

    def __init__(
        self,
        history: Optional[HistorySource] = None,
        detector: Optional[SignalDetector] = None,
    ):
        self.history = history
        self.detector = detector or SignalDetector()

    # ------------------------------------------------------------------
    # Phase guidance
    # ------------------------------------------------------------------

    def reflection(self, reply: str, snapshot: UserSnapshot) -> str:
        """Mirror the emotional tone of the reply back to the user."""
        affect = self.detector.affect_score(reply)

        if affect.net < -0.5:
            return (
                "It sounds like you're going through a difficult time right now. "
                f"That's completely understandable. {self._comfort_reminder(snapshot)}"
            )
        if affect.net > 0.5:
            return (
                "I hear some positive energy in what you're sharing. "
                f"That's wonderful. {self._positive_reinforcement(snapshot)}"
            )
        return (
            "I appreciate you sharing what's on your mind. "
            "Sometimes mixed feelings are the most honest ones."
        )

    def reframe(self, distortions: List[str], snapshot: UserSnapshot) -> Optional[str]:
        """Gentle reframe naming the highest-priority distortion.

        Returns None when no distortion was detected.
        """
        if not distortions:
            return None

        label = distortions[0]
        if label == "all-or-nothing":
            body = (
                "What's a small example that doesn't fit that rule? "
                f"Even small steps count, like your {self._streak_phrase(snapshot)} focus streak."
            )
        elif label == "catastrophizing":
            body = (
                "If the worst doesn't happen, what's the most likely result? "
                f"You've handled challenges before: {self._best_achievement(snapshot)}."
            )
        elif label == "mind-reading":
            body = (
                "We can't actually read minds. What evidence do you have for "
                "that belief? What else might they be thinking?"
            )
        elif label == "overgeneralizing":
            body = (
                "One situation doesn't define all situations. "
                f"You can break patterns: {self._progress_phrase(snapshot)}."
            )
        else:
            body = "What would you tell a good friend in this situation?"

        return f"[{label}] {body}"

    def plan(self, snapshot: UserSnapshot) -> str:
        """Suggest a micro-step sized to this week's focus progress."""
        progress = self.weekly_progress(snapshot)

        if progress < 0.3:
            goal = (
                f" You're working toward {snapshot.weekly_goal_minutes} minutes this week."
                if snapshot.weekly_goal_minutes
                else ""
            )
            return (
                "Let's start small. A 2-minute focus session could help you get back on track."
                + goal
            )
        if progress < 0.7:
            return (
                "You're making progress on your weekly goal. "
                "A 5-minute session could keep the momentum going."
            )
        return (
            "You're doing great with your weekly goal! "
            "Maybe try a deeper 10-minute session to finish strong."
        )

    def close(self, snapshot: UserSnapshot) -> str:
        """Reinforce self-efficacy with the user's own achievements."""
        achievements = []
        if snapshot.current_streak_days > 0:
            achievements.append(f"{snapshot.current_streak_days}-day focus streak")
        if snapshot.best_day_minutes > 0:
            achievements.append(f"personal best of {snapshot.best_day_minutes} minutes")
        if snapshot.badges:
            achievements.append(f"{len(snapshot.badges)} badges earned")

        if achievements:
            return (
                f"Remember what you're capable of: {', '.join(achievements)}. "
                "You have the tools and strength to handle whatever comes next."
            )
        return (
            "Every step you take is building your mental fitness. "
            "You're investing in yourself right now."
        )

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def weekly_progress(self, snapshot: UserSnapshot) -> float:
        """Fraction of the weekly goal completed since Monday (0.0 to 1.0+).

        Returns 0.0 when there is no goal or no history source.
        """
        if snapshot.weekly_goal_minutes <= 0 or self.history is None:
            return 0.0

        now = snapshot.now
        week_start = datetime.combine(
            (now - timedelta(days=now.weekday())).date(),
            datetime.min.time(),
            tzinfo=now.tzinfo,
        )
        minutes = sum(
            s.duration_minutes for s in self.history.sessions(from_=week_start, to=now)
        )
        progress = minutes / snapshot.weekly_goal_minutes

        log.debug(
            "weekly_progress_computed",
            minutes=minutes,
            goal=snapshot.weekly_goal_minutes,
            progress=progress,
        )
        return progress

    # ------------------------------------------------------------------
    # Personalisation fragments
    # ------------------------------------------------------------------

    @staticmethod
    def _streak_phrase(snapshot: UserSnapshot) -> str:
        if snapshot.current_streak_days > 0:
            return f"{snapshot.current_streak_days}-day"
        return "growing"

    @staticmethod
    def _best_achievement(snapshot: UserSnapshot) -> str:
        if snapshot.best_day_minutes > 0:
            return f"you achieved {snapshot.best_day_minutes} minutes on your best day"
        if snapshot.badges:
            return f"you've earned the {snapshot.badges[0]} badge"
        return "you're building resilience every day"

    def _progress_phrase(self, snapshot: UserSnapshot) -> str:
        progress = self.weekly_progress(snapshot)
        if progress > 0.3:
            return f"you're already {round(progress * 100)}% toward your weekly goal"
        return "every small step counts toward growth"

    @staticmethod
    def _comfort_reminder(snapshot: UserSnapshot) -> str:
        if snapshot.current_streak_days > 0:
            return f"Your {snapshot.current_streak_days}-day streak shows your inner strength."
        if snapshot.best_day_minutes > 0:
            return (
                f"Remember your {snapshot.best_day_minutes}-minute focus day, "
                "proof you can push through."
            )
        return "You're here taking care of yourself, and that matters."

    @staticmethod
    def _positive_reinforcement(snapshot: UserSnapshot) -> str:
        if snapshot.badges:
            plural = "s" if len(snapshot.badges) > 1 else ""
            verb = "reflect" if plural else "reflects"
            return f"Your {', '.join(snapshot.badges)} badge{plural} {verb} this positive energy."
        return "This positive mindset is a strength you can build on."
