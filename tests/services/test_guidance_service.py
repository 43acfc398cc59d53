"""Tests for GuidanceBuilder personalisation."""

from datetime import datetime

from mindcoach.domain.models.profile import FocusSession, UserSnapshot
from mindcoach.services.guidance_service import GuidanceBuilder

START = datetime(2025, 3, 10, 9, 0)
# Wednesday of the same week as START
WEDNESDAY = datetime(2025, 3, 12, 12, 0)


class TestReflection:
    def test_negative_reply_is_comforted(self, snapshot):
        text = GuidanceBuilder().reflection("I feel terrible and awful", snapshot)

        assert "difficult time" in text
        assert "4-day streak" in text

    def test_positive_reply_is_reinforced(self, snapshot):
        text = GuidanceBuilder().reflection("Feeling great and happy", snapshot)

        assert "positive energy" in text
        assert "Owl, Wolf badges reflect" in text

    def test_mixed_reply(self):
        text = GuidanceBuilder().reflection("It was a day", UserSnapshot(now=START))

        assert text.startswith("I appreciate you sharing")


class TestReframe:
    def test_no_distortion_no_guidance(self, snapshot):
        assert GuidanceBuilder().reframe([], snapshot) is None

    def test_labels_first_distortion(self, snapshot):
        text = GuidanceBuilder().reframe(["all-or-nothing", "catastrophizing"], snapshot)

        assert text.startswith("[all-or-nothing]")
        assert "4-day focus streak" in text

    def test_catastrophizing_uses_best_day(self, snapshot):
        text = GuidanceBuilder().reframe(["catastrophizing"], snapshot)

        assert "50 minutes on your best day" in text

    def test_unknown_label_falls_back(self):
        text = GuidanceBuilder().reframe(["labeling"], UserSnapshot(now=START))

        assert text == "[labeling] What would you tell a good friend in this situation?"


class TestPlan:
    def test_without_history_starts_small(self, snapshot):
        text = GuidanceBuilder().plan(snapshot)

        assert text.startswith("Let's start small.")
        assert "100 minutes this week" in text

    def test_weekly_progress_counts_this_week_only(self, history):
        snapshot = UserSnapshot(now=WEDNESDAY, weekly_goal_minutes=100)

        # 25 minutes on Monday; last week's 90 minutes are excluded
        assert GuidanceBuilder(history=history).weekly_progress(snapshot) == 0.25

    def test_progress_drives_suggestion(self, make_history):
        history = make_history(
            [FocusSession(date_time=datetime(2025, 3, 11, 8, 0), duration_minutes=50)]
        )
        builder = GuidanceBuilder(history=history)

        mid = builder.plan(UserSnapshot(now=WEDNESDAY, weekly_goal_minutes=100))
        done = builder.plan(UserSnapshot(now=WEDNESDAY, weekly_goal_minutes=40))

        assert "5-minute session" in mid
        assert "10-minute session" in done

    def test_no_goal_means_no_progress(self, history):
        snapshot = UserSnapshot(now=WEDNESDAY)

        assert GuidanceBuilder(history=history).weekly_progress(snapshot) == 0.0


class TestClose:
    def test_lists_achievements(self, snapshot):
        text = GuidanceBuilder().close(snapshot)

        assert "4-day focus streak" in text
        assert "personal best of 50 minutes" in text
        assert "2 badges earned" in text

    def test_generic_close_without_history(self):
        text = GuidanceBuilder().close(UserSnapshot(now=START))

        assert text.startswith("Every step you take")
