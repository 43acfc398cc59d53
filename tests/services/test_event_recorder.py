"""Tests for EventRecorder dispatch and event invariants."""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from mindcoach.core.config import CoachConfig, EventLimits
from mindcoach.domain.models.coach import CoachOutcome, CoachPhase, JournalEntry
from mindcoach.services.event_recorder import EventRecorder


@pytest.fixture
def recorder(events, journal, clock, coach_config):
    return EventRecorder(
        event_sink=events.append, journal=journal, clock=clock, config=coach_config
    )


class TestRecord:
    def test_event_built_from_clock_and_catalog(self, recorder, events, clock):
        event = recorder.record(
            CoachPhase.REFRAME,
            "Everything always goes wrong",
            tags=["overwhelm"],
            guidance="[all-or-nothing] Try again",
            outcome=CoachOutcome.REFRAMED,
        )

        assert events == [event]
        assert event.at == clock.now()
        assert event.prompt_id == "reframe_0"
        assert event.outcome == CoachOutcome.REFRAMED
        assert event.tags == ["overwhelm"]

    def test_step_shifts_prompt_id(self, recorder):
        event = recorder.record(CoachPhase.REFRAME, "hm", step=1)

        assert event.prompt_id == "reframe_1"

    def test_reply_journalled_verbatim(self, recorder, journal, clock):
        recorder.record(CoachPhase.OPEN, "  Work, mostly.\nAnd sleep.  ")

        assert journal.entries == [
            JournalEntry(at=clock.now(), text="  Work, mostly.\nAnd sleep.  ")
        ]

    def test_missing_reply_journalled_as_empty(self, recorder, journal):
        recorder.record(CoachPhase.OPEN, None)

        assert journal.entries[0].text == ""

    def test_tags_normalized_and_capped(self, recorder):
        event = recorder.record(
            CoachPhase.OPEN, "x", tags=["h", "g", "f", "e", "d", "c", "b", "a", "a"]
        )

        assert event.tags == ["a", "b", "c", "d", "e", "f"]

    def test_guidance_truncated_to_configured_length(self, events, clock):
        config = CoachConfig(events=EventLimits(guidance_max_length=50))
        recorder = EventRecorder(event_sink=events.append, clock=clock, config=config)

        event = recorder.record(CoachPhase.PLAN, "x", guidance="y" * 80)

        assert len(event.guidance) == 50
        assert event.guidance.endswith("...")

    def test_timestamps_follow_clock(self, recorder, clock):
        first = recorder.record(CoachPhase.OPEN, "a")
        clock.advance(timedelta(minutes=3))
        second = recorder.record(CoachPhase.OPEN, "b")

        assert second.at - first.at == timedelta(minutes=3)

    def test_without_sinks(self, clock):
        event = EventRecorder(clock=clock).record(CoachPhase.OPEN, "hello")

        assert event.phase == CoachPhase.OPEN


class TestSinkFailures:
    """Sink failures are swallowed at the sink boundary."""

    def test_failing_event_sink_does_not_raise(self, journal, clock):
        sink = MagicMock(side_effect=RuntimeError("disk full"))
        recorder = EventRecorder(event_sink=sink, journal=journal, clock=clock)

        event = recorder.record(CoachPhase.OPEN, "still here")

        sink.assert_called_once_with(event)
        assert len(journal.entries) == 1

    def test_failing_journal_does_not_raise(self, events, clock):
        journal = MagicMock()
        journal.append.side_effect = OSError("read-only")
        recorder = EventRecorder(event_sink=events.append, journal=journal, clock=clock)

        recorder.record(CoachPhase.OPEN, "still here")

        assert len(events) == 1


    def test_journal_without_append_does_not_raise(self, events, clock):
        recorder = EventRecorder(event_sink=events.append, journal=object(), clock=clock)

        event = recorder.record(CoachPhase.OPEN, "still here")

        assert events == [event]


class TestAsyncSinks:
    def test_async_sink_without_loop_runs_to_completion(self, clock):
        received = []

        async def sink(event):
            received.append(event)

        event = EventRecorder(event_sink=sink, clock=clock).record(CoachPhase.OPEN, "a")

        assert received == [event]

    @pytest.mark.asyncio
    async def test_async_sink_scheduled_on_running_loop(self, clock):
        received = []

        async def sink(event):
            received.append(event)

        recorder = EventRecorder(event_sink=sink, clock=clock)
        event = recorder.record(CoachPhase.OPEN, "a")
        await asyncio.gather(*recorder._background_tasks)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_failing_async_sink_is_swallowed(self, clock, events):
        async def sink(event):
            raise RuntimeError("remote down")

        recorder = EventRecorder(event_sink=sink, clock=clock)
        recorder.record(CoachPhase.OPEN, "a")
        tasks = list(recorder._background_tasks)
        await asyncio.gather(*tasks)

        assert tasks
        assert all(task.exception() is None for task in tasks)
