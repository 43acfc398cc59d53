"""Event recorder: turns one coached reply into a CoachEvent and dispatches it.

Dispatch is the only place the coaching flow touches the outside world.
Each sink call is isolated: a failing journal or event sink is logged and
swallowed here, at the sink boundary, and the conversation carries on.
Sinks that return awaitables are scheduled on the running loop
(fire-and-forget) or, with no loop running, awaited to completion.
"""

import asyncio
import inspect
from typing import Any, Callable, Iterable, Optional

import structlog

from mindcoach.core.config import CoachConfig, coach_config
from mindcoach.domain.models.coach import (
    CoachEvent,
    CoachOutcome,
    CoachPhase,
    JournalEntry,
    normalize_tags,
    truncate_guidance,
)
from mindcoach.services.prompt_catalog import PromptCatalog
from mindcoach.services.protocols import Clock, EventSink, JournalSink, SystemClock

log = structlog.get_logger(__name__)


def _no_op_event_sink(event: CoachEvent) -> None:
    pass


class EventRecorder:
    """Builds CoachEvents and forwards them to the injected sinks."""

    def __init__(
        self,
        event_sink: Optional[EventSink] = None,
        journal: Optional[JournalSink] = None,
        clock: Optional[Clock] = None,
        catalog: Optional[PromptCatalog] = None,
        config: Optional[CoachConfig] = None,
    ):
        self.event_sink = event_sink or _no_op_event_sink
        self.journal = journal
        self.clock = clock or SystemClock()
        self.catalog = catalog or PromptCatalog()
        self.config = config or coach_config
        self._background_tasks: set = set()

    def record(
        self,
        phase: CoachPhase,
        reply: Optional[str],
        *,
        tags: Iterable[str] = (),
        guidance: Optional[str] = None,
        outcome: Optional[CoachOutcome] = None,
        step: int = 0,
    ) -> CoachEvent:
        """
        Build a CoachEvent for ``reply`` and dispatch it.

        Args:
            phase: Phase the reply was given in
            reply: Raw reply text, journalled verbatim
            tags: Detected tags (normalised: dedup, sort, cap)
            guidance: Guidance offered for the reply (truncated with "...")
            outcome: Outcome decided by the phase engine
            step: Replies already given in this phase (shifts the prompt index)

        Returns:
            The dispatched CoachEvent
        """
        now = self.clock.now()
        limits = self.config.events

        event = CoachEvent(
            at=now,
            phase=phase,
            prompt_id=self.catalog.prompt_id(phase, now.date(), step),
            guidance=truncate_guidance(guidance, limits.guidance_max_length),
            outcome=outcome,
            tags=normalize_tags(tags, limits.max_tags),
        )

        self._deliver("event_sink", self.event_sink, event)
        if self.journal is not None:
            self._deliver(
                "journal_sink",
                self._append_journal,
                JournalEntry(at=now, text=reply or ""),
            )

        log.info(
            "coach_event_recorded",
            phase=event.phase.value,
            prompt_id=event.prompt_id,
            outcome=event.outcome.value if event.outcome else None,
            tag_count=len(event.tags),
        )
        return event

    def _append_journal(self, entry: JournalEntry) -> Any:
        return self.journal.append(entry)

    def _deliver(self, sink_name: str, sink: Callable[[Any], Any], payload: Any) -> None:
        try:
            result = sink(payload)
            if inspect.isawaitable(result):
                self._await_in_background(sink_name, result)
        except Exception as e:
            log.warning("sink_delivery_failed", sink=sink_name, error=str(e))

    def _await_in_background(self, sink_name: str, awaitable) -> None:
        async def _guarded():
            try:
                await awaitable
            except Exception as e:
                log.warning("sink_delivery_failed", sink=sink_name, error=str(e))

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(_guarded())
            return

        task = loop.create_task(_guarded())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
