"""Phase engine: the deterministic coaching conversation driver.

The conversation walks a fixed, ordered table of phases:

    stabilize -> open -> reflect -> reframe -> plan -> close

Each ``next(reply)`` call scores the reply's richness (word count plus
detected tags and distortions). A reply that reaches the current phase's
threshold advances the conversation by exactly one phase; anything less holds
the phase and serves a follow-up prompt, until the phase's ``max_hold_turns``
is reached. Phases are never skipped or revisited.

Every call except the first, and except once ``close`` is reached, produces a
CoachEvent via the EventRecorder and journals the reply verbatim.

Usage:
    engine = PhaseEngine(event_sink=events.append, journal=journal, clock=clock)
    step = engine.next()                       # stabilize prompt, no event
    step = engine.next("I'm anxious about everything at work")
    step.prompt.text, step.guidance

A single engine is not safe for concurrent ``next()`` calls; callers drive one
engine per conversation from one logical thread.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import structlog

from mindcoach.core.config import CoachConfig, coach_config
from mindcoach.domain.models.coach import (
    PHASE_ORDER,
    CoachOutcome,
    CoachPhase,
    CoachPrompt,
    CoachStep,
)
from mindcoach.domain.models.profile import UserSnapshot
from mindcoach.services.event_recorder import EventRecorder
from mindcoach.services.guidance_service import GuidanceBuilder
from mindcoach.services.prompt_catalog import PromptCatalog
from mindcoach.services.protocols import (
    Clock,
    EventSink,
    HistorySource,
    JournalSink,
    ProfileSource,
    SystemClock,
)
from mindcoach.signals.signal_detector import SignalDetector, SignalResult

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TurnContext:
    """Everything a phase needs to judge one reply."""

    reply: str
    signals: SignalResult
    richness: int
    snapshot: UserSnapshot


@dataclass(frozen=True)
class PhaseDefinition:
    """One row of the phase table.

    Attributes:
        phase: Phase this row drives
        guidance: Guidance for a reply given in this phase (None = no guidance)
        outcome: Outcome for a reply given in this phase (None = no outcome)
    """

    phase: CoachPhase
    guidance: Callable[[TurnContext], Optional[str]]
    outcome: Callable[[TurnContext], Optional[CoachOutcome]]

    @property
    def is_terminal(self) -> bool:
        return self.phase == PHASE_ORDER[-1]


def _no_guidance(ctx: TurnContext) -> Optional[str]:
    return None


def _no_outcome(ctx: TurnContext) -> Optional[CoachOutcome]:
    return None


class PhaseEngine:
    """Drives one coaching conversation through the phase table."""

    def __init__(
        self,
        event_sink: Optional[EventSink] = None,
        journal: Optional[JournalSink] = None,
        clock: Optional[Clock] = None,
        profile: Optional[ProfileSource] = None,
        history: Optional[HistorySource] = None,
        detector: Optional[SignalDetector] = None,
        catalog: Optional[PromptCatalog] = None,
        config: Optional[CoachConfig] = None,
        conversation_id: Optional[str] = None,
    ):
        """
        Initialize a conversation.

        Args:
            event_sink: Callable receiving every produced CoachEvent
            journal: JournalSink receiving every reply verbatim
            clock: Time source (default: SystemClock)
            profile: ProfileSource for personalised guidance (optional)
            history: HistorySource for weekly-progress guidance (optional)
            detector: SignalDetector (injected for testing)
            catalog: PromptCatalog (injected for testing)
            config: CoachConfig (default: global coach_config)
            conversation_id: Optional id bound into every log line
        """
        self.clock = clock or SystemClock()
        self.profile = profile
        self.detector = detector or SignalDetector()
        self.catalog = catalog or PromptCatalog()
        self.config = config or coach_config
        self.guidance = GuidanceBuilder(history=history, detector=self.detector)
        self.recorder = EventRecorder(
            event_sink=event_sink,
            journal=journal,
            clock=self.clock,
            catalog=self.catalog,
            config=self.config,
        )
        self.log = log.bind(conversation_id=conversation_id) if conversation_id else log

        self.table: List[PhaseDefinition] = self._build_table()
        self._index = 0
        self._phase_step = 0
        self._started = False
        self._close_step: Optional[CoachStep] = None

    # ------------------------------------------------------------------
    # Phase table
    # ------------------------------------------------------------------

    def _build_table(self) -> List[PhaseDefinition]:
        rows = {
            CoachPhase.STABILIZE: PhaseDefinition(
                CoachPhase.STABILIZE, _no_guidance, _no_outcome
            ),
            CoachPhase.OPEN: PhaseDefinition(CoachPhase.OPEN, _no_guidance, _no_outcome),
            CoachPhase.REFLECT: PhaseDefinition(
                CoachPhase.REFLECT,
                lambda ctx: self.guidance.reflection(ctx.reply, ctx.snapshot),
                _no_outcome,
            ),
            CoachPhase.REFRAME: PhaseDefinition(
                CoachPhase.REFRAME,
                lambda ctx: self.guidance.reframe(ctx.signals.distortions, ctx.snapshot),
                lambda ctx: CoachOutcome.REFRAMED if ctx.signals.distortions else None,
            ),
            CoachPhase.PLAN: PhaseDefinition(
                CoachPhase.PLAN,
                lambda ctx: self.guidance.plan(ctx.snapshot),
                lambda ctx: (
                    CoachOutcome.PLANNED
                    if self.detector.has_commitment(ctx.reply)
                    else None
                ),
            ),
            CoachPhase.CLOSE: PhaseDefinition(
                CoachPhase.CLOSE,
                lambda ctx: self.guidance.close(ctx.snapshot),
                _no_outcome,
            ),
        }
        return [rows[phase] for phase in PHASE_ORDER]

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def phase(self) -> CoachPhase:
        return self.table[self._index].phase

    @property
    def phase_step(self) -> int:
        """Replies already given in the current phase."""
        return self._phase_step

    @property
    def is_complete(self) -> bool:
        return self.table[self._index].is_terminal

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------

    def next(self, reply: Optional[str] = None) -> CoachStep:
        """
        Advance the conversation with the user's reply to the previous prompt.

        Args:
            reply: Reply text. Ignored on the very first call, which only
                opens the conversation. Later calls treat None as "".

        Returns:
            CoachStep with the next prompt and guidance for the reply
        """
        if not self._started:
            self._started = True
            if reply:
                self.log.warning("opening_reply_ignored", reply_length=len(reply))
            self.log.info("coach_conversation_started", phase=self.phase.value)
            return CoachStep(prompt=self._current_prompt())

        if self.is_complete:
            return self._close(self._snapshot())

        text = reply or ""
        signals = self.detector.detect(text)
        snapshot = self._snapshot()
        ctx = TurnContext(
            reply=text,
            signals=signals,
            richness=self.detector.richness(text, signals),
            snapshot=snapshot,
        )
        definition = self.table[self._index]

        guidance = definition.guidance(ctx)
        self.recorder.record(
            definition.phase,
            text,
            tags=signals.tags,
            guidance=guidance,
            outcome=definition.outcome(ctx),
            step=self._phase_step,
        )

        self._phase_step += 1
        if self._should_advance(definition.phase, ctx.richness):
            self._advance()

        if self.is_complete:
            return self._close(snapshot)
        return CoachStep(prompt=self._current_prompt(), guidance=guidance)

    def _should_advance(self, phase: CoachPhase, richness: int) -> bool:
        rule = self.config.rule_for(phase.value)
        if rule is None:
            return False
        if richness >= rule.advance_threshold:
            return True
        if rule.max_hold_turns is not None and self._phase_step >= rule.max_hold_turns:
            self.log.info(
                "coach_phase_hold_limit_reached",
                phase=phase.value,
                held_turns=self._phase_step,
            )
            return True

        self.log.debug(
            "coach_phase_held",
            phase=phase.value,
            richness=richness,
            threshold=rule.advance_threshold,
        )
        return False

    def _advance(self) -> None:
        previous = self.phase
        self._index = min(self._index + 1, len(self.table) - 1)
        self._phase_step = 0
        self.log.info(
            "coach_phase_advanced",
            from_phase=previous.value,
            to_phase=self.phase.value,
        )

    def _close(self, snapshot: UserSnapshot) -> CoachStep:
        # Built once: repeated calls after close return the identical step
        if self._close_step is None:
            ctx = TurnContext(
                reply="", signals=SignalResult(), richness=0, snapshot=snapshot
            )
            self._close_step = CoachStep(
                prompt=self._current_prompt(),
                guidance=self.table[self._index].guidance(ctx),
            )
            self.log.info("coach_conversation_closed")
        return self._close_step

    def _current_prompt(self) -> CoachPrompt:
        index = self.catalog.index_for(
            self.phase, self.clock.now().date(), self._phase_step
        )
        return self.catalog.prompt_for(self.phase, index)

    def _snapshot(self) -> UserSnapshot:
        if self.profile is None:
            return UserSnapshot(now=self.clock.now())
        return self.profile.snapshot()
