"""Coaching conversation domain models.

This module defines the value objects exchanged by the coaching engine:

Core Concepts:
    - CoachPhase: ordered stages of a conversation (stabilize -> close)
    - CoachPrompt / CoachStep: what the engine shows the user each turn
    - CoachEvent: immutable record of one user reply, the unit of all analytics
    - JournalEntry: the raw reply text, mirrored 1:1 with each CoachEvent

CoachEvent enforces its own invariants on construction, so events built by
the engine, decoded from JSON/CSV, or created by callers all obey them:
    - tags are deduplicated, sorted ascending, then capped at MAX_TAGS
    - guidance is None or at most GUIDANCE_MAX_LENGTH characters, truncated
      strings ending in "..."
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

MAX_TAGS = 6
GUIDANCE_MAX_LENGTH = 200
TRUNCATION_MARKER = "..."
TAG_SEPARATOR = ";"


class CoachPhase(str, Enum):
    """Named stage of the coaching dialogue, in traversal order.

    Values:
        - STABILIZE: brief check-in (initial phase)
        - OPEN: low-barrier journaling
        - REFLECT: mirror back and deepen
        - REFRAME: address cognitive distortions
        - PLAN: tiny actionable step
        - CLOSE: reinforce self-efficacy (terminal phase)
    """

    STABILIZE = "stabilize"
    OPEN = "open"
    REFLECT = "reflect"
    REFRAME = "reframe"
    PLAN = "plan"
    CLOSE = "close"


PHASE_ORDER: List[CoachPhase] = list(CoachPhase)


class CoachOutcome(str, Enum):
    """Outcome achieved by a reply. Absence (None) means no outcome."""

    REFRAMED = "reframed"
    PLANNED = "planned"


def truncate_guidance(
    text: Optional[str], max_length: int = GUIDANCE_MAX_LENGTH
) -> Optional[str]:
    """Cut guidance to ``max_length`` keeping a trailing "..." marker.

    Empty guidance is treated as absent and returns None.
    """
    if not text:
        return None
    if len(text) <= max_length:
        return text
    return text[: max_length - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def normalize_tags(tags, max_tags: int = MAX_TAGS) -> List[str]:
    """Deduplicate, sort ascending, then cap at ``max_tags``."""
    cleaned = {tag.strip() for tag in tags if tag and tag.strip()}
    return sorted(cleaned)[:max_tags]


class CoachPrompt(BaseModel):
    """Prompt to present to the user for a phase."""

    phase: CoachPhase
    text: str
    quick_replies: List[str] = Field(default_factory=list, max_length=4)

    model_config = {"frozen": True}


class CoachStep(BaseModel):
    """Result of one ``PhaseEngine.next()`` call.

    ``guidance`` responds to the reply just processed (a reflection, reframe,
    plan suggestion or closing summary); it is None on the opening step.
    """

    prompt: CoachPrompt
    guidance: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def phase(self) -> CoachPhase:
        return self.prompt.phase


class CoachEvent(BaseModel):
    """Immutable record of a single coached reply.

    Key Attributes:
        - at: timestamp taken from the engine's clock
        - phase: phase the reply was given in
        - prompt_id: stable "{phase}_{index}" identifier for analytics
        - guidance: short summary of guidance provided (<= 200 chars)
        - outcome: REFRAMED / PLANNED, or None
        - tags: themes detected in the reply (<= 6, unique, sorted)
    """

    at: datetime
    phase: CoachPhase
    prompt_id: str = Field(min_length=1)
    guidance: Optional[str] = None
    outcome: Optional[CoachOutcome] = None
    tags: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("guidance")
    @classmethod
    def _truncate_guidance(cls, v: Optional[str]) -> Optional[str]:
        return truncate_guidance(v)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, v: List[str]) -> List[str]:
        for tag in v:
            if TAG_SEPARATOR in tag:
                raise ValueError(f"tag may not contain {TAG_SEPARATOR!r}: {tag!r}")
        return normalize_tags(v)


class JournalEntry(BaseModel):
    """Raw user reply appended to the external journal."""

    at: datetime
    text: str

    model_config = {"frozen": True}
