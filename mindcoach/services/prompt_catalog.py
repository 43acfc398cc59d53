"""Phase-indexed prompt catalog with deterministic selection.

Prompt choice never uses randomness: the index is derived from the calendar
date (so the same day always opens with the same prompt) shifted by how many
replies the user has already given in the phase (so a held phase serves a
fresh follow-up instead of repeating itself).
"""

from datetime import date
from typing import Dict, List, Optional

from mindcoach.domain.models.coach import CoachPhase, CoachPrompt


def _prompts(phase: CoachPhase, *entries) -> List[CoachPrompt]:
    prompts = []
    for entry in entries:
        if isinstance(entry, tuple):
            text, quick_replies = entry
        else:
            text, quick_replies = entry, []
        prompts.append(CoachPrompt(phase=phase, text=text, quick_replies=quick_replies))
    return prompts


DEFAULT_PROMPTS: Dict[CoachPhase, List[CoachPrompt]] = {
    CoachPhase.STABILIZE: _prompts(
        CoachPhase.STABILIZE,
        ("How are you feeling right now?", ["Good", "Okay", "Not great", "Mixed"]),
        ("What's your energy level like today?", ["High", "Medium", "Low", "Scattered"]),
        "How has your day been so far?",
    ),
    CoachPhase.OPEN: _prompts(
        CoachPhase.OPEN,
        "What's on your mind right now?",
        "If you could name one feeling in a word, what would it be?",
        "What's been taking up space in your thoughts today?",
        "Is there something specific that brought you here today?",
    ),
    CoachPhase.REFLECT: _prompts(
        CoachPhase.REFLECT,
        "When you think about that, what do you notice in your body?",
        "What thoughts keep coming back to you about this?",
        "If you could step back and look at this from above, what would you see?",
        "What's the most difficult part about this situation for you?",
    ),
    CoachPhase.REFRAME: _prompts(
        CoachPhase.REFRAME,
        "What would a kind, wise friend say to you about this?",
        "Is there another way to look at this that feels just as true?",
        "What evidence do you have for and against that thought?",
    ),
    CoachPhase.PLAN: _prompts(
        CoachPhase.PLAN,
        (
            "What's one small thing you could do in the next 5 minutes to take care of yourself?",
            ["2-min breathing", "Brief walk", "Quick focus", "Gratitude note"],
        ),
        (
            "What would feel most supportive right now?",
            ["Deeper focus", "Movement", "Connection", "Rest"],
        ),
    ),
    CoachPhase.CLOSE: _prompts(
        CoachPhase.CLOSE,
        "Before we finish, what's one thing you're grateful for today?",
    ),
}


def day_seed(day: date) -> int:
    """Stable per-date seed that spreads consecutive dates apart."""
    return (day.day * 7 + day.month * 11) ^ (day.year % 100)


class PromptCatalog:
    """Ordered prompt lists per phase."""

    def __init__(self, prompts: Optional[Dict[CoachPhase, List[CoachPrompt]]] = None):
        self.prompts = prompts if prompts is not None else DEFAULT_PROMPTS
        missing = [phase.value for phase in CoachPhase if not self.prompts.get(phase)]
        if missing:
            raise ValueError(f"Prompt catalog has no prompts for phases: {missing}")

    def prompts_for(self, phase: CoachPhase) -> List[CoachPrompt]:
        return self.prompts[CoachPhase(phase)]

    def index_for(self, phase: CoachPhase, day: date, step: int = 0) -> int:
        """Deterministic prompt index for ``phase`` on ``day`` after ``step`` replies."""
        return (day_seed(day) + step) % len(self.prompts_for(phase))

    def prompt_for(self, phase: CoachPhase, index: int) -> CoachPrompt:
        """Prompt at ``index`` (wrapped to the phase's list length)."""
        prompts = self.prompts_for(phase)
        return prompts[index % len(prompts)]

    def prompt_id(self, phase: CoachPhase, day: date, step: int = 0) -> str:
        """Stable analytics identifier, e.g. ``"reframe_1"``."""
        return f"{CoachPhase(phase).value}_{self.index_for(phase, day, step)}"
