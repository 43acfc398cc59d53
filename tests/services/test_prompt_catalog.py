"""Tests for PromptCatalog."""

from datetime import date

import pytest

from mindcoach.domain.models.coach import CoachPhase, CoachPrompt
from mindcoach.services.prompt_catalog import DEFAULT_PROMPTS, PromptCatalog, day_seed

DAY = date(2025, 3, 10)  # seed 126


class TestPromptCatalog:
    def test_every_phase_has_prompts(self):
        catalog = PromptCatalog()

        for phase in CoachPhase:
            assert catalog.prompts_for(phase)

    def test_day_seed_is_stable(self):
        assert day_seed(DAY) == 126
        assert day_seed(DAY) == day_seed(date(2025, 3, 10))

    def test_index_depends_on_day_and_step(self):
        catalog = PromptCatalog()

        assert catalog.index_for(CoachPhase.OPEN, DAY) == 2
        assert catalog.index_for(CoachPhase.OPEN, DAY, step=1) == 3
        assert catalog.index_for(CoachPhase.OPEN, DAY, step=2) == 0

    def test_prompt_id_format(self):
        catalog = PromptCatalog()

        assert catalog.prompt_id(CoachPhase.REFRAME, DAY) == "reframe_0"
        assert catalog.prompt_id(CoachPhase.REFRAME, DAY, step=1) == "reframe_1"
        assert catalog.prompt_id("close", DAY) == "close_0"

    def test_prompt_for_wraps(self):
        catalog = PromptCatalog()
        plan = catalog.prompts_for(CoachPhase.PLAN)

        assert catalog.prompt_for(CoachPhase.PLAN, len(plan)) == plan[0]

    def test_quick_replies_on_check_in(self):
        prompt = PromptCatalog().prompt_for(CoachPhase.STABILIZE, 0)

        assert prompt.text == "How are you feeling right now?"
        assert prompt.quick_replies == ["Good", "Okay", "Not great", "Mixed"]

    def test_missing_phase_rejected(self):
        prompts = dict(DEFAULT_PROMPTS)
        prompts[CoachPhase.REFLECT] = []

        with pytest.raises(ValueError, match="reflect"):
            PromptCatalog(prompts)

    def test_custom_catalog(self):
        prompts = {
            phase: [CoachPrompt(phase=phase, text=f"{phase.value}?")]
            for phase in CoachPhase
        }
        catalog = PromptCatalog(prompts)

        assert catalog.prompt_for(CoachPhase.OPEN, 5).text == "open?"
        assert catalog.prompt_id(CoachPhase.OPEN, DAY, step=3) == "open_0"
