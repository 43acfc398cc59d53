"""Tests for filter_events."""

from datetime import date, datetime

import pytest

from mindcoach.domain.models.analytics import CoachFilter
from mindcoach.domain.models.coach import CoachEvent, CoachPhase
from mindcoach.services.event_filter import filter_events


@pytest.fixture
def sample_events():
    return [
        CoachEvent(
            at=datetime(2025, 3, 9, 8, 0),
            phase=CoachPhase.OPEN,
            prompt_id="open_1",
            tags=["anxiety", "sleep"],
        ),
        CoachEvent(
            at=datetime(2025, 3, 10, 8, 0),
            phase=CoachPhase.REFRAME,
            prompt_id="reframe_0",
            guidance="[all-or-nothing] Try a gentler reframe",
            tags=["overwhelm"],
        ),
        CoachEvent(
            at=datetime(2025, 3, 11, 23, 30),
            phase=CoachPhase.PLAN,
            prompt_id="plan_1",
            guidance="Let's start small.",
            tags=["Anxiety"],
        ),
    ]


def test_inactive_filter_returns_input_unchanged(sample_events):
    assert filter_events(sample_events, CoachFilter()) == sample_events
    assert filter_events(sample_events, CoachFilter(text_query="   ")) == sample_events


def test_tags_any_case_insensitive(sample_events):
    result = filter_events(sample_events, CoachFilter(tags_any={"ANXIETY"}))

    assert [e.prompt_id for e in result] == ["open_1", "plan_1"]


def test_tags_any_matches_any_of_several(sample_events):
    result = filter_events(sample_events, CoachFilter(tags_any={"sleep", "overwhelm"}))

    assert [e.prompt_id for e in result] == ["open_1", "reframe_0"]


def test_date_range_is_inclusive(sample_events):
    criteria = CoachFilter(from_date=date(2025, 3, 10), to_date=date(2025, 3, 11))

    result = filter_events(sample_events, criteria)

    assert [e.prompt_id for e in result] == ["reframe_0", "plan_1"]


def test_text_query_case_insensitive(sample_events):
    result = filter_events(sample_events, CoachFilter(text_query="REFRAME"))

    assert [e.prompt_id for e in result] == ["reframe_0"]


def test_text_query_matches_prompt_id(sample_events):
    result = filter_events(sample_events, CoachFilter(text_query="plan_"))

    assert [e.prompt_id for e in result] == ["plan_1"]


def test_criteria_are_combined(sample_events):
    criteria = CoachFilter(tags_any={"anxiety"}, from_date=date(2025, 3, 10))

    result = filter_events(sample_events, criteria)

    assert [e.prompt_id for e in result] == ["plan_1"]


def test_no_matches(sample_events):
    assert filter_events(sample_events, CoachFilter(tags_any={"gratitude"})) == []


def test_text_query_keeps_surrounding_spaces(sample_events):
    assert [
        e.prompt_id for e in filter_events(sample_events, CoachFilter(text_query=" small"))
    ] == ["plan_1"]
    assert filter_events(sample_events, CoachFilter(text_query="small ")) == []
