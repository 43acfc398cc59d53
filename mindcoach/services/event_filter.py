"""Selection of coaching events by tag, date range and free text."""

from typing import Iterable, List

import structlog

from mindcoach.domain.models.analytics import CoachFilter
from mindcoach.domain.models.coach import CoachEvent

log = structlog.get_logger(__name__)


def _matches_tags(event: CoachEvent, wanted: set) -> bool:
    return any(tag.lower() in wanted for tag in event.tags)


def _matches_text(event: CoachEvent, query: str) -> bool:
    if event.guidance and query in event.guidance.lower():
        return True
    return query in event.prompt_id.lower()


def filter_events(events: Iterable[CoachEvent], criteria: CoachFilter) -> List[CoachEvent]:
    """
    Return the events matching every active criterion, in original order.

    An inactive filter (no criteria set) returns all events unchanged.
    """
    events = list(events)
    if not criteria.is_active:
        return events

    wanted_tags = {t.lower() for t in criteria.tags_any} if criteria.tags_any else None
    query = criteria.text_query.lower() if criteria.text_query else ""

    result = []
    for event in events:
        day = event.at.date()
        if wanted_tags and not _matches_tags(event, wanted_tags):
            continue
        if criteria.from_date is not None and day < criteria.from_date:
            continue
        if criteria.to_date is not None and day > criteria.to_date:
            continue
        if query and not _matches_text(event, query):
            continue
        result.append(event)

    log.debug(
        "coach_events_filtered",
        input_count=len(events),
        output_count=len(result),
    )
    return result
