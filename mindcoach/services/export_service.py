"""
Export service for converting coaching events to portable formats.

Supports:
- JSON: one object per event, ISO-8601 timestamps, tags as a list
- CSV: fixed columns ``timestamp,phase,promptId,guidance,outcome,tags`` with
  ``;``-joined tags and standard CSV quoting

Both codecs are exact inverses for every valid CoachEvent: decode(encode(e)) == e,
including absent guidance/outcome, empty tags and guidance containing quotes,
commas or newlines. Decoding never fills in defaults for required fields and
rejects unknown phase/outcome values.
"""

import csv
import json
from datetime import datetime
from io import StringIO
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

import structlog
from pydantic import ValidationError

from mindcoach.core.exceptions import MalformedEventError, UnknownEnumValueError
from mindcoach.domain.models.coach import (
    TAG_SEPARATOR,
    CoachEvent,
    CoachOutcome,
    CoachPhase,
)

log = structlog.get_logger(__name__)

CSV_COLUMNS = ["timestamp", "phase", "promptId", "guidance", "outcome", "tags"]
CSV_HEADER = ",".join(CSV_COLUMNS)
LEGACY_CSV_COLUMNS = ["atIso"] + CSV_COLUMNS[1:]

# Older exports used "atIso" for the timestamp key and CSV column
_TIMESTAMP_KEYS = ("timestamp", "atIso")
_CRLF = "\r\n"


# =============================================================================
# Field codecs
# =============================================================================


def _parse_timestamp(value: Any) -> datetime:
    if value is None or value == "":
        raise MalformedEventError("Missing required field: timestamp")
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise MalformedEventError(f"Invalid timestamp: {value!r}") from e


def _parse_phase(value: Any) -> CoachPhase:
    if value is None or value == "":
        raise MalformedEventError("Missing required field: phase")
    try:
        return CoachPhase(value)
    except ValueError:
        raise UnknownEnumValueError("phase", str(value)) from None


def _parse_outcome(value: Any) -> Union[CoachOutcome, None]:
    if value is None or value == "":
        return None
    try:
        return CoachOutcome(value)
    except ValueError:
        raise UnknownEnumValueError("outcome", str(value)) from None


def _parse_prompt_id(value: Any) -> str:
    if value is None or value == "":
        raise MalformedEventError("Missing required field: promptId")
    return str(value)


def _parse_tags(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return value.split(TAG_SEPARATOR)
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value]
    raise MalformedEventError(f"Invalid tags: {value!r}")


def _build_event(**fields) -> CoachEvent:
    try:
        return CoachEvent(**fields)
    except ValidationError as e:
        raise MalformedEventError(f"Invalid event: {e}") from e


# =============================================================================
# Serializer
# =============================================================================


class EventSerializer:
    """JSON and CSV codec for CoachEvent."""

    # ---------------------------------------------------------------- JSON

    @staticmethod
    def to_json(event: CoachEvent) -> Dict[str, Any]:
        """Encode an event as a JSON-ready dict."""
        return {
            "timestamp": event.at.isoformat(),
            "phase": event.phase.value,
            "promptId": event.prompt_id,
            "guidance": event.guidance,
            "outcome": event.outcome.value if event.outcome else None,
            "tags": list(event.tags),
        }

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> CoachEvent:
        """
        Decode an event from a JSON mapping.

        Raises:
            MalformedEventError: Missing timestamp/phase/promptId or bad values
            UnknownEnumValueError: Unrecognised phase or outcome
        """
        if not isinstance(data, Mapping):
            raise MalformedEventError(f"Expected a JSON object, got {type(data).__name__}")

        raw_timestamp = next(
            (data[key] for key in _TIMESTAMP_KEYS if data.get(key) not in (None, "")),
            None,
        )
        return _build_event(
            at=_parse_timestamp(raw_timestamp),
            phase=_parse_phase(data.get("phase")),
            prompt_id=_parse_prompt_id(data.get("promptId")),
            guidance=data.get("guidance") or None,
            outcome=_parse_outcome(data.get("outcome")),
            tags=_parse_tags(data.get("tags")),
        )

    # ----------------------------------------------------------------- CSV

    @staticmethod
    def to_csv_fields(event: CoachEvent) -> List[str]:
        return [
            event.at.isoformat(),
            event.phase.value,
            event.prompt_id,
            event.guidance or "",
            event.outcome.value if event.outcome else "",
            TAG_SEPARATOR.join(event.tags),
        ]

    @classmethod
    def to_csv_row(cls, event: CoachEvent) -> str:
        """Encode an event as one CSV record (no trailing line terminator)."""
        output = StringIO()
        writer = csv.writer(output, lineterminator=_CRLF)
        writer.writerow(cls.to_csv_fields(event))
        return output.getvalue()[: -len(_CRLF)]

    @staticmethod
    def from_csv_row(row: Union[str, Sequence[str]]) -> CoachEvent:
        """
        Decode an event from a CSV record string or an already-split field list.

        Raises:
            MalformedEventError: Wrong column count or missing required field
            UnknownEnumValueError: Unrecognised phase or outcome
        """
        if isinstance(row, str):
            records = list(csv.reader(StringIO(row, newline="")))
            if len(records) != 1:
                raise MalformedEventError(
                    f"Expected exactly one CSV record, got {len(records)}"
                )
            fields = records[0]
        else:
            fields = list(row)

        if len(fields) != len(CSV_COLUMNS):
            raise MalformedEventError(
                f"Invalid CSV row: expected {len(CSV_COLUMNS)} fields, got {len(fields)}"
            )

        timestamp, phase, prompt_id, guidance, outcome, tags = fields
        return _build_event(
            at=_parse_timestamp(timestamp),
            phase=_parse_phase(phase),
            prompt_id=_parse_prompt_id(prompt_id),
            guidance=guidance or None,
            outcome=_parse_outcome(outcome),
            tags=_parse_tags(tags),
        )


# =============================================================================
# Collection export/import
# =============================================================================


class ExportService:
    """
    Export and import whole event collections.

    Usage:
        service = ExportService()
        text = service.export(events, "csv")
        events = service.import_events(text, "csv")
    """

    SUPPORTED_FORMATS = ("json", "csv")

    def __init__(self, serializer: EventSerializer = None):
        self.serializer = serializer or EventSerializer()

    def export(self, events: Iterable[CoachEvent], format: str = "json") -> str:
        """
        Export events to the given format.

        Raises:
            ValueError: If format is not supported
        """
        fmt = self._check_format(format)
        events = list(events)
        result = self.export_json(events) if fmt == "json" else self.export_csv(events)

        log.info(
            "coach_events_exported",
            format=fmt,
            event_count=len(events),
            output_length=len(result),
        )
        return result

    def import_events(self, text: str, format: str = "json") -> List[CoachEvent]:
        """
        Import events previously produced by ``export``.

        Raises:
            ValueError: If format is not supported
            MalformedEventError / UnknownEnumValueError: On the first bad record
        """
        fmt = self._check_format(format)
        events = self.import_json(text) if fmt == "json" else self.import_csv(text)
        log.info("coach_events_imported", format=fmt, event_count=len(events))
        return events

    def export_json(self, events: Iterable[CoachEvent]) -> str:
        return json.dumps([self.serializer.to_json(e) for e in events], indent=2)

    def import_json(self, text: str) -> List[CoachEvent]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedEventError(f"Invalid JSON export: {e}") from e
        if not isinstance(data, list):
            raise MalformedEventError("JSON export must be a list of events")
        return [self.serializer.from_json(item) for item in data]

    def export_csv(self, events: Iterable[CoachEvent]) -> str:
        output = StringIO()
        writer = csv.writer(output, lineterminator=_CRLF)
        writer.writerow(CSV_COLUMNS)
        for event in events:
            writer.writerow(self.serializer.to_csv_fields(event))
        return output.getvalue()

    def import_csv(self, text: str) -> List[CoachEvent]:
        reader = csv.reader(StringIO(text, newline=""))
        header = next(reader, None)
        if header is None:
            return []
        if header not in (CSV_COLUMNS, LEGACY_CSV_COLUMNS):
            raise MalformedEventError(f"Unexpected CSV header: {','.join(header)}")
        return [self.serializer.from_csv_row(fields) for fields in reader if fields]

    def _check_format(self, format: str) -> str:
        fmt = format.lower()
        if fmt not in self.SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported export format: {format}")
        return fmt
