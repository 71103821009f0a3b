"""
Data Recorders - Append-only time-ordered tables

WHAT: Sampled (variable) and event-driven recorders feeding report exports
WHERE: ladskit/recording/recorder.py - recording core
WHO: Device servers recording one run (experiment execution) at a time
TIME: create_record O(#tracks), handle_event O(1), CSV export O(rows·tracks)

Two variants share an append-only record list:
- ``VariableDataRecorder`` captures every track's current value whenever an
  external scheduler calls ``create_record()``; no back-fill, no look-ahead
- ``EventDataRecorder`` turns each event notification into one record,
  either from a direct subscription or by draining an ``EventChannel``

Delivery is serialized on one thread/event loop, so the record list is not
locked. Track sets are fixed at construction.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from ..config.events.schema import EventNotification
from ..config.settings import RecordingConfig
from ..graph.events import EventChannel
from ..graph.nodes import HAS_DICTIONARY_ENTRY, DataType, DeviceNode, DeviceVariable, NodeRole
from .track import Track, ValueKind

logger = logging.getLogger(__name__)

CSV_DELIMITER = "\r\n"
CSV_SEPARATOR = ", "
TIMESTAMP_HEADER = "Timestamp"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_iso_timestamp(timestamp: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix for UTC."""

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    text = timestamp.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _csv_value(value: Any, kind: ValueKind = ValueKind.NUMERIC) -> str:
    # quotes and commas inside strings are written as-is
    if isinstance(value, datetime):
        value = format_iso_timestamp(value)
    if isinstance(value, str) or (kind == ValueKind.STRING and value is not None):
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True, slots=True)
class Record:
    """One sampled row; ``values`` follow the owning recorder's track order."""

    timestamp: datetime
    values: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class EventRecord:
    timestamp: datetime
    severity: int
    message: str
    source_name: str

    @classmethod
    def from_notification(cls, notification: EventNotification) -> "EventRecord":
        return cls(
            timestamp=notification.time,
            severity=notification.severity,
            message=notification.message,
            source_name=notification.source_name,
        )

    @property
    def values(self) -> tuple[Any, ...]:
        return (self.source_name, self.message, self.severity)


class DataRecorder(ABC):
    """Common surface used by exporters: identifier, headers and rows."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        self._records: List[Any] = []

    @property
    def records(self) -> tuple[Any, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get_last_record(self) -> Optional[Any]:
        """Most recent record, or ``None`` while nothing was recorded."""

        if not self._records:
            return None
        return self._records[-1]

    @abstractmethod
    def headers(self) -> List[str]:
        """Column labels following the timestamp column."""

    def column_widths(self) -> Optional[Sequence[int]]:
        """Per-column widths including the timestamp column; ``None`` for uniform."""

        return None

    def rows(self) -> Iterator[List[Any]]:
        for record in self._records:
            yield [record.timestamp, *record.values]


class VariableDataRecorder(DataRecorder):
    """Samples a fixed, ordered set of variables on demand."""

    def __init__(
        self,
        identifier: str,
        variables: Iterable[DeviceVariable],
        *,
        abbreviate: bool = False,
    ) -> None:
        super().__init__(identifier)
        self.tracks: tuple[Track, ...] = tuple(
            Track.from_variable(variable, abbreviate=abbreviate) for variable in variables
        )

    @classmethod
    def from_config(
        cls, identifier: str, variables: Iterable[DeviceVariable], config: RecordingConfig
    ) -> "VariableDataRecorder":
        return cls(identifier, variables, abbreviate=config.abbreviate_track_names)

    def headers(self) -> List[str]:
        return [track.label for track in self.tracks]

    def create_record(self) -> Record:
        record = Record(
            timestamp=_utcnow(),
            values=tuple(track.capture() for track in self.tracks),
        )
        self._records.append(record)
        return record

    def track_index(self, source: "Track | DeviceVariable") -> int:
        variable = source.source if isinstance(source, Track) else source
        for index, track in enumerate(self.tracks):
            if track.is_bound_to(variable):
                return index
        return -1

    def track_values(self, variable: "Track | DeviceVariable") -> Optional[List[Any]]:
        """Project one column across all records; ``None`` when not a member."""

        index = self.track_index(variable)
        if index < 0:
            logger.warning(f"Unable to find track for variable {getattr(variable, 'name', variable)}")
            return None
        return [record.values[index] for record in self._records]

    def track_array(self, variable: "Track | DeviceVariable") -> Optional[np.ndarray]:
        """Numeric column as a float array; ``None`` for string tracks or misses."""

        index = self.track_index(variable)
        if index < 0:
            logger.warning(f"Unable to find track for variable {getattr(variable, 'name', variable)}")
            return None
        if self.tracks[index].value_kind != ValueKind.NUMERIC:
            return None
        values = [record.values[index] for record in self._records]
        return np.array([np.nan if v is None else float(v) for v in values], dtype=float)

    def create_csv_string(self) -> str:
        lines = [
            CSV_SEPARATOR.join(
                [f'"{TIMESTAMP_HEADER}"', *(f'"{label}"' for label in self.headers())]
            )
        ]
        for record in self._records:
            fields = [f'"{format_iso_timestamp(record.timestamp)}"']
            fields.extend(
                _csv_value(value, track.value_kind) for track, value in zip(self.tracks, record.values)
            )
            lines.append(CSV_SEPARATOR.join(fields))
        return "".join(line + CSV_DELIMITER for line in lines)

    def create_result_variables(
        self,
        record: Record,
        name: str,
        parent: DeviceNode,
        *,
        reference_type: str = HAS_DICTIONARY_ENTRY,
    ) -> DeviceNode:
        """Publish ``record`` as an object with one variable per track.

        Dictionary edges of each source variable are copied onto the derived
        variable so the published values keep their meaning.
        """

        result_object = parent.add_object(name, NodeRole.FOLDER)
        for track, value in zip(self.tracks, record.values):
            source = track.source
            data_type = source.data_type if track.value_kind == ValueKind.NUMERIC else DataType.STRING
            browse_name = track.name
            suffix = 2
            while result_object.get_child(browse_name) is not None:
                browse_name = f"{track.name}_{suffix}"
                suffix += 1
            unit = f" [{track.unit}]" if track.unit else ""
            variable = result_object.add_variable(
                browse_name,
                data_type,
                value,
                description=f"Sampled value of {track.name}{unit}",
                is_analog=source.is_analog,
                engineering_units=source.engineering_units,
            )
            for target in source.references(reference_type):
                variable.add_reference(reference_type, target)
        return result_object


class EventDataRecorder(DataRecorder):
    """Records every event notification of one source, in arrival order."""

    def __init__(self, identifier: str, event_source: Optional[DeviceNode] = None) -> None:
        super().__init__(identifier)
        self.event_source = event_source
        self._subscription: Optional[str] = None
        if event_source is not None:
            self._subscription = event_source.subscribe(self.handle_event)

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None

    def headers(self) -> List[str]:
        return ["Source", "Message", "Severity"]

    def column_widths(self) -> Optional[Sequence[int]]:
        return (20, 20, 40, 8)

    def handle_event(self, notification: Any) -> EventRecord:
        record = EventRecord.from_notification(EventNotification.from_payload(notification))
        self._records.append(record)
        return record

    async def drain(self, channel: EventChannel) -> int:
        """Consume ``channel`` until it is closed; returns the records added."""

        count = 0
        async for notification in channel:
            self.handle_event(notification)
            count += 1
        return count

    def close(self) -> None:
        """Stop recording further events; already recorded events stay."""

        if self.event_source is not None and self._subscription is not None:
            self.event_source.unsubscribe(self._subscription)
        self._subscription = None


__all__ = [
    "CSV_DELIMITER",
    "DataRecorder",
    "EventDataRecorder",
    "EventRecord",
    "Record",
    "VariableDataRecorder",
    "format_iso_timestamp",
]
