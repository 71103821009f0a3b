"""Recording, export and event reporting for device runs."""

from __future__ import annotations

from .asm import (  # noqa: F401
    PH_SENSOR_MANIFEST,
    AllotropeSimpleModelRecorder,
    AsmRecorderOptions,
    DeviceInfo,
    PHSensorRecorder,
    SampleInfo,
)
from .exporter import (  # noqa: F401
    MIME_TYPE_JSON,
    MIME_TYPE_XLSX,
    DataExporter,
    ensure_directory_exists,
    sheet_title,
)
from .recorder import (  # noqa: F401
    CSV_DELIMITER,
    DataRecorder,
    EventDataRecorder,
    EventRecord,
    Record,
    VariableDataRecorder,
    format_iso_timestamp,
)
from .reporters import (  # noqa: F401
    AnalogValueChangedEventReporter,
    TwoStateChangedEventReporter,
    ValueChangedEventReporter,
    raise_event,
)
from .track import Track, ValueKind  # noqa: F401

__all__ = [
    "AllotropeSimpleModelRecorder",
    "AnalogValueChangedEventReporter",
    "AsmRecorderOptions",
    "CSV_DELIMITER",
    "DataExporter",
    "DataRecorder",
    "DeviceInfo",
    "EventDataRecorder",
    "EventRecord",
    "MIME_TYPE_JSON",
    "MIME_TYPE_XLSX",
    "PHSensorRecorder",
    "PH_SENSOR_MANIFEST",
    "Record",
    "SampleInfo",
    "Track",
    "TwoStateChangedEventReporter",
    "ValueChangedEventReporter",
    "ValueKind",
    "VariableDataRecorder",
    "ensure_directory_exists",
    "format_iso_timestamp",
    "raise_event",
    "sheet_title",
]
