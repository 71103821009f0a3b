from datetime import datetime, timezone
from types import SimpleNamespace

from ladskit.config import EventNotification
from ladskit.graph import LocalizedText


def test_defaults_for_empty_payload():
    event = EventNotification.from_payload(None)

    assert event.severity == 0
    assert event.message == "Unknown message"
    assert event.source_name == "Unknown source"
    assert event.time.tzinfo is not None


def test_payload_normalisation():
    stamp = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
    event = EventNotification.from_payload(
        {
            "time": stamp,
            "severity": "300",
            "message": LocalizedText("Door open"),
            "sourceName": "Incubator",
            "source_node": "n_1",
        }
    )

    assert event.time == stamp
    assert event.severity == 300
    assert event.message == "Door open"
    assert event.source_name == "Incubator"


def test_unparseable_severity_falls_back():
    assert EventNotification.from_payload({"severity": "high"}).severity == 0


def test_unparseable_time_falls_back_to_receipt():
    before = datetime.now(timezone.utc)

    event = EventNotification.from_payload({"time": "n/a", "message": "late"})

    assert event.message == "late"
    assert event.time.tzinfo is not None
    assert event.time >= before


def test_attribute_payloads_are_read():
    event = EventNotification.from_payload(
        SimpleNamespace(message="Lid open", severity="20", source_name="Lid")
    )

    assert (event.message, event.severity, event.source_name) == ("Lid open", 20, "Lid")


def test_non_mapping_payload_gets_defaults():
    event = EventNotification.from_payload(42)

    assert event.message == "Unknown message"
    assert event.severity == 0
