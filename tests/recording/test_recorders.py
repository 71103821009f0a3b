import asyncio
import logging
from datetime import datetime, timezone
from types import SimpleNamespace

import numpy as np

from ladskit.graph import DataType, EventChannel, LocalizedText
from ladskit.recording import CSV_DELIMITER, EventDataRecorder, VariableDataRecorder


def test_create_record_samples_every_track_in_order(incubator):
    recorder = VariableDataRecorder("Chamber", [incubator.target, incubator.humidity_value])

    first = recorder.create_record()
    incubator.target.write(38.0)
    second = recorder.create_record()

    assert first.values == (37.0, 80.0)
    assert second.values == (38.0, 80.0)
    assert recorder.get_last_record() is second
    assert len(recorder) == 2


def test_text_values_are_captured_as_strings(incubator):
    state = incubator.unit_state.get_child("CurrentState")
    recorder = VariableDataRecorder("States", [state])

    state.write(LocalizedText("Running"))
    record = recorder.create_record()

    assert record.values == ("Running",)


def test_csv_string_shape(incubator):
    recorder = VariableDataRecorder("Chamber", [incubator.target, incubator.humidity_value])
    for _ in range(3):
        recorder.create_record()

    csv = recorder.create_csv_string()
    lines = csv.split(CSV_DELIMITER)

    assert csv.endswith("\r\n")
    assert lines[-1] == ""
    assert len(lines[:-1]) == 4
    assert lines[0] == '"Timestamp", "Temperature.TargetValue [degC]", "Humidity.SensorValue [%]"'
    for line in lines[1:-1]:
        fields = line.split(", ")
        assert len(fields) == 3
        assert fields[0].startswith('"') and fields[0].endswith('Z"')
        assert fields[1:] == ["37.0", "80.0"]


def test_csv_quotes_strings_and_spells_booleans(incubator):
    name = incubator.device.get_child("Model")
    recorder = VariableDataRecorder("Mixed", [name, incubator.door_value])
    recorder.create_record()

    row = recorder.create_csv_string().split(CSV_DELIMITER)[1]

    assert row.split(", ")[1:] == ['"INC-200"', "false"]


def test_track_lookup_miss_warns_and_returns_none(incubator, caplog):
    recorder = VariableDataRecorder("Chamber", [incubator.target])
    recorder.create_record()

    with caplog.at_level(logging.WARNING, logger="ladskit.recording.recorder"):
        assert recorder.track_values(incubator.current) is None
        assert recorder.track_array(incubator.current) is None

    assert recorder.track_index(incubator.current) == -1
    assert "Unable to find track for variable CurrentValue" in caplog.text


def test_track_values_and_array(incubator):
    recorder = VariableDataRecorder("Chamber", [incubator.target, incubator.device.get_child("Model")])
    for value in (36.0, None, 38.0):
        incubator.target.write(value)
        recorder.create_record()

    assert recorder.track_values(incubator.target) == [36.0, None, 38.0]
    array = recorder.track_array(recorder.tracks[0])
    assert array.dtype == float
    assert np.isnan(array[1])
    assert array[2] == 38.0
    assert recorder.track_array(incubator.device.get_child("Model")) is None


def test_result_variables_copy_dictionary_edges(incubator):
    incubator.target.add_reference("HasDictionaryEntry", "ns=1;s=control_setting")
    state = incubator.unit_state.get_child("CurrentState")
    recorder = VariableDataRecorder("Chamber", [incubator.target, state])
    record = recorder.create_record()

    published = recorder.create_result_variables(record, "LastSample", incubator.result)

    target_copy = published.get_child("Temperature.TargetValue")
    state_copy = published.get_child("FunctionalUnitState.CurrentState")
    assert target_copy.read() == 37.0
    assert target_copy.engineering_units.display_name == "degC"
    assert target_copy.references("HasDictionaryEntry") == ["ns=1;s=control_setting"]
    assert state_copy.data_type == DataType.STRING
    assert state_copy.read() == "Idle"


def test_event_recorder_keeps_arrival_order(incubator):
    recorder = EventDataRecorder("Events", incubator.device)

    incubator.device.raise_event("door opened", 100)
    incubator.device.raise_event("door closed")

    assert [record.message for record in recorder.records] == ["door opened", "door closed"]
    assert recorder.records[0].severity == 100
    assert recorder.records[0].source_name == "Incubator"
    assert recorder.headers() == ["Source", "Message", "Severity"]


def test_event_recorder_substitutes_defaults(incubator):
    recorder = EventDataRecorder("Events")

    record = recorder.handle_event({"severity": None, "message": None})

    assert record.severity == 0
    assert record.message == "Unknown message"
    assert record.source_name == "Unknown source"
    assert record.timestamp.tzinfo is not None


def test_event_recorder_close_stops_recording(incubator):
    recorder = EventDataRecorder("Events", incubator.device)
    incubator.device.raise_event("before")

    recorder.close()
    incubator.device.raise_event("after")

    assert not recorder.subscribed
    assert [record.message for record in recorder.records] == ["before"]
    assert incubator.device.subscriber_count == 0


def test_event_recorder_drains_channel(incubator):
    recorder = EventDataRecorder("Events")

    async def scenario():
        channel = EventChannel(incubator.device)
        consumer = asyncio.create_task(recorder.drain(channel))
        incubator.device.raise_event("one")
        await asyncio.sleep(0)
        incubator.device.raise_event("two", 3)
        channel.close()
        return await consumer

    assert asyncio.run(scenario()) == 2
    assert [(r.message, r.severity) for r in recorder.records] == [("one", 0), ("two", 3)]


def test_csv_quotes_string_kind_values(incubator):
    started = incubator.result.get_child("Started")
    job = incubator.result.get_child("SupervisoryJobId")
    job.write(42)
    recorder = VariableDataRecorder("Run", [started, job, incubator.target])
    recorder.create_record()

    row = recorder.create_csv_string().split(CSV_DELIMITER)[1]

    assert row.split(", ")[1:] == ['"2024-03-01T08:00:00.000Z"', '"42"', "37.0"]


def test_track_values_of_none_warns(incubator, caplog):
    recorder = VariableDataRecorder("Chamber", [incubator.target])

    with caplog.at_level(logging.WARNING, logger="ladskit.recording.recorder"):
        assert recorder.track_values(None) is None
        assert recorder.track_array(None) is None

    assert "Unable to find track for variable None" in caplog.text


def test_bad_event_time_does_not_break_subscriber_loop(incubator):
    recorder = EventDataRecorder("Events", incubator.device)
    received = []
    incubator.device.subscribe(received.append)
    before = datetime.now(timezone.utc)

    incubator.device.raise_event("bad clock", 5, time="n/a")

    (record,) = recorder.records
    assert record.message == "bad clock"
    assert record.severity == 5
    assert record.timestamp.tzinfo is not None
    assert record.timestamp >= before
    assert [event["message"] for event in received] == ["bad clock"]


def test_event_recorder_accepts_attribute_and_opaque_payloads():
    recorder = EventDataRecorder("Events")

    described = recorder.handle_event(
        SimpleNamespace(message="lid open", severity=200, source_name="Lid")
    )
    opaque = recorder.handle_event(object())

    assert (described.message, described.severity, described.source_name) == ("lid open", 200, "Lid")
    assert (opaque.message, opaque.severity, opaque.source_name) == (
        "Unknown message",
        0,
        "Unknown source",
    )
    assert len(recorder) == 2


def test_event_order_survives_missing_fields(incubator):
    recorder = EventDataRecorder("Events", incubator.device)
    device = incubator.device

    device.raise_event("first", 10)
    device.raise_event(None)
    device.raise_event("third", None)
    device.raise_event("fourth", 5, source_name=None)
    device.raise_event("fifth", "bad", time=None)

    assert [(r.message, r.severity, r.source_name) for r in recorder.records] == [
        ("first", 10, "Incubator"),
        ("Unknown message", 0, "Incubator"),
        ("third", 0, "Incubator"),
        ("fourth", 5, "Unknown source"),
        ("fifth", 0, "Incubator"),
    ]
    assert all(r.timestamp.tzinfo is not None for r in recorder.records)
