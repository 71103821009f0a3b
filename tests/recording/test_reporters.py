from ladskit.recording import (
    AnalogValueChangedEventReporter,
    EventDataRecorder,
    TwoStateChangedEventReporter,
    ValueChangedEventReporter,
    raise_event,
)


def _messages(recorder):
    return [record.message for record in recorder.records]


def test_value_change_reports_only_real_changes(incubator):
    events = EventDataRecorder("Events", incubator.device)
    model = incubator.device.get_child("Model")
    ValueChangedEventReporter.install(incubator.device, model)

    model.write("INC-200")
    model.write("INC-300")
    model.write("INC-300")

    assert _messages(events) == ["Incubator Model changed to INC-300."]


def test_first_value_of_empty_variable_only_primes(incubator):
    events = EventDataRecorder("Events", incubator.device)
    runtime = incubator.active_program.get_child("CurrentRuntime")
    runtime.write(None)
    ValueChangedEventReporter.install(incubator.device, runtime)

    runtime.write(1.0)
    runtime.write(2.0)

    assert _messages(events) == ["Incubator CurrentRuntime changed to 2.0."]


def test_analog_reporter_rounds_and_appends_unit(incubator):
    events = EventDataRecorder("Events", incubator.device)
    AnalogValueChangedEventReporter.install(incubator.device, incubator.target, decimals=1)

    incubator.target.write(38.26)
    incubator.target.write(39.0)

    assert _messages(events) == [
        "Incubator TargetValue changed to 38.3 [degC].",
        "Incubator TargetValue changed to 39 [degC].",
    ]


def test_two_state_reporter_uses_state_labels(incubator):
    events = EventDataRecorder("Events", incubator.device)
    reporter = TwoStateChangedEventReporter.install(
        incubator.device, incubator.door_value, true_state="open", false_state="closed"
    )

    incubator.door_value.write(True)
    incubator.door_value.write(False)
    reporter.uninstall()
    incubator.door_value.write(True)

    assert _messages(events) == [
        "Incubator SensorValue changed to open.",
        "Incubator SensorValue changed to closed.",
    ]


def test_raise_event_helper(incubator):
    events = EventDataRecorder("Events", incubator.device)

    raise_event(incubator.device, "manual", 200)
    raise_event(None, "ignored")

    assert [(r.message, r.severity) for r in events.records] == [("manual", 200)]
