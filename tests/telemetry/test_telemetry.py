import logging

import pytest

from ladskit.telemetry import LoggingTelemetryClient, NoOpTelemetryClient


def test_span_records_failure_and_reraises(telemetry):
    with pytest.raises(RuntimeError):
        with telemetry.span("recording.export", attributes={"format": "json"}):
            raise RuntimeError("boom")

    (name, attributes), = telemetry.spans
    assert name == "recording.export"
    assert attributes["success"] is False
    assert attributes["duration_ms"] >= 0.0


def test_logging_client_emits_debug(caplog):
    client = LoggingTelemetryClient()

    with caplog.at_level(logging.DEBUG, logger="ladskit.telemetry"):
        with client.span("semantics.bind_defaults") as span:
            span.set_attribute("added", 2)

    assert "semantics.bind_defaults" in caplog.text
    assert "'added': 2" in caplog.text


def test_noop_client_discards():
    with NoOpTelemetryClient().span("anything") as span:
        span.set_attribute("x", 1)


def test_clients_are_logging_or_noop():
    import ladskit.telemetry as telemetry_module

    assert sorted(telemetry_module.__all__) == [
        "LoggingTelemetryClient",
        "NoOpTelemetryClient",
        "TelemetryClient",
        "TelemetrySpan",
    ]
    assert not hasattr(telemetry_module, "ConsoleTelemetryClient")
