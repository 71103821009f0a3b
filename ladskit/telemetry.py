"""
Telemetry Collection - Annotation and Export Monitoring

WHAT: Lightweight spans around binding passes and report exports
WHERE: ladskit/telemetry.py - observability layer
WHO: SemanticBinder and DataExporter emitting span data
TIME: Zero overhead with the no-op client, <0.1ms per span otherwise

Spans carry duration and success plus whatever attributes the emitter sets
(edge counts for binding, path and sheet count for exports). Sinks are
pluggable by overriding ``emit_span``.
"""

from __future__ import annotations

import logging
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Dict, Optional


class TelemetrySpan(AbstractContextManager["TelemetrySpan"]):
    """Context manager capturing span metadata and duration."""

    def __init__(
        self,
        client: "TelemetryClient",
        name: str,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._client = client
        self.name = name
        self.attributes: Dict[str, Any] = dict(attributes or {})
        self._start: float = 0.0

    def __enter__(self) -> "TelemetrySpan":
        self._start = time.perf_counter()
        return self

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def __exit__(self, exc_type, exc, exc_tb) -> bool:
        duration_ms = (time.perf_counter() - self._start) * 1000.0
        self.attributes.setdefault("success", exc is None)
        self.attributes["duration_ms"] = duration_ms
        self._client.emit_span(self.name, self.attributes)
        return False


class TelemetryClient:
    """Base telemetry client; override `emit_span` for custom sinks."""

    def span(
        self,
        name: str,
        *,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> TelemetrySpan:
        return TelemetrySpan(self, name, attributes)

    def emit_span(self, name: str, attributes: Dict[str, Any]) -> None:
        """Handle span completion. Subclasses override this hook."""

        raise NotImplementedError


@dataclass(slots=True)
class NoOpTelemetryClient(TelemetryClient):
    """Telemetry client that silently discards spans."""

    def emit_span(self, name: str, attributes: Dict[str, Any]) -> None:  # noqa: D401 - intentionally empty
        pass


class LoggingTelemetryClient(TelemetryClient):
    """Client forwarding spans to a standard library logger at DEBUG."""

    def __init__(self, logger_name: str = "ladskit.telemetry") -> None:
        self._logger = logging.getLogger(logger_name)

    def emit_span(self, name: str, attributes: Dict[str, Any]) -> None:
        self._logger.debug("%s %s", name, {k: attributes[k] for k in sorted(attributes)})


__all__ = [
    "LoggingTelemetryClient",
    "NoOpTelemetryClient",
    "TelemetryClient",
    "TelemetrySpan",
]
