"""
Machine-readable contract for event notifications consumed by event recorders.

Graph event payloads are loosely typed: fields may be missing, ``None``,
unparseable or wrapped in localized text, and the payload itself may be a
mapping or an attribute-style object. This model normalises them and
substitutes the documented defaults (severity 0, placeholder message and
source, time of receipt) instead of rejecting the notification. Recorders run
inside the producer's subscriber loop, so validation never raises.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)

DEFAULT_SEVERITY = 0
DEFAULT_MESSAGE = "Unknown message"
DEFAULT_SOURCE = "Unknown source"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: Any) -> Any:
    # LocalizedText and similar wrappers expose ``text``
    return getattr(value, "text", value)


class EventNotification(BaseModel):
    """One event delivered by an event source."""

    time: datetime = Field(default_factory=_now)
    severity: int = DEFAULT_SEVERITY
    message: str = DEFAULT_MESSAGE
    source_name: str = Field(default=DEFAULT_SOURCE, alias="sourceName")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("time", mode="wrap")
    @classmethod
    def _default_time(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> datetime:
        if value is None:
            return _now()
        try:
            return handler(value)
        except ValidationError:
            return _now()

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> int:
        if value is None:
            return DEFAULT_SEVERITY
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_SEVERITY

    @field_validator("message", mode="before")
    @classmethod
    def _default_message(cls, value: Any) -> Any:
        value = _text(value)
        return DEFAULT_MESSAGE if value is None else str(value)

    @field_validator("source_name", mode="before")
    @classmethod
    def _default_source(cls, value: Any) -> Any:
        value = _text(value)
        return DEFAULT_SOURCE if value is None else str(value)

    @classmethod
    def from_payload(cls, payload: Any) -> "EventNotification":
        """Validate a mapping or attribute-style payload; falls back to defaults."""

        if isinstance(payload, EventNotification):
            return payload
        if payload is None:
            return cls()
        try:
            if isinstance(payload, Mapping):
                return cls.model_validate(dict(payload))
            return cls.model_validate(payload, from_attributes=True)
        except ValidationError as exc:
            logger.warning(f"Malformed event payload, using defaults: {exc.error_count()} error(s)")
            return cls()


__all__ = [
    "DEFAULT_MESSAGE",
    "DEFAULT_SEVERITY",
    "DEFAULT_SOURCE",
    "EventNotification",
]
