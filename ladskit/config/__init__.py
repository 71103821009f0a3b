"""Configuration: environment-derived settings and event payload schemas."""

from .events import EventNotification  # noqa: F401
from .settings import DEFAULT_TIMESTAMP_FORMAT, RecordingConfig, parse_flag  # noqa: F401

__all__ = ["DEFAULT_TIMESTAMP_FORMAT", "EventNotification", "RecordingConfig", "parse_flag"]
