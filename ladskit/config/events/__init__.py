"""Event payload schemas."""

from .schema import DEFAULT_MESSAGE, DEFAULT_SEVERITY, DEFAULT_SOURCE, EventNotification  # noqa: F401

__all__ = ["DEFAULT_MESSAGE", "DEFAULT_SEVERITY", "DEFAULT_SOURCE", "EventNotification"]
