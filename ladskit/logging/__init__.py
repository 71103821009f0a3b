"""Logging utilities for ladskit.

Operational messages go through the standard library ``logging`` module with
per-module loggers. This package adds structured audit records for binding
passes, persisted as JSONL.
"""

from __future__ import annotations

from .binding_log import append_record, build_record, load_records, log_binding  # noqa: F401

__all__ = [
    "append_record",
    "build_record",
    "load_records",
    "log_binding",
]
