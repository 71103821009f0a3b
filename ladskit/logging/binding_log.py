"""Structured audit records for semantic binding passes.

Each record captures which subtree was bound, by which entry point, and the
outcome counters of the pass. Records are appended to a JSONL file so runs
can be compared over time; ``dry_run`` builds the record without writing.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

from ..graph.nodes import DeviceNode


def _stats_payload(stats: Any) -> Dict[str, Any]:
    if isinstance(stats, Mapping):
        return dict(stats)
    return dict(stats.as_dict())


def build_record(
    *,
    label: str,
    root: DeviceNode,
    stats: Any,
    visited: int = 0,
    namespace_uri: str = "",
    notes: str = "",
    timestamp: datetime | None = None,
) -> Dict[str, Any]:
    """Construct a structured binding record."""

    record = {
        "label": label,
        "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
        "root": root.browse_path,
        "root_id": root.node_id,
        "role": root.role.value,
        "namespace": namespace_uri,
        "visited": visited,
    }
    record.update(_stats_payload(stats))
    if notes:
        record["notes"] = notes
    return record


def append_record(output_path: Path, record: Mapping[str, Any]) -> None:
    """Append a record to a JSONL file."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("a", encoding="utf-8") as fh:
        json.dump(record, fh, ensure_ascii=False)
        fh.write("\n")


def load_records(input_path: Path) -> list[Dict[str, Any]]:
    with input_path.open("r", encoding="utf-8") as fh:
        return [json.loads(line) for line in fh if line.strip()]


def log_binding(
    *,
    label: str,
    root: DeviceNode,
    stats: Any,
    visited: int = 0,
    namespace_uri: str = "",
    notes: str = "",
    output_path: Path | None = None,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Build (and optionally persist) a binding audit record."""

    record = build_record(
        label=label,
        root=root,
        stats=stats,
        visited=visited,
        namespace_uri=namespace_uri,
        notes=notes,
    )

    if output_path is not None and not dry_run:
        append_record(output_path, record)

    return record


__all__ = ["append_record", "build_record", "load_records", "log_binding"]
