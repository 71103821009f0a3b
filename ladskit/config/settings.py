"""
Recording Settings - Environment-derived configuration

WHAT: Dataclass settings for recorders, exporters and binding audit logs
WHERE: ladskit/config/settings.py - configuration layer
WHO: Device servers wiring recorders and exporters for a run

Environment variables:
- LADS_RESULTS_DIR: directory receiving exported reports (default ``results``)
- LADS_ABBREVIATE_TRACKS: shorten track names to PV/SP (default off)
- LADS_TIMESTAMP_FORMAT: spreadsheet number format of the timestamp column
- LADS_DICTIONARY_NAMESPACE: namespace URI probed by the reference catalog
- LADS_BINDING_LOG: optional JSONL file receiving binding audit records
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..semantics.dictionary_ids import AFO_NAMESPACE_URI

DEFAULT_RESULTS_DIR = os.environ.get("LADS_RESULTS_DIR", "results")
DEFAULT_TIMESTAMP_FORMAT = "dd.mm.yyyy hh:mm:ss"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def parse_flag(value: Optional[str], *, default: bool = False) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"Invalid boolean flag value '{value}'")


@dataclass(slots=True)
class RecordingConfig:
    results_directory: Path = Path(DEFAULT_RESULTS_DIR)
    abbreviate_track_names: bool = False
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    column_width: int = 20
    dictionary_namespace_uri: str = AFO_NAMESPACE_URI
    binding_log_path: Optional[Path] = None

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "RecordingConfig":
        env = os.environ if environ is None else environ
        log_path = env.get("LADS_BINDING_LOG")
        return RecordingConfig(
            results_directory=Path(env.get("LADS_RESULTS_DIR", DEFAULT_RESULTS_DIR)),
            abbreviate_track_names=parse_flag(env.get("LADS_ABBREVIATE_TRACKS")),
            timestamp_format=env.get("LADS_TIMESTAMP_FORMAT", DEFAULT_TIMESTAMP_FORMAT),
            dictionary_namespace_uri=env.get("LADS_DICTIONARY_NAMESPACE", AFO_NAMESPACE_URI),
            binding_log_path=Path(log_path) if log_path else None,
        )


__all__ = ["DEFAULT_TIMESTAMP_FORMAT", "RecordingConfig", "parse_flag"]
