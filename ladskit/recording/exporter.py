"""
Data Exporter - Workbook and JSON reports from recorders

WHAT: Renders recorders into reports, writes them, registers result files
WHERE: ladskit/recording/exporter.py - recording output layer
WHO: Device servers finishing a run and publishing its artifacts
TIME: Rendering is synchronous; directory creation and writes run off-loop

Rendering builds an ``openpyxl`` workbook with one sheet per recorder: a bold
header row ``["Timestamp", labels...]`` followed by one row per record, the
timestamp column carrying a fixed date/time number format.

Durability rules:
- the artifact is written to a temporary sibling and renamed into place
- the result-file descriptor is created only after the write succeeded
- write errors propagate to the caller unchanged

The check-then-create of the destination directory is not atomic; use one
exporter per run when targeting a new directory.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..config.settings import RecordingConfig
from ..graph import browse_names as bn
from ..graph.nodes import DataType, DeviceNode, NodeRole
from ..semantics.binder import SemanticBinder
from ..telemetry import NoOpTelemetryClient, TelemetryClient
from .recorder import TIMESTAMP_HEADER, DataRecorder, format_iso_timestamp

logger = logging.getLogger(__name__)

MIME_TYPE_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MIME_TYPE_JSON = "application/json"

_SHEET_TITLE_LIMIT = 31
_INVALID_TITLE_CHARS = set("[]:*?/\\")


async def ensure_directory_exists(directory: Path) -> bool:
    """Create ``directory`` when missing; ``True`` when it was created."""

    def _ensure() -> bool:
        if directory.exists():
            if not directory.is_dir():
                raise NotADirectoryError(f"{directory} exists but is not a directory.")
            return False
        directory.mkdir(parents=True, exist_ok=True)
        return True

    created = await asyncio.to_thread(_ensure)
    if created:
        logger.info(f"Directory created: {directory}")
    return created


def _write_atomically(path: Path, writer: Callable[[Path], None]) -> None:
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        writer(tmp_path)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def _sheet_timestamp(timestamp: datetime) -> datetime:
    # spreadsheet cells cannot carry a timezone
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)


def _cell_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, datetime):
        return _sheet_timestamp(value)
    return str(value)


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_iso_timestamp(value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def sheet_title(identifier: str, taken: Iterable[str]) -> str:
    """Spreadsheet-safe, unique sheet title derived from a recorder identifier."""

    base = "".join("_" if ch in _INVALID_TITLE_CHARS else ch for ch in identifier).strip() or "Sheet"
    base = base[:_SHEET_TITLE_LIMIT]
    existing = {title.lower() for title in taken}
    title = base
    counter = 2
    while title.lower() in existing:
        suffix = f" ({counter})"
        title = base[: _SHEET_TITLE_LIMIT - len(suffix)] + suffix
        counter += 1
    return title


class DataExporter:
    """Turns completed recorders into report artifacts."""

    def __init__(
        self,
        *,
        config: Optional[RecordingConfig] = None,
        binder: Optional[SemanticBinder] = None,
        telemetry: Optional[TelemetryClient] = None,
    ) -> None:
        self.config = config or RecordingConfig()
        self.binder = binder
        self._telemetry = telemetry or NoOpTelemetryClient()

    # ------------------ rendering ------------------
    def render(self, recorders: Sequence[DataRecorder]) -> Workbook:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for recorder in recorders:
            self.add_worksheet(workbook, recorder)
        return workbook

    def add_worksheet(self, workbook: Workbook, recorder: DataRecorder) -> Worksheet:
        worksheet = workbook.create_sheet(title=sheet_title(recorder.identifier, workbook.sheetnames))
        header = [TIMESTAMP_HEADER, *recorder.headers()]
        worksheet.append(header)
        bold = Font(bold=True)
        for cell in worksheet[1]:
            cell.font = bold

        widths = recorder.column_widths() or [self.config.column_width] * len(header)
        for column, width in enumerate(widths, start=1):
            worksheet.column_dimensions[get_column_letter(column)].width = width

        for row in recorder.rows():
            timestamp, *values = row
            worksheet.append([_sheet_timestamp(timestamp), *(_cell_value(v) for v in values)])
            worksheet.cell(row=worksheet.max_row, column=1).number_format = self.config.timestamp_format
        return worksheet

    def render_json(self, recorders: Sequence[DataRecorder]) -> Dict[str, Any]:
        return {
            "recorders": [
                {
                    "identifier": recorder.identifier,
                    "columns": [TIMESTAMP_HEADER, *recorder.headers()],
                    "rows": [[_json_value(value) for value in row] for row in recorder.rows()],
                }
                for recorder in recorders
            ]
        }

    # ------------------ artifacts ------------------
    async def write_xlsx(self, directory: Path | str, file_name: str, recorders: Sequence[DataRecorder]) -> Path:
        if not recorders:
            raise ValueError("At least one recorder is required for a workbook export")
        directory = Path(directory)
        await ensure_directory_exists(directory)
        path = (directory / f"{file_name}.xlsx").resolve()
        workbook = self.render(recorders)
        attributes = {"format": "xlsx", "path": str(path), "sheets": len(workbook.sheetnames)}
        with self._telemetry.span("recording.export", attributes=attributes):
            await asyncio.to_thread(_write_atomically, path, lambda target: workbook.save(target))
        logger.info(f"XLSX file created {path}")
        return path

    async def write_json(self, directory: Path | str, file_name: str, recorders: Sequence[DataRecorder]) -> Path:
        return await self.write_document(directory, file_name, self.render_json(recorders), sheets=len(recorders))

    async def write_document(
        self,
        directory: Path | str,
        file_name: str,
        document: Mapping[str, Any],
        *,
        sheets: int = 1,
    ) -> Path:
        """Write any JSON document; timestamps become ISO-8601 strings."""

        directory = Path(directory)
        await ensure_directory_exists(directory)
        path = (directory / f"{file_name}.json").resolve()
        text = json.dumps(document, ensure_ascii=False, indent=2, default=_json_value)
        attributes = {"format": "json", "path": str(path), "sheets": sheets}
        with self._telemetry.span("recording.export", attributes=attributes):
            await asyncio.to_thread(
                _write_atomically, path, lambda target: target.write_text(text, encoding="utf-8")
            )
        logger.info(f"JSON file created {path}")
        return path

    async def write_xlsx_result_file(
        self,
        container: DeviceNode,
        name: str,
        directory: Path | str,
        file_name: str,
        recorders: Sequence[DataRecorder],
    ) -> DeviceNode:
        path = await self.write_xlsx(directory, file_name, recorders)
        return self.create_result_file(container, name, path, MIME_TYPE_XLSX)

    async def write_json_result_file(
        self,
        container: DeviceNode,
        name: str,
        directory: Path | str,
        file_name: str,
        recorders: Sequence[DataRecorder],
    ) -> DeviceNode:
        path = await self.write_json(directory, file_name, recorders)
        return self.create_result_file(container, name, path, MIME_TYPE_JSON)

    async def write_document_result_file(
        self,
        container: DeviceNode,
        name: str,
        directory: Path | str,
        file_name: str,
        document: Mapping[str, Any],
    ) -> DeviceNode:
        path = await self.write_document(directory, file_name, document)
        return self.create_result_file(container, name, path, MIME_TYPE_JSON)

    def create_result_file(
        self,
        container: DeviceNode,
        display_name: str,
        source_path: Path | str,
        mime_type: str,
        *,
        file_name: Optional[str] = None,
    ) -> DeviceNode:
        """Register an already written artifact as a result file under ``container``."""

        path = Path(source_path).resolve()
        if not path.is_file():
            raise FileNotFoundError(f"Result file content missing: {path}")

        result_file = container.add_object(display_name, NodeRole.RESULT_FILE)
        result_file.add_variable(bn.NAME, DataType.STRING, file_name or path.name)
        result_file.add_variable(bn.MIME_TYPE, DataType.STRING, mime_type)
        result_file.add_variable(bn.URL, DataType.STRING, path.as_uri())
        file_node = result_file.add_object(bn.FILE, NodeRole.FILE)
        file_node.add_variable("Path", DataType.STRING, str(path))
        file_node.add_variable("Size", DataType.INT64, path.stat().st_size)
        file_node.add_variable(bn.MIME_TYPE, DataType.STRING, mime_type)

        if self.binder is not None:
            self.binder.bind_result_file(result_file)
        return result_file


__all__ = [
    "MIME_TYPE_JSON",
    "MIME_TYPE_XLSX",
    "DataExporter",
    "ensure_directory_exists",
    "sheet_title",
]
