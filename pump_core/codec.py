"""
Import and export of the workout history.

Export writes the log store as a pretty-printed JSON array. Import accepts
any JSON array and replaces the history with it verbatim; the optional
strict mode checks every element against the log schema first and applies
nothing if any element is rejected.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from pump_core.constants import DEFAULT_EXPORT_FILENAME, DEFAULT_EXPORT_INDENT
from pump_core.errors import ImportFormatError
from pump_core.models import WorkoutLogModel
from pump_core.storage import LogStore

logger = logging.getLogger(__name__)

IMPORT_SUCCESS_MESSAGE = "Imported successfully"


@dataclass
class ImportResult:
    """Outcome of an import, with the single message shown to the user."""
    ok: bool
    message: str
    count: int = 0
    rejected: List[int] = field(default_factory=list)


def export_logs(store: LogStore, indent: int = DEFAULT_EXPORT_INDENT) -> str:
    """The full history as pretty-printed JSON text."""
    return json.dumps(store.records(), indent=indent, ensure_ascii=False)


def export_to_file(store: LogStore, output_path: Optional[Union[str, Path]] = None,
                   indent: int = DEFAULT_EXPORT_INDENT) -> Path:
    """
    Write the export file.

    Args:
        store: Log store to export
        output_path: Destination; defaults to ``dumbbell-tracker-data.json``
            in the current directory
        indent: JSON indentation

    Returns:
        Path of the written file
    """
    path = Path(output_path) if output_path else Path(DEFAULT_EXPORT_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_logs(store, indent=indent))
    logger.info(f"Exported {len(store)} workouts to {path}")
    return path


def parse_import(text: str) -> List[Any]:
    """Parse import text, which must be a JSON array."""
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals, excessive nesting
        raise ImportFormatError(str(e)) from e
    if not isinstance(data, list):
        raise ImportFormatError("Invalid format")
    return data


def find_invalid_logs(records: List[Any]) -> List[int]:
    """Indices of the records that do not match the workout log schema."""
    rejected = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            rejected.append(index)
            continue
        try:
            WorkoutLogModel.model_validate(record)
        except ValidationError as e:
            logger.debug(f"Record #{index} rejected: {e}")
            rejected.append(index)
    return rejected


def import_logs(text: str, store: LogStore, strict: bool = False) -> ImportResult:
    """
    Replace the history with the logs in ``text``.

    On any failure the store is left unchanged.
    """
    try:
        records = parse_import(text)
    except ImportFormatError as e:
        logger.warning(f"Import failed: {e}")
        return ImportResult(ok=False, message=f"Import failed: {e}")

    if strict:
        rejected = find_invalid_logs(records)
        if rejected:
            indices = ", ".join(str(i) for i in rejected)
            message = f"Import failed: {len(rejected)} invalid record(s) at index {indices}"
            logger.warning(message)
            return ImportResult(ok=False, message=message, rejected=rejected)

    store.replace_all(records)
    logger.info(f"Imported {len(records)} workouts")
    return ImportResult(ok=True, message=IMPORT_SUCCESS_MESSAGE, count=len(records))
