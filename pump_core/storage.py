"""
Persistent stores.

This module provides the key-value backends that hold persisted state and
the two stores built on them:

  - ProfileStore: per-exercise carried-over state under the ``profile`` key
  - LogStore: saved workouts, most recent first, under the ``logs`` key

Both stores load once when constructed and write after every mutation.
A failed write never fails the mutation: the in-memory state stays the
source of truth and the failure is logged.
"""

import copy
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional, Union

from pump_core.constants import LOGS_KEY, PROFILE_KEY, RECENT_LOGS_LIMIT, DEFAULT_EXPORT_INDENT
from pump_core.models import ProfileEntry, WorkoutLog
from pump_core.utils import load_json_file, save_json_file

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Base class for a string-keyed store of JSON values."""

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> bool:
        """Write a value. Returns False when the write did not happen."""
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Key-value store held in process memory."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> bool:
        self._data[key] = copy.deepcopy(value)
        return True


class JsonFileStore(KeyValueStore):
    """Key-value store keeping each key in ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: Union[str, Path], indent: int = DEFAULT_EXPORT_INDENT):
        self.data_dir = Path(data_dir)
        self.indent = indent

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self.path_for(key)
        if not path.exists():
            logger.debug(f"No stored value for '{key}' at {path}")
            return default
        data = load_json_file(path)
        if data is None:
            logger.warning(f"Could not read '{key}' from {path}. Starting from an empty value.")
            return default
        return data

    def set(self, key: str, value: Any) -> bool:
        path = self.path_for(key)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create data directory '{self.data_dir}': {e}")
            return False
        return save_json_file(path, value, indent=self.indent)


def _persist(backend: KeyValueStore, key: str, value: Any) -> bool:
    """Write a store's value, logging instead of raising on failure."""
    try:
        ok = backend.set(key, value)
    except Exception as e:
        logger.error(f"Error persisting '{key}': {e}")
        ok = False
    if not ok:
        logger.warning(f"'{key}' was not persisted; changes will not survive a restart.")
    return ok


class ProfileStore:
    """Last weight and note per exercise identifier."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        raw = backend.get(PROFILE_KEY, {})
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring stored profile of type {type(raw).__name__}; expected an object.")
            raw = {}
        self._entries: Dict[str, ProfileEntry] = {
            exercise_id: ProfileEntry.from_dict(value if isinstance(value, dict) else {})
            for exercise_id, value in raw.items()
        }
        logger.debug(f"Loaded profile for {len(self._entries)} exercises")

    def __contains__(self, exercise_id: str) -> bool:
        return exercise_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, exercise_id: str) -> Optional[ProfileEntry]:
        """A copy of the profile entry for an exercise, if there is one."""
        entry = self._entries.get(exercise_id)
        return copy.deepcopy(entry) if entry is not None else None

    def last_weight(self, exercise_id: str) -> Optional[float]:
        entry = self._entries.get(exercise_id)
        return entry.last_weight if entry else None

    def note(self, exercise_id: str) -> str:
        entry = self._entries.get(exercise_id)
        return entry.note if entry else ""

    def update_last_weights(self, weights: Dict[str, float]) -> bool:
        """
        Overwrite the last weight of each given exercise, leaving notes alone.

        Exercises not in ``weights`` are untouched. Writes once.
        """
        if not weights:
            return True
        for exercise_id, weight in weights.items():
            entry = self._entries.setdefault(exercise_id, ProfileEntry())
            entry.last_weight = weight
        logger.debug(f"Updated last weight for {len(weights)} exercises")
        return _persist(self.backend, PROFILE_KEY, self.to_dict())

    def clear(self) -> bool:
        """Remove every profile entry."""
        self._entries = {}
        return _persist(self.backend, PROFILE_KEY, {})

    def to_dict(self) -> Dict[str, Any]:
        """The persisted form of the whole profile."""
        return {exercise_id: entry.to_dict() for exercise_id, entry in self._entries.items()}


class LogStore:
    """
    Saved workouts, most recent first.

    The store keeps the persisted records themselves so that imported data
    is held verbatim; ``logs()`` gives typed views of them.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        raw = backend.get(LOGS_KEY, [])
        if not isinstance(raw, list):
            logger.warning(f"Ignoring stored logs of type {type(raw).__name__}; expected an array.")
            raw = []
        self._records: List[Any] = raw
        logger.debug(f"Loaded {len(self._records)} workout logs")

    def __len__(self) -> int:
        return len(self._records)

    def records(self) -> List[Any]:
        """A deep copy of the stored records, in storage order."""
        return copy.deepcopy(self._records)

    def logs(self) -> List[WorkoutLog]:
        """Typed views of the stored records, most recent first."""
        logs = []
        for index, record in enumerate(self._records):
            if not isinstance(record, dict):
                logger.warning(f"Skipping stored log #{index}: not an object")
                continue
            logs.append(WorkoutLog.from_dict(record))
        return logs

    def recent(self, limit: int = RECENT_LOGS_LIMIT) -> List[WorkoutLog]:
        """The most recent logs."""
        return self.logs()[:limit]

    def append(self, log: WorkoutLog) -> bool:
        """Add a saved log at the front of the history."""
        self._records.insert(0, log.to_dict())
        logger.debug(f"Appended workout log {log.id}")
        return _persist(self.backend, LOGS_KEY, self._records)

    def replace_all(self, records: List[Any]) -> bool:
        """Replace the whole history. No merging or deduplication."""
        self._records = copy.deepcopy(list(records))
        logger.debug(f"Replaced history with {len(self._records)} records")
        return _persist(self.backend, LOGS_KEY, self._records)

    def clear(self) -> bool:
        """Delete every saved log. Callers are responsible for confirmation."""
        self._records = []
        logger.info("Cleared all workout logs")
        return _persist(self.backend, LOGS_KEY, [])
