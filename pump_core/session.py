"""
Session draft management.

A draft is the single workout in progress. It is built from a template and
the profile's carried-over state, edited in memory, and either saved into
the log store or discarded. Nothing outside the draft changes until save.
"""

import copy
import datetime
import logging
from typing import Callable, Optional, Union

from pump_core.catalog import get_template
from pump_core.errors import NoActiveDraftError
from pump_core.models import SetEntry, WorkoutLog, WorkoutLogEntry, WorkoutTemplate
from pump_core.progression import carry_over
from pump_core.storage import LogStore, ProfileStore
from pump_core.utils import format_iso_timestamp, generate_id, utc_now

logger = logging.getLogger(__name__)

# The in-progress session has the same shape as a saved log.
Draft = WorkoutLog


class SessionDraftManager:
    """Owns the draft and promotes it to a saved log."""

    def __init__(self, profile: ProfileStore, logs: LogStore,
                 clock: Callable[[], datetime.datetime] = utc_now,
                 id_factory: Callable[[], str] = generate_id):
        self.profile = profile
        self.logs = logs
        self.clock = clock
        self.id_factory = id_factory
        self._draft: Optional[Draft] = None

    @property
    def draft(self) -> Optional[Draft]:
        return self._draft

    @property
    def in_progress(self) -> bool:
        return self._draft is not None

    def _new_set(self, exercise_id: str) -> SetEntry:
        return SetEntry(reps=None, weight=self.profile.last_weight(exercise_id), done=False)

    def start(self, template: Union[WorkoutTemplate, str]) -> Draft:
        """
        Start a workout from a template, replacing any draft in progress.

        Every set of every exercise gets the profile's last weight, if known.
        """
        if isinstance(template, str):
            template = get_template(template)
        if self._draft is not None:
            logger.info(f"Discarding unsaved workout {self._draft.id}")

        entries = [
            WorkoutLogEntry(
                exercise_id=exercise.id,
                sets=[self._new_set(exercise.id) for _ in range(exercise.default_sets)],
                notes=self.profile.note(exercise.id),
            )
            for exercise in template.exercises
        ]
        self._draft = WorkoutLog(
            id=self.id_factory(),
            date=format_iso_timestamp(self.clock()),
            template_id=template.id,
            notes="",
            entries=entries,
        )
        logger.debug(f"Started workout {self._draft.id} from template '{template.id}'")
        return self._draft

    def _require_draft(self) -> Draft:
        if self._draft is None:
            raise NoActiveDraftError("No workout in progress")
        return self._draft

    def _entry(self, entry_index: int) -> WorkoutLogEntry:
        draft = self._require_draft()
        if not 0 <= entry_index < len(draft.entries):
            raise IndexError(f"Entry index {entry_index} out of range")
        return draft.entries[entry_index]

    def _set(self, entry_index: int, set_index: int) -> SetEntry:
        entry = self._entry(entry_index)
        if not 0 <= set_index < len(entry.sets):
            raise IndexError(f"Set index {set_index} out of range for entry {entry_index}")
        return entry.sets[set_index]

    def set_reps(self, entry_index: int, set_index: int, value: Optional[int]) -> Draft:
        """Set the reps of a set; None clears it and negatives become 0."""
        self._set(entry_index, set_index).reps = None if value is None else max(0, value)
        return self._draft

    def set_weight(self, entry_index: int, set_index: int, value: Optional[float]) -> Draft:
        """Set the weight of a set; None clears it."""
        if value is not None and value < 0:
            raise ValueError(f"Weight cannot be negative: {value}")
        self._set(entry_index, set_index).weight = value
        return self._draft

    def prefill_weight(self, entry_index: int, set_index: int) -> Draft:
        """Fill an empty weight from the profile. Entered weights are never overwritten."""
        entry_set = self._set(entry_index, set_index)
        if entry_set.weight is None:
            entry_set.weight = self.profile.last_weight(self._draft.entries[entry_index].exercise_id)
        return self._draft

    def set_done(self, entry_index: int, set_index: int, value: bool) -> Draft:
        self._set(entry_index, set_index).done = bool(value)
        return self._draft

    def add_set(self, entry_index: int) -> Draft:
        """Append a set to an entry, weight pre-filled from the profile."""
        entry = self._entry(entry_index)
        entry.sets.append(self._new_set(entry.exercise_id))
        return self._draft

    def set_entry_notes(self, entry_index: int, text: str) -> Draft:
        self._entry(entry_index).notes = text
        return self._draft

    def set_session_notes(self, text: str) -> Draft:
        self._require_draft().notes = text
        return self._draft

    def cancel(self) -> None:
        """Discard the draft without touching either store."""
        draft = self._require_draft()
        self._draft = None
        logger.debug(f"Cancelled workout {draft.id}")

    def save(self) -> WorkoutLog:
        """
        Save the draft: carry weights over to the profile and add the log to
        the history. There is no validation; an empty workout can be saved.
        """
        log = copy.deepcopy(self._require_draft())
        carry_over(log, self.profile)
        self.logs.append(log)
        self._draft = None
        logger.info(f"Saved workout {log.id} ({log.template_id})")
        return log
