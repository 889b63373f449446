"""
Progression carry-over.

When a workout is saved, the weight each exercise finished on becomes the
pre-filled weight of its next session. "Finished on" means the last set,
in recorded order, that has a weight at all, whether or not reps were
entered or the set was ticked off. Backing off in later sets therefore
carries the lighter weight forward.
"""

import logging
from typing import Dict, Iterable, Optional

from pump_core.models import SetEntry, WorkoutLog
from pump_core.storage import ProfileStore

logger = logging.getLogger(__name__)


def last_filled_weight(sets: Iterable[SetEntry]) -> Optional[float]:
    """The weight of the last set that has one, or None."""
    for entry_set in reversed(list(sets)):
        if entry_set.weight is not None:
            return entry_set.weight
    return None


def carried_weights(log: WorkoutLog) -> Dict[str, float]:
    """Map each exercise of a log with a filled weight to its carried weight."""
    weights: Dict[str, float] = {}
    for entry in log.entries:
        weight = last_filled_weight(entry.sets)
        if weight is not None:
            weights[entry.exercise_id] = weight
    return weights


def carry_over(log: WorkoutLog, profile: ProfileStore) -> Dict[str, float]:
    """
    Write the carried weights of a completed session to the profile.

    Exercises without any filled weight keep their previous profile entry.

    Returns:
        The weights that were written, keyed by exercise identifier.
    """
    weights = carried_weights(log)
    profile.update_last_weights(weights)
    logger.debug(f"Carried over weights for {len(weights)} of {len(log.entries)} exercises")
    return weights
