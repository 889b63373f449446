"""
Template catalog.

The three-day dumbbell programme: a fixed push, pull and legs day. The
catalog is plain data; lookups that miss are programming errors.
"""

from typing import Dict, List, Optional, Tuple

from pump_core.models import Exercise, WorkoutTemplate


class TemplateNotFoundError(LookupError):
    """Raised when a template identifier is not in the catalog."""


TEMPLATES: Tuple[WorkoutTemplate, ...] = (
    WorkoutTemplate(
        id="push",
        title="Day 1 · Push",
        exercises=(
            Exercise("db-bench", "Dumbbell Bench Press", "chest", 4, "8–10", is_main=True),
            Exercise("db-shoulder-press", "Dumbbell Shoulder Press", "shoulders", 3, "10–12", superset="A"),
            Exercise("db-lateral-raise", "Dumbbell Lateral Raise", "medial delts", 3, "12–15", superset="A"),
            Exercise("db-incline-press", "Incline Dumbbell Press", "upper chest", 3, "8–10", superset="B"),
            Exercise("db-oh-tri", "Overhead Triceps Extension", "triceps", 3, "10–12", superset="B"),
        ),
    ),
    WorkoutTemplate(
        id="pull",
        title="Day 2 · Pull",
        exercises=(
            Exercise("db-row", "Bent-over Dumbbell Row", "lats/mid-back", 4, "8–10", is_main=True),
            Exercise("renegade-row", "Renegade Row", "core/back", 3, "8–10", superset="A"),
            Exercise("reverse-fly", "Reverse Fly", "rear delts", 3, "12–15", superset="A"),
            Exercise("curl", "Biceps Curl", "biceps", 3, "10–12", superset="B"),
            Exercise("hammer", "Hammer Curl", "brachioradialis", 3, "10–12", superset="B"),
        ),
    ),
    WorkoutTemplate(
        id="legs",
        title="Day 3 · Legs & Core",
        exercises=(
            Exercise("goblet-squat", "Goblet Squat", "quads/glutes", 4, "8–10", is_main=True),
            Exercise("rdl", "Romanian Deadlift", "hamstrings", 3, "8–10", superset="A"),
            Exercise("side-bend", "Side Bend", "obliques", 3, "12–15", superset="A"),
            Exercise("lunge", "Dumbbell Lunge", "quads/glutes", 3, "10–12", superset="B"),
            Exercise("russian-twist", "Russian Twist (per side)", "core", 3, "20", superset="B"),
        ),
    ),
)

_TEMPLATES_BY_ID: Dict[str, WorkoutTemplate] = {t.id: t for t in TEMPLATES}
_EXERCISES_BY_ID: Dict[str, Exercise] = {ex.id: ex for t in TEMPLATES for ex in t.exercises}


def list_templates() -> List[WorkoutTemplate]:
    """All templates in programme order."""
    return list(TEMPLATES)


def get_template(template_id: str) -> WorkoutTemplate:
    """Look up a template by identifier."""
    try:
        return _TEMPLATES_BY_ID[template_id]
    except KeyError:
        raise TemplateNotFoundError(f"No workout template with id '{template_id}'") from None


def find_exercise(exercise_id: str) -> Optional[Exercise]:
    """Look up an exercise anywhere in the catalog."""
    return _EXERCISES_BY_ID.get(exercise_id)
