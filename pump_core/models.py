"""Data models for pump_core."""

import copy
import math
from dataclasses import dataclass, field
from typing import List, Dict, Any, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt, field_validator

from pump_core.constants import UNSET
from pump_core.utils import parse_iso_datetime

Number = Union[int, float]


def coerce_number(value: Any, integer: bool = False) -> Optional[Number]:
    """
    Convert a persisted reps/weight value to a number, or None when unset.

    Numeric strings are accepted; anything else that is not a finite number
    (the empty string, None, booleans, objects) counts as unset. With
    ``integer`` a fractional value counts as unset too.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == UNSET:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(value):
            return None
    except OverflowError:
        # ints beyond the float range
        return None
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        if integer:
            return None
    return value


def encode_number(value: Optional[Number]) -> Union[Number, str]:
    """Encode an optional number for the wire, unset as the empty string."""
    return UNSET if value is None else value


@dataclass(frozen=True)
class Exercise:
    """An exercise in a workout template."""
    id: str
    name: str
    target: str
    default_sets: int
    default_reps: str
    is_main: bool = False
    superset: Optional[str] = None

    @property
    def role_label(self) -> str:
        """Short description of where the exercise sits in the session."""
        if self.is_main:
            return "Main lift"
        if self.superset:
            return f"Superset {self.superset}"
        return "Accessory"

    @property
    def prescription(self) -> str:
        """Default sets and reps, e.g. ``4×8–10``."""
        return f"{self.default_sets}×{self.default_reps}"


@dataclass(frozen=True)
class WorkoutTemplate:
    """A fixed, day-specific list of exercises."""
    id: str
    title: str
    exercises: Tuple[Exercise, ...] = ()

    def get_exercise(self, exercise_id: str) -> Optional[Exercise]:
        """Find an exercise of this template by identifier."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None


@dataclass
class SetEntry:
    """A single set. reps and weight are None while unset."""
    reps: Optional[int] = None
    weight: Optional[float] = None
    done: bool = False

    @property
    def volume(self) -> float:
        """reps × weight, with an unset field counting as zero."""
        volume = float(self.reps or 0) * float(self.weight or 0)
        # a product past the float range is not a usable volume
        return volume if math.isfinite(volume) else 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SetEntry':
        """Create a SetEntry from its persisted form."""
        return cls(
            reps=coerce_number(data.get('reps'), integer=True),
            weight=coerce_number(data.get('weight')),
            done=data.get('done') is True,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted form."""
        return {
            "reps": encode_number(self.reps),
            "weight": encode_number(self.weight),
            "done": self.done,
        }


@dataclass
class WorkoutLogEntry:
    """The sets recorded for one exercise in a session."""
    exercise_id: str
    sets: List[SetEntry] = field(default_factory=list)
    notes: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WorkoutLogEntry':
        """Create an entry from its persisted form, keeping unknown keys."""
        known = {'exerciseId', 'sets', 'notes'}
        sets = data.get('sets', [])
        return cls(
            exercise_id=str(data.get('exerciseId', '')),
            sets=[SetEntry.from_dict(s) for s in sets if isinstance(s, dict)] if isinstance(sets, list) else [],
            notes=data.get('notes') or "",
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted form."""
        data = {
            "exerciseId": self.exercise_id,
            "sets": [s.to_dict() for s in self.sets],
            "notes": self.notes,
        }
        data.update(copy.deepcopy(self.extra))
        return data


@dataclass
class WorkoutLog:
    """A workout session: a saved log, or the in-progress draft."""
    id: str
    date: str
    template_id: str
    notes: str = ""
    entries: List[WorkoutLogEntry] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WorkoutLog':
        """Create a log from its persisted form, keeping unknown keys."""
        known = {'id', 'date', 'templateId', 'notes', 'entries'}
        entries = data.get('entries', [])
        return cls(
            id=str(data.get('id', '')),
            date=str(data.get('date', '')),
            template_id=str(data.get('templateId', '')),
            notes=data.get('notes') or "",
            entries=[WorkoutLogEntry.from_dict(e) for e in entries if isinstance(e, dict)] if isinstance(entries, list) else [],
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted form."""
        data = {
            "id": self.id,
            "date": self.date,
            "templateId": self.template_id,
            "notes": self.notes,
            "entries": [e.to_dict() for e in self.entries],
        }
        data.update(copy.deepcopy(self.extra))
        return data


@dataclass
class ProfileEntry:
    """State carried over between sessions for one exercise."""
    last_weight: Optional[float] = None
    note: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileEntry':
        """Create a profile entry from its persisted form."""
        known = {'lastWeight', 'note'}
        return cls(
            last_weight=coerce_number(data.get('lastWeight')),
            note=data.get('note') or "",
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted form. Unknown weight and empty note are omitted."""
        data = copy.deepcopy(self.extra)
        if self.last_weight is not None:
            data["lastWeight"] = self.last_weight
        if self.note:
            data["note"] = self.note
        return data


# Pydantic models describing the strict schema of an exported log

class SetEntryModel(BaseModel):
    """Pydantic model for a set."""
    reps: Union[NonNegativeInt, Literal[""]] = ""
    weight: Union[NonNegativeFloat, Literal[""]] = ""
    done: bool = False


class WorkoutLogEntryModel(BaseModel):
    """Pydantic model for a log entry."""
    model_config = ConfigDict(extra="allow")

    exerciseId: str
    sets: List[SetEntryModel] = Field(default_factory=list)
    notes: str = ""


class WorkoutLogModel(BaseModel):
    """Pydantic model for a saved workout log."""
    model_config = ConfigDict(extra="allow")

    id: str
    date: str
    templateId: str
    notes: str = ""
    entries: List[WorkoutLogEntryModel] = Field(default_factory=list)

    @field_validator('date')
    @classmethod
    def validate_date(cls, v: str) -> str:
        """The timestamp must be ISO-8601."""
        if parse_iso_datetime(v) is None:
            raise ValueError(f"not an ISO-8601 timestamp: {v!r}")
        return v
