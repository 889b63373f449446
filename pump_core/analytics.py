"""
Analytics module for workout logs.

This module derives training volume and adherence from the saved history.
Everything is recomputed from the log store on each call.
"""

import datetime
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from pump_core.constants import ADHERENCE_WINDOW_DAYS, EXPECTED_SESSIONS
from pump_core.models import SetEntry, WorkoutLog, WorkoutLogEntry
from pump_core.utils import parse_iso_datetime, round_half_up, utc_now

logger = logging.getLogger(__name__)


@dataclass
class Adherence:
    """Sessions completed against sessions expected in the trailing window."""
    completed: int
    expected: int
    percentage: int


@dataclass
class VolumePoint:
    """One session in the volume series."""
    index: int
    date: Optional[datetime.date]
    volume: int
    label: str = ""


def set_volume(entry_set: SetEntry) -> float:
    return entry_set.volume


def entry_volume(entry: WorkoutLogEntry) -> float:
    """Sum of reps × weight over an entry's sets; unset fields count as zero."""
    return sum(set_volume(s) for s in entry.sets)


def log_volume(log: WorkoutLog) -> float:
    """Total volume of a session."""
    total = sum(entry_volume(e) for e in log.entries)
    return total if math.isfinite(total) else 0.0


def adherence(logs: Iterable[WorkoutLog], now: Optional[datetime.datetime] = None,
              window_days: int = ADHERENCE_WINDOW_DAYS,
              expected: int = EXPECTED_SESSIONS) -> Adherence:
    """
    Rolling adherence over the last ``window_days`` days.

    A log counts when its timestamp is at or after ``now - window_days``.
    Logs with an unreadable timestamp are not counted.
    """
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    cutoff = now - datetime.timedelta(days=window_days)

    completed = 0
    for log in logs:
        when = parse_iso_datetime(log.date)
        if when is None:
            logger.debug(f"Not counting log {log.id!r}: unreadable date {log.date!r}")
            continue
        if when >= cutoff:
            completed += 1

    percentage = min(100, round_half_up(completed / expected * 100)) if expected else 0
    return Adherence(completed=completed, expected=expected, percentage=percentage)


def format_date(dt: Optional[datetime.datetime]) -> str:
    """Short display date, e.g. ``19 Oct 2026``."""
    if dt is None:
        return ""
    return dt.strftime("%d %b %Y")


def format_weight(value: Optional[float]) -> str:
    """Display a weight in kilograms, or an empty string when unset."""
    if value is None:
        return ""
    return f"{value:g} kg"


def volume_series(logs: List[WorkoutLog]) -> List[VolumePoint]:
    """
    Volume per session, oldest first.

    ``logs`` is in storage order (most recent first). Indices start at 1.
    """
    series = []
    for index, log in enumerate(reversed(logs), start=1):
        when = parse_iso_datetime(log.date)
        series.append(VolumePoint(
            index=index,
            date=when.date() if when else None,
            volume=round_half_up(log_volume(log)),
            label=format_date(when) if when else log.date,
        ))
    return series
