"""Utility functions for pump_core."""

import json
import logging
import datetime
import math
import random
import string
from typing import Any, Optional
from pathlib import Path

from pump_core.constants import LOG_ID_LENGTH

logger = logging.getLogger(__name__)

# --- Data Serialization ---

def load_json_file(file_path: Path) -> Any:
    """Load JSON data from a file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Error reading JSON file '{file_path}': {e}")
        return None

def save_json_file(file_path: Path, data: Any, indent: int = 2) -> bool:
    """Save data to a JSON file."""
    try:
        text = json.dumps(data, indent=indent, ensure_ascii=False)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(text)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error writing JSON file '{file_path}': {e}")
        return False

# --- Identifiers and Timestamps ---

def generate_id(length: int = LOG_ID_LENGTH) -> str:
    """Generate a random identifier of lowercase letters and digits."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))

def utc_now() -> datetime.datetime:
    """Current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)

def format_iso_timestamp(dt: datetime.datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC timestamp with millisecond precision,
    e.g. ``2026-10-19T07:23:05.120Z``.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"

def parse_iso_datetime(dt_str: Any) -> Optional[datetime.datetime]:
    """
    Parse an ISO format datetime string into an aware UTC datetime.

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if not dt_str or not isinstance(dt_str, str):
        return None
    try:
        if dt_str.endswith('Z'):
            dt_str = dt_str[:-1] + '+00:00'
        dt = datetime.datetime.fromisoformat(dt_str)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)

# --- Numbers ---

def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))
