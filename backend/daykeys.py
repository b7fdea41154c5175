"""
daykeys.py — Local calendar day keys
Daily logs are keyed by a `YYYY-MM-DD` string computed on the device's local
calendar. Everything that compares days goes through these helpers so window
and streak math never mixes UTC and local dates.
"""

import re
from datetime import date, datetime

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def day_key(d: date | datetime) -> str:
    return to_local_day(d).isoformat()


def parse_day_key(value) -> date | None:
    """Strict `YYYY-MM-DD` parse. Returns None for anything else."""
    if not isinstance(value, str) or not _DAY_KEY_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def to_local_day(value: date | datetime) -> date:
    """Calendar day of a date or timestamp; aware timestamps are shifted to local time first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def local_today() -> date:
    return datetime.now().date()
