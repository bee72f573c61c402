"""Epoch-millisecond conversion and day-counting helpers."""
import math
from datetime import date, datetime

import pytz

from carrental.utils.constants import ONE_DAY_MS


def to_epoch_ms(value) -> int:
    """
    Convert a date-like value into epoch milliseconds (UTC).
    Supports:
      - int / float epoch milliseconds
      - digit strings ('1735689600000')
      - 'YYYY-MM-DD'
      - 'YYYY-MM-DDTHH:MM:SS' with optional 'Z' or offset like '+02:00'
      - date / datetime objects
    Naive values are taken as UTC. Raises ValueError on anything else,
    including instants outside the years 1..9999.
    """
    ms = _parse_ms(value)
    if not MIN_EPOCH_MS <= ms <= MAX_EPOCH_MS:
        raise ValueError(f"Date out of range: {value!r}")
    return ms


def _parse_ms(value) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Unsupported date: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Unsupported date: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        return _datetime_ms(value)
    if isinstance(value, date):
        return _datetime_ms(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        s = value.strip()
        if not s:
            raise ValueError("Empty date")
        if s.lstrip("-").isdigit():
            return int(s)
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        return _datetime_ms(datetime.fromisoformat(s))
    raise ValueError(f"Unsupported date: {value!r}")


def _datetime_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return int(round(dt.timestamp() * 1000))


MIN_EPOCH_MS = _datetime_ms(datetime.min)
MAX_EPOCH_MS = _datetime_ms(datetime.max.replace(microsecond=999000))


def now_ms() -> int:
    return _datetime_ms(datetime.now(pytz.utc))


def rental_days(start_ms: int, end_ms: int) -> int:
    """
    Inclusive day count between two instants: a same-day rental is one day.
    The fractional day count is rounded half up before adding one.
    """
    return int(math.floor(abs(end_ms - start_ms) / ONE_DAY_MS + 0.5)) + 1


def ranges_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """
    Check overlap between the closed ranges [a_start, a_end] and [b_start, b_end].
    Both ends are inclusive, so bookings that share a boundary day overlap.
    """
    return a_start <= b_end and b_start <= a_end
