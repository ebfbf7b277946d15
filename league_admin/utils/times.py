"""
Canonical parser for scheduled dates and times-of-day.

Admin screens send times either as 24h ("14:30", "14:30:00") or as 12h
clock strings ("2:30 PM"). Everything is normalised to datetime.time so
that equal instants compare equal regardless of how they were typed.
"""
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?\s*$")


def parse_time_of_day(value: Optional[Union[str, time]]) -> Optional[time]:
    """
    Normalise a time-of-day to datetime.time.

    - None or "" -> None
    - time -> returned unchanged
    - "14:30" / "14:30:00" -> time(14, 30)
    - "2:30 PM" / "12:05 am" -> time(14, 30) / time(0, 5)

    Raises ValueError for anything else.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    m = _CLOCK_RE.match(value)
    if not m:
        raise ValueError(f"Invalid time of day: '{value}'")

    hours, minutes = int(m.group(1)), int(m.group(2))
    seconds = int(m.group(3) or 0)
    period = (m.group(4) or "").upper()

    if period:
        if not 1 <= hours <= 12:
            raise ValueError(f"Invalid 12-hour time: '{value}'")
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0

    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"Invalid time of day: '{value}'")
    return time(hours, minutes, seconds)


def parse_calendar_date(value: Optional[Union[str, date]]) -> Optional[date]:
    """Normalise an ISO date or timestamp to datetime.date; None/"" -> None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) > 10:
            # Full timestamps ("2024-01-01T09:00:00Z") keep only their date part
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid date: '{value}'") from None


def add_minutes(start: time, minutes: int) -> time:
    """Time-of-day `minutes` after `start`, wrapping past midnight."""
    total = start.hour * 60 + start.minute + minutes
    return time((total // 60) % 24, total % 60)


def format_clock(value: time) -> str:
    """24h "HH:MM" label used in conflict reasons and public schedules."""
    return value.strftime("%H:%M")
