"""Civil-date and wall-clock helpers.

Appointment dates are calendar days in the salon's timezone and times are
plain ``HH:MM`` strings. Nothing here converts to UTC: a stored date is
always shown on the same day it was booked for.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from salon.config import settings
from salon.models.enums import DatePreset, PeriodFilter


def today() -> date:
    """Current civil date in the salon timezone."""
    return datetime.now(ZoneInfo(settings.scheduling.timezone)).date()


def now_minutes() -> int:
    """Minutes since midnight on the salon wall clock."""
    now = datetime.now(ZoneInfo(settings.scheduling.timezone))
    return now.hour * 60 + now.minute


def parse_local_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or an ISO timestamp, keeping only the date part.

    ``"2024-03-15T23:30:00Z"`` is March 15th, not the next day in UTC-3.
    """
    return date.fromisoformat(value.strip()[:10])


HHMM_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"

# Stored rows may carry seconds ("09:30:00")
_STORED_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")


def parse_hhmm(value: str) -> int:
    """``"09:30"`` -> 570 minutes since midnight.

    Raises:
        ValueError: Not a wall-clock time between 00:00 and 23:59.
    """
    match = _STORED_TIME_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid time: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(total_minutes: int) -> str:
    """570 -> ``"09:30"``. Wraps past midnight."""
    hours, minutes = divmod(total_minutes % (24 * 60), 60)
    return f"{hours:02d}:{minutes:02d}"


def add_minutes(start_time: str, minutes: int) -> str:
    return format_hhmm(parse_hhmm(start_time) + minutes)


def end_time_for(start_time: str, duration_minutes: int) -> str:
    """Derived end of a booking: start + total service duration."""
    return add_minutes(start_time, duration_minutes)


# ── Ranges ───────────────────────────────────────────────────────────


def week_bounds(day: date) -> tuple[date, date]:
    """Monday..Sunday week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def preset_range(preset: DatePreset, month_cursor: date, reference: date | None = None) -> tuple[date, date]:
    """Inclusive date range for a kanban preset.

    Week presets are relative to ``reference`` (today by default); the
    whole-month preset follows the board's own month cursor.
    """
    ref = reference or today()
    if preset == DatePreset.TODAY:
        return ref, ref
    if preset == DatePreset.THIS_WEEK:
        return week_bounds(ref)
    if preset == DatePreset.NEXT_WEEK:
        return week_bounds(ref + timedelta(days=7))
    return month_bounds(month_cursor)


def period_range(period: PeriodFilter, reference: date | None = None) -> tuple[date, date]:
    """Inclusive date range for a dashboard period filter."""
    ref = reference or today()
    if period == PeriodFilter.HOJE:
        return ref, ref
    if period == PeriodFilter.ULTIMOS_7_DIAS:
        return ref - timedelta(days=6), ref
    if period == PeriodFilter.ESTE_MES:
        return month_bounds(ref)
    if period == PeriodFilter.MES_PASSADO:
        return month_bounds(shift_month(ref, -1))
    return date(ref.year, 1, 1), date(ref.year, 12, 31)
