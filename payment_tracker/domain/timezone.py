"""
Display timezone normalization.

Payments are stored as UTC instants but every date the user sees or types is
in US Eastern time. Date-range filtering always projects instants onto an
Eastern calendar date first; comparing raw UTC instants with user-entered
dates shifts evening payments onto the next day.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from payment_tracker.domain.models import ensure_utc

DISPLAY_TIMEZONE = ZoneInfo("America/New_York")

DATE_KEY_FORMAT = "%Y-%m-%d"


def instant_to_display_date(instant: datetime) -> date:
    """Calendar date the instant falls on in the display timezone (naive = UTC)"""
    return ensure_utc(instant).astimezone(DISPLAY_TIMEZONE).date()


def current_display_date(now: Optional[datetime] = None) -> date:
    """Today's date key in the display timezone"""
    return instant_to_display_date(now or datetime.now(timezone.utc))


def display_datetime_to_instant(local: Union[datetime, str]) -> datetime:
    """
    Convert a wall-clock value entered in display time to a UTC instant.

    Accepts a naive datetime or an ISO string such as "2025-10-19T10:00".
    Ambiguous fall-back times resolve to the first (daylight) occurrence.
    """
    if isinstance(local, str):
        local = datetime.fromisoformat(local.strip())
    if local.tzinfo is not None:
        return local.astimezone(timezone.utc)
    return local.replace(tzinfo=DISPLAY_TIMEZONE).astimezone(timezone.utc)


def instant_to_display_datetime(instant: datetime) -> datetime:
    """Naive display-time wall clock for an instant"""
    return ensure_utc(instant).astimezone(DISPLAY_TIMEZONE).replace(tzinfo=None)


def to_datetime_local_value(instant: datetime) -> str:
    """Minute-precision value used to pre-populate edit forms"""
    return instant_to_display_datetime(instant).strftime("%Y-%m-%dT%H:%M")


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def next_day(day: date) -> date:
    return day + timedelta(days=1)


def parse_date_key(text: str) -> date:
    """Parse a strict YYYY-MM-DD date key"""
    return datetime.strptime(text.strip(), DATE_KEY_FORMAT).date()


def format_date_key(day: date) -> str:
    return day.strftime(DATE_KEY_FORMAT)


def _hour12(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_display_datetime(instant: datetime) -> str:
    """e.g. "October 19, 2025, 10:00 AM" in display time"""
    local = instant_to_display_datetime(instant)
    return f"{local:%B} {local.day}, {local.year}, {_hour12(local)}"


def format_long_date(day: date) -> str:
    """Long form, e.g. October 19, 2025"""
    return f"{day:%B} {day.day}, {day.year}"


def format_short_date(day: date) -> str:
    """Short form without year, e.g. Oct 19"""
    return f"{day:%b} {day.day}"


def format_short_date_with_year(day: date) -> str:
    """Short form, e.g. Oct 19, 2025"""
    return f"{day:%b} {day.day}, {day.year}"
