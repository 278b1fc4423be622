"""Time zone normalization and calendar-day helpers.

Event boundaries arrive in three shapes:
- date-only values (``datetime.date``) for all-day events
- absolute instants (aware ``datetime`` in UTC or a fixed offset)
- zone-qualified datetimes (aware ``datetime`` carrying a ``ZoneInfo``)

Everything downstream works on aware datetimes projected into the display
time zone. Comparisons go through ``instant_key`` because Python compares two
datetimes sharing a tzinfo by wall time, which is ambiguous across a DST fold.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.errors import InvalidTimeZoneError, UnsupportedDateValueError


EventDateValue = Union[date, datetime]

MINUTES_PER_DAY = 24 * 60


def resolve_time_zone(time_zone: Union[str, ZoneInfo]) -> ZoneInfo:
    """Resolve an IANA identifier into a ZoneInfo.

    Args:
        time_zone: IANA identifier (e.g. "Europe/Amsterdam") or a ZoneInfo.

    Returns:
        The resolved ZoneInfo.

    Raises:
        InvalidTimeZoneError: If the identifier is unknown or malformed.
    """
    if isinstance(time_zone, ZoneInfo):
        return time_zone
    if not isinstance(time_zone, str) or not time_zone.strip():
        raise InvalidTimeZoneError(str(time_zone))
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimeZoneError(time_zone) from e


def is_date_only(value: object) -> bool:
    """Check whether a value is a plain calendar date.

    ``datetime`` subclasses ``date``, so a plain isinstance check is not enough.
    """
    return isinstance(value, date) and not isinstance(value, datetime)


def start_of_day(day: date, time_zone: Union[str, ZoneInfo]) -> datetime:
    """Midnight of ``day`` in ``time_zone``.

    A midnight skipped by a DST transition resolves forward to the first
    existing wall time of that day.

    Args:
        day: Calendar date.
        time_zone: Display time zone.

    Returns:
        Aware datetime at the start of the day.
    """
    zone = resolve_time_zone(time_zone)
    local = datetime.combine(day, time.min, tzinfo=zone)
    return local.astimezone(timezone.utc).astimezone(zone)


def to_zoned_datetime(value: EventDateValue, time_zone: Union[str, ZoneInfo]) -> datetime:
    """Project an event boundary into the display time zone.

    Args:
        value: Date-only value, absolute instant or zone-qualified datetime.
        time_zone: Display time zone identifier.

    Returns:
        Aware datetime expressed in ``time_zone``.

    Raises:
        InvalidTimeZoneError: If ``time_zone`` cannot be resolved.
        UnsupportedDateValueError: If ``value`` is naive or not a date at all.
    """
    zone = resolve_time_zone(time_zone)

    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise UnsupportedDateValueError(value)
        return value.astimezone(zone)

    if isinstance(value, date):
        return start_of_day(value, zone)

    raise UnsupportedDateValueError(value)


def instant_key(value: EventDateValue) -> datetime:
    """Comparison key that orders boundaries by absolute instant.

    Date-only values are read as UTC midnight so that mixed collections
    still sort deterministically.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise UnsupportedDateValueError(value)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise UnsupportedDateValueError(value)


def compare_instants(a: EventDateValue, b: EventDateValue) -> int:
    """Three-way comparison of two boundaries by instant.

    Returns:
        -1, 0 or 1.
    """
    key_a = instant_key(a)
    key_b = instant_key(b)
    return (key_a > key_b) - (key_a < key_b)


def minutes_since_midnight(value: datetime) -> float:
    """Wall-clock minutes elapsed since local midnight."""
    return value.hour * 60 + value.minute + value.second / 60


def is_midnight(value: datetime) -> bool:
    return value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0


def last_visible_day(start: datetime, end: datetime, all_day: bool = False) -> date:
    """Last calendar day an event occupies in its projected zone.

    All-day ends are already pulled back by one second when items are built.
    A timed event that ends exactly at midnight does not spill onto the
    following day.

    Args:
        start: Projected start.
        end: Projected (possibly adjusted) end.
        all_day: Whether the event is an all-day event.

    Returns:
        The last occupied calendar date, never before the start date.
    """
    first = start.date()
    last = end.date()
    if not all_day and last > first and is_midnight(end):
        last -= timedelta(days=1)
    return max(first, last)


def iter_days(first: date, last: date) -> list[date]:
    """All calendar days from ``first`` to ``last`` inclusive."""
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def _validate_week_start(week_starts_on: int) -> int:
    if not 0 <= week_starts_on <= 6:
        raise ValueError(f"week_starts_on must be between 0 (Sunday) and 6, got {week_starts_on}")
    return week_starts_on


def start_of_week(day: date, week_starts_on: int = 0) -> date:
    """First day of the week containing ``day``.

    Args:
        day: Any day inside the week.
        week_starts_on: 0 = Sunday, 1 = Monday, ... 6 = Saturday.

    Returns:
        The date the week starts on.
    """
    _validate_week_start(week_starts_on)
    sunday_based = (day.weekday() + 1) % 7
    return day - timedelta(days=(sunday_based - week_starts_on) % 7)


def get_week_days(current: date, week_starts_on: int = 0) -> list[date]:
    """The seven days of the week containing ``current``."""
    first = start_of_week(current, week_starts_on)
    return iter_days(first, first + timedelta(days=6))


def get_month_grid_days(current: date, week_starts_on: int = 0) -> list[date]:
    """Whole weeks covering the month that contains ``current``.

    Args:
        current: Any day inside the month.
        week_starts_on: 0 = Sunday, 1 = Monday, ... 6 = Saturday.

    Returns:
        Days from the start of the first week to the end of the last week.
    """
    month_start = current.replace(day=1)
    month_end = current.replace(day=calendar.monthrange(current.year, current.month)[1])
    grid_start = start_of_week(month_start, week_starts_on)
    grid_end = start_of_week(month_end, week_starts_on) + timedelta(days=6)
    return iter_days(grid_start, grid_end)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def filter_days_by_weekend_preference(days: Iterable[date], show_weekends: bool) -> list[date]:
    """Drop Saturdays and Sundays unless weekends are shown."""
    days = list(days)
    if show_weekends:
        return days
    return [day for day in days if not is_weekend(day)]


def day_key(day: date) -> str:
    """ISO day string used to key per-day buckets."""
    return day.isoformat()


def visible_range_key(days: Iterable[date]) -> str:
    """Stable cache key describing a list of visible days."""
    days = list(days)
    if not days:
        return "empty"
    return f"{days[0].isoformat()}..{days[-1].isoformat()}#{len(days)}"
