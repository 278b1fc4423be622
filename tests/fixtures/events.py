"""Fixtures for CalendarEvent and EventCollectionItem."""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable

import pytest

from models.calendar_event import CalendarEvent
from models.collection import EventCollectionItem, build_collection


# Monday, 13 January 2025; the Sunday-first week is 12-18 January.
MONDAY = date(2025, 1, 13)


def at(day: date, hour: int, minute: int = 0, tz=timezone.utc) -> datetime:
    """Aware datetime on ``day`` at ``hour:minute``."""
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz)


def create_calendar_event(
    event_id: str = "event-1",
    start: datetime | date | None = None,
    end: datetime | date | None = None,
    title: str | None = None,
    **kwargs,
) -> CalendarEvent:
    """Create a timed CalendarEvent with sensible defaults.

    Args:
        event_id: Event identifier.
        start: Start boundary (defaults to Monday 09:00 UTC).
        end: End boundary (defaults to one hour after start).
        title: Title (defaults to the id).
        **kwargs: Additional fields to override.

    Returns:
        CalendarEvent instance ready for testing.
    """
    start = start if start is not None else at(MONDAY, 9)
    end = end if end is not None else start + timedelta(hours=1)
    return CalendarEvent(
        id=event_id,
        title=title if title is not None else event_id,
        start=start,
        end=end,
        **kwargs,
    )


def create_all_day_event(
    event_id: str = "all-day-1",
    first_day: date = MONDAY,
    days: int = 1,
    **kwargs,
) -> CalendarEvent:
    """Create a date-only all-day event covering ``days`` days.

    The end is exclusive, as providers deliver it.
    """
    return CalendarEvent(
        id=event_id,
        title=kwargs.pop("title", event_id),
        start=first_day,
        end=first_day + timedelta(days=days),
        all_day=True,
        **kwargs,
    )


def timed_events(spans: Iterable[tuple[str, int, int, int, int]], day: date = MONDAY) -> list[CalendarEvent]:
    """Build timed events from ``(id, start_h, start_m, end_h, end_m)`` tuples."""
    return [
        create_calendar_event(event_id, at(day, sh, sm), at(day, eh, em))
        for event_id, sh, sm, eh, em in spans
    ]


def create_items(events: Iterable[CalendarEvent], time_zone: str = "UTC") -> list[EventCollectionItem]:
    return build_collection(events, time_zone)


@pytest.fixture
def monday() -> date:
    """The Monday most layout tests are anchored on."""
    return MONDAY


@pytest.fixture
def overlapping_morning() -> list[CalendarEvent]:
    """09:00-10:00, 09:30-10:30 and 10:00-11:00 on Monday."""
    return timed_events(
        [
            ("a", 9, 0, 10, 0),
            ("b", 9, 30, 10, 30),
            ("c", 10, 0, 11, 0),
        ]
    )
