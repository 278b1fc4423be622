"""Event collection builder and relevance pre-filter.

Raw events are normalized once into EventCollectionItem tuples; every later
stage (partitioning, lane assignment, overflow) works on these items only.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from models.calendar_event import CalendarEvent
from models.temporal import (
    instant_key,
    is_date_only,
    last_visible_day,
    resolve_time_zone,
    start_of_day,
    to_zoned_datetime,
)


logger = logging.getLogger(__name__)

# Exclusive all-day ends are pulled back by this much so that an event ending
# at midnight of day N reads as ending on day N-1.
ALL_DAY_END_ADJUSTMENT = timedelta(seconds=1)


class EventCollectionItem(BaseModel):
    """An event with its boundaries projected into the display time zone.

    Args:
        event: The source event, untouched.
        start: Projected start.
        end: Projected end; all-day ends are exclusive minus one second.
    """

    model_config = ConfigDict(frozen=True)

    event: CalendarEvent = Field(description="Source event")
    start: datetime = Field(description="Projected start")
    end: datetime = Field(description="Projected end")

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def all_day(self) -> bool:
        return self.event.spans_whole_days

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return last_visible_day(self.start, self.end, self.all_day)

    @property
    def is_multi_day(self) -> bool:
        return self.first_day != self.last_day

    @property
    def duration_seconds(self) -> float:
        return self.end.timestamp() - self.start.timestamp()

    def covers_day(self, day: date) -> bool:
        """Whether the item occupies any part of ``day``."""
        return self.first_day <= day <= self.last_day


def _normalize_event(event: CalendarEvent, zone: ZoneInfo) -> EventCollectionItem:
    start = to_zoned_datetime(event.start, zone)
    end = to_zoned_datetime(event.end, zone)

    if event.all_day or is_date_only(event.end):
        end = end - ALL_DAY_END_ADJUSTMENT

    if instant_key(end) < instant_key(start):
        logger.warning(
            f"Event {event.id} ends before it starts after normalization "
            f"({start.isoformat()} > {end.isoformat()}); clamping to zero duration"
        )
        end = start

    return EventCollectionItem(event=event, start=start, end=end)


def build_collection(
    events: Iterable[CalendarEvent], time_zone: Union[str, ZoneInfo]
) -> list[EventCollectionItem]:
    """Map raw events into items projected into ``time_zone``.

    Args:
        events: Events to normalize.
        time_zone: Display time zone identifier.

    Returns:
        One item per event, in input order.

    Raises:
        InvalidTimeZoneError: If ``time_zone`` cannot be resolved.
        UnsupportedDateValueError: If an event boundary has an unknown shape.
    """
    zone = resolve_time_zone(time_zone)
    return [_normalize_event(event, zone) for event in events]


def reproject(item: EventCollectionItem, time_zone: Union[str, ZoneInfo]) -> EventCollectionItem:
    """Re-express an item's boundaries in another zone; no copy if unchanged."""
    zone = resolve_time_zone(time_zone)
    if item.start.tzinfo is zone and item.end.tzinfo is zone:
        return item
    return item.model_copy(
        update={"start": item.start.astimezone(zone), "end": item.end.astimezone(zone)}
    )


def filter_by_range(
    items: Iterable[EventCollectionItem], range_start: datetime, range_end: datetime
) -> list[EventCollectionItem]:
    """Keep items that may overlap ``[range_start, range_end]``.

    The test is inclusive at both ends: an item touching a range boundary is
    kept, since dropping it here would hide it from every later stage.

    Args:
        items: Items to filter.
        range_start: First instant of the visible range.
        range_end: Last instant of the visible range.

    Returns:
        Items whose end is not before the range and whose start is not after it.
    """
    lower = instant_key(range_start)
    upper = instant_key(range_end)
    return [
        item
        for item in items
        if instant_key(item.end) >= lower and instant_key(item.start) <= upper
    ]


def visible_range(days: list[date], time_zone: Union[str, ZoneInfo]) -> tuple[datetime, datetime]:
    """Instants bounding a list of visible days.

    Args:
        days: Visible days, in order.
        time_zone: Display time zone.

    Returns:
        (start of the first day, one second before the day after the last).

    Raises:
        ValueError: If ``days`` is empty.
    """
    if not days:
        raise ValueError("visible_range requires at least one day")
    zone = resolve_time_zone(time_zone)
    first, last = min(days), max(days)
    return (
        start_of_day(first, zone),
        start_of_day(last + timedelta(days=1), zone) - ALL_DAY_END_ADJUSTMENT,
    )


def filter_past_events(
    items: Iterable[EventCollectionItem], show_past_events: bool, now: Optional[datetime] = None
) -> list[EventCollectionItem]:
    """Drop items that ended before ``now`` unless past events are shown.

    Args:
        items: Items to filter.
        show_past_events: View preference; True keeps everything.
        now: Reference instant (defaults to the current time).

    Returns:
        The filtered items.
    """
    items = list(items)
    if show_past_events:
        return items
    reference = instant_key(now or datetime.now().astimezone())
    return [item for item in items if instant_key(item.end) >= reference]


def display_sort_key(item: EventCollectionItem) -> tuple:
    """Start ascending, longer duration first, then id for determinism."""
    return (instant_key(item.start), -item.duration_seconds, item.id)


def sort_items(items: Iterable[EventCollectionItem]) -> list[EventCollectionItem]:
    return sorted(items, key=display_sort_key)
