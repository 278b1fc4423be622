"""Month view partitioning: one bucket of items per visible calendar day."""

import logging
from datetime import date
from typing import Iterable, Literal, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from models.collection import EventCollectionItem, display_sort_key, reproject
from models.temporal import day_key, iter_days, resolve_time_zone


logger = logging.getLogger(__name__)


class EventCollectionByDay(BaseModel):
    """Items touching one day of the month grid.

    Args:
        day_events: Timed events that start and end on this day.
        spanning_events: Timed events crossing a day boundary.
        all_day_events: All-day events covering this day.
        all_events: Union of the three, in display order.
    """

    model_config = ConfigDict(frozen=True)

    day_events: list[EventCollectionItem] = Field(default_factory=list)
    spanning_events: list[EventCollectionItem] = Field(default_factory=list)
    all_day_events: list[EventCollectionItem] = Field(default_factory=list)
    all_events: list[EventCollectionItem] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.all_events)


class MonthEventCollection(BaseModel):
    """Month view result.

    Args:
        type: Always "month".
        days: Visible days, in grid order.
        events_by_day: ISO day string -> bucket, in ``days`` order.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["month"] = "month"
    days: list[date] = Field(default_factory=list)
    events_by_day: dict[str, EventCollectionByDay] = Field(default_factory=dict)

    def for_day(self, day: date) -> EventCollectionByDay:
        """Bucket for ``day``; empty if the day is not visible."""
        return self.events_by_day.get(day_key(day), EventCollectionByDay())


def partition_by_day(
    items: Iterable[EventCollectionItem],
    days: list[date],
    time_zone: Union[str, ZoneInfo],
) -> dict[str, EventCollectionByDay]:
    """Bucket items per visible day.

    An item lands in every visible day it covers. All-day items go to
    ``all_day_events``; timed items whose first and last day are this day go
    to ``day_events``; every other timed item is spanning.

    Args:
        items: Pre-filtered items.
        days: Visible days.
        time_zone: Display time zone; items are re-projected if needed.

    Returns:
        ISO day string -> EventCollectionByDay, in ``days`` order.
    """
    zone = resolve_time_zone(time_zone)
    visible = {day_key(day): day for day in days}
    buckets: dict[str, dict[str, list[EventCollectionItem]]] = {
        key: {"day": [], "spanning": [], "all_day": []} for key in visible
    }

    if days:
        first_visible, last_visible = min(days), max(days)
        for item in items:
            item = reproject(item, zone)
            first = max(item.first_day, first_visible)
            last = min(item.last_day, last_visible)
            if first > last:
                continue

            if item.all_day:
                category = "all_day"
            elif not item.is_multi_day:
                category = "day"
            else:
                category = "spanning"

            for day in iter_days(first, last):
                bucket = buckets.get(day_key(day))
                if bucket is not None:
                    bucket[category].append(item)

    result = {}
    for key, bucket in buckets.items():
        day_events = sorted(bucket["day"], key=display_sort_key)
        spanning = sorted(bucket["spanning"], key=display_sort_key)
        all_day = sorted(bucket["all_day"], key=display_sort_key)
        result[key] = EventCollectionByDay(
            day_events=day_events,
            spanning_events=spanning,
            all_day_events=all_day,
            all_events=sorted(day_events + spanning + all_day, key=display_sort_key),
        )

    logger.debug(f"Partitioned items into {len(result)} month cells")
    return result
