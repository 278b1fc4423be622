"""Per-view partitioning of event collections."""

from models.views.builder import EventCollection, build_event_collection, get_visible_days
from models.views.month import EventCollectionByDay, MonthEventCollection, partition_by_day
from models.views.week import (
    AllDaySlot,
    DayEventCollection,
    MultiDayPlacement,
    WeekEventCollection,
    partition_for_columns,
    position_events_for_day,
)

__all__ = [
    "EventCollection",
    "build_event_collection",
    "get_visible_days",
    "EventCollectionByDay",
    "MonthEventCollection",
    "partition_by_day",
    "AllDaySlot",
    "DayEventCollection",
    "MultiDayPlacement",
    "WeekEventCollection",
    "partition_for_columns",
    "position_events_for_day",
]
