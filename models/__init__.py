"""Calendar layout data models package.

This package contains the event model, the temporal normalization helpers,
and the layout engine stages: collection building, view partitioning, lane
assignment, overflow calculation and the optimistic mutation reducer.
"""

from models.calendar_event import Attendee, CalendarEvent, Conference
from models.collection import EventCollectionItem, build_collection, filter_by_range
from models.errors import InvalidTimeZoneError, MutationNotFoundError, UnsupportedDateValueError
from models.lanes import PositionedEvent, assign_lanes
from models.overflow import EventCapacityInfo, organize_events_with_overflow
from models.optimistic import (
    CreateAction,
    DeleteAction,
    MutationStatus,
    OptimisticEventStore,
    PendingMutation,
    UpdateAction,
    apply_optimistic_action,
    project,
)
from models.cache import LayoutCache, make_cache_key
from models.settings import CalendarSettings, LayoutMetrics, ViewPreferences
from models.temporal import to_zoned_datetime

__all__ = [
    "Attendee",
    "CalendarEvent",
    "Conference",
    "EventCollectionItem",
    "build_collection",
    "filter_by_range",
    "InvalidTimeZoneError",
    "MutationNotFoundError",
    "UnsupportedDateValueError",
    "PositionedEvent",
    "assign_lanes",
    "EventCapacityInfo",
    "organize_events_with_overflow",
    "CreateAction",
    "DeleteAction",
    "MutationStatus",
    "OptimisticEventStore",
    "PendingMutation",
    "UpdateAction",
    "apply_optimistic_action",
    "project",
    "LayoutCache",
    "make_cache_key",
    "CalendarSettings",
    "LayoutMetrics",
    "ViewPreferences",
    "to_zoned_datetime",
]
