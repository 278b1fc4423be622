"""Single entry point producing a view collection."""

import logging
from datetime import date, datetime
from typing import Annotated, Iterable, Literal, Optional, Union

from pydantic import Field

from models.calendar_event import CalendarEvent
from models.collection import build_collection, filter_by_range, filter_past_events, visible_range
from models.settings import CalendarSettings
from models.temporal import (
    filter_days_by_weekend_preference,
    get_month_grid_days,
    get_week_days,
)
from models.views.month import MonthEventCollection, partition_by_day
from models.views.week import DayEventCollection, WeekEventCollection, partition_for_columns


logger = logging.getLogger(__name__)

ViewType = Literal["month", "week", "day"]

EventCollection = Annotated[
    Union[MonthEventCollection, WeekEventCollection, DayEventCollection],
    Field(discriminator="type"),
]


def get_visible_days(anchor: date, view_type: ViewType, settings: CalendarSettings) -> list[date]:
    """Days a view shows around ``anchor``.

    Args:
        anchor: Day the view is navigated to.
        view_type: "month", "week" or "day".
        settings: Supplies week start and the weekend preference.

    Returns:
        Visible days in order. The day view always shows ``anchor``.

    Raises:
        ValueError: If ``view_type`` is unknown.
    """
    if view_type == "day":
        return [anchor]
    if view_type == "week":
        days = get_week_days(anchor, settings.week_starts_on)
    elif view_type == "month":
        days = get_month_grid_days(anchor, settings.week_starts_on)
    else:
        raise ValueError(f"Unknown view type: {view_type}")
    return filter_days_by_weekend_preference(days, settings.preferences.show_weekends)


def build_event_collection(
    events: Iterable[CalendarEvent],
    days: list[date],
    view_type: ViewType,
    settings: Optional[CalendarSettings] = None,
    now: Optional[datetime] = None,
) -> Union[MonthEventCollection, WeekEventCollection, DayEventCollection]:
    """Normalize, filter and partition events for one view.

    Args:
        events: Raw events, in any order.
        days: Visible days.
        view_type: Which collection shape to build.
        settings: View settings; defaults apply if None.
        now: Reference instant for the past-events preference.

    Returns:
        The view collection, tagged by ``type``.

    Raises:
        InvalidTimeZoneError: If the settings' zone cannot be resolved.
        ValueError: If ``view_type`` is unknown.
    """
    settings = settings or CalendarSettings()
    metrics = settings.metrics

    if view_type not in ("month", "week", "day"):
        raise ValueError(f"Unknown view type: {view_type}")

    if not days:
        if view_type == "month":
            return MonthEventCollection()
        return DayEventCollection() if view_type == "day" else WeekEventCollection()

    items = build_collection(events, settings.time_zone)
    items = filter_past_events(items, settings.preferences.show_past_events, now)
    range_start, range_end = visible_range(days, settings.time_zone)
    items = filter_by_range(items, range_start, range_end)

    logger.debug(f"Building {view_type} collection from {len(items)} items over {len(days)} days")

    if view_type == "month":
        return MonthEventCollection(
            days=list(days),
            events_by_day=partition_by_day(items, days, settings.time_zone),
        )

    return partition_for_columns(
        items,
        days,
        metrics.hour_height,
        settings.time_zone,
        start_hour=metrics.start_hour,
        end_hour=metrics.end_hour,
        view_type=view_type,
    )
