"""Week and day view partitioning.

Timed events are laid out per day column in the time grid; an event that
crosses midnight gets one segment per visible day it touches, flagged with
``is_first_day``/``is_last_day`` so the renderer can suppress repeated titles.
All-day events are placed as bars in the header row, lane-assigned across the
visible columns.
"""

import logging
from datetime import date
from typing import Iterable, Literal, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from models.collection import EventCollectionItem, display_sort_key, reproject
from models.lanes import (
    LaneInterval,
    PositionedEvent,
    assign_lanes,
    lane_geometry,
)
from models.temporal import MINUTES_PER_DAY, minutes_since_midnight, resolve_time_zone


logger = logging.getLogger(__name__)


class AllDaySlot(BaseModel):
    """One column's share of an all-day bar."""

    model_config = ConfigDict(frozen=True)

    item: EventCollectionItem
    lane: int
    day_index: int
    is_first_day: bool
    is_last_day: bool


class MultiDayPlacement(BaseModel):
    """An all-day bar in the header row.

    Args:
        item: The placed item.
        lane: Header lane (row) index.
        col_start: Index of the first visible column the bar covers.
        span: Number of visible columns covered.
        is_first_day: The bar starts on the item's real first day.
        is_last_day: The bar ends on the item's real last day.
    """

    model_config = ConfigDict(frozen=True)

    item: EventCollectionItem
    lane: int = Field(ge=0)
    col_start: int = Field(ge=0)
    span: int = Field(ge=1)
    is_first_day: bool
    is_last_day: bool

    @property
    def day_indices(self) -> list[int]:
        return list(range(self.col_start, self.col_start + self.span))


class _ColumnEventCollection(BaseModel):
    """Shared shape of the week and day view results.

    Args:
        days: Visible day columns, in order.
        all_day_events: All-day items touching any visible day.
        all_day_placements: Header bars, lane-assigned.
        all_day_lane_count: Lanes used by the header row.
        positioned_events: One positioned list per column.
    """

    model_config = ConfigDict(frozen=True)

    days: list[date] = Field(default_factory=list)
    all_day_events: list[EventCollectionItem] = Field(default_factory=list)
    all_day_placements: list[MultiDayPlacement] = Field(default_factory=list)
    all_day_lane_count: int = 0
    positioned_events: list[list[PositionedEvent]] = Field(default_factory=list)

    def all_day_slots(self) -> list[list[AllDaySlot]]:
        """Header bars split into per-column slots, one list per column."""
        slots: list[list[AllDaySlot]] = [[] for _ in self.days]
        for placement in self.all_day_placements:
            for index in placement.day_indices:
                day = self.days[index]
                slots[index].append(
                    AllDaySlot(
                        item=placement.item,
                        lane=placement.lane,
                        day_index=index,
                        is_first_day=day == placement.item.first_day,
                        is_last_day=day == placement.item.last_day,
                    )
                )
        for column in slots:
            column.sort(key=lambda slot: slot.lane)
        return slots


class WeekEventCollection(_ColumnEventCollection):
    type: Literal["week"] = "week"


class DayEventCollection(_ColumnEventCollection):
    type: Literal["day"] = "day"


def _segment_minutes(item: EventCollectionItem, day: date) -> tuple[float, float]:
    """Start and end of the item's segment on ``day``, in wall-clock minutes.

    When the item starts and ends on ``day`` the segment is never shorter than
    the elapsed time, so an event across a DST fold (01:30 to the repeated
    01:30) keeps its real length instead of collapsing to zero.
    """
    start = minutes_since_midnight(item.start) if item.start.date() == day else 0
    end = minutes_since_midnight(item.end) if item.end.date() == day else MINUTES_PER_DAY
    if item.start.date() == day == item.end.date():
        end = min(max(end, start + item.duration_seconds / 60), MINUTES_PER_DAY)
    return start, max(start, end)


def position_events_for_day(
    items: Iterable[EventCollectionItem],
    day: date,
    cell_height_px: float,
    start_hour: int = 0,
    end_hour: int = 24,
) -> list[PositionedEvent]:
    """Lay out the timed items of one day column.

    Lanes are computed over the whole column rather than per overlap cluster,
    so every event in the column shares the same lane width. Items sharing an
    id (one event seen through two calendars) are each positioned.

    Args:
        items: Timed items; those not covering ``day`` are ignored.
        day: The column's day.
        cell_height_px: Height of one hour cell.
        start_hour: First visible hour.
        end_hour: Hour the grid ends at.

    Returns:
        Positioned events in display order.
    """
    window_start = start_hour * 60
    window_end = end_hour * 60
    segments: list[tuple[EventCollectionItem, float, float]] = []
    for item in items:
        if item.all_day or not item.covers_day(day):
            continue
        start, end = _segment_minutes(item, day)
        if start >= window_end or end < window_start or (end == window_start and start < end):
            continue
        segments.append((item, max(start, window_start), min(end, window_end)))

    assignment = assign_lanes(
        LaneInterval(key=(item.id, position), start=start, end=end)
        for position, (item, start, end) in enumerate(segments)
    )

    positioned = []
    for position in _display_order(item for item, _, _ in segments):
        item, start, end = segments[position]
        lane = assignment.lanes[(item.id, position)]
        left, width, z_index = lane_geometry(lane, assignment.lane_count)
        positioned.append(
            PositionedEvent(
                item=item,
                top=(start - window_start) * cell_height_px / 60,
                height=(end - start) * cell_height_px / 60,
                left=left,
                width=width,
                z_index=z_index,
                lane=lane,
                is_first_day=day == item.first_day,
                is_last_day=day == item.last_day,
            )
        )
    return positioned


def place_all_day_events(
    items: Iterable[EventCollectionItem], days: list[date]
) -> tuple[list[MultiDayPlacement], int]:
    """Lane-assign all-day bars across the visible columns.

    Hidden days (e.g. weekends) are simply absent from ``days``; a bar covers
    the contiguous run of visible columns inside its date range.

    Args:
        items: All-day items.
        days: Visible columns, ascending.

    Returns:
        (placements in display order, number of header lanes used).
    """
    spans: list[tuple[EventCollectionItem, int, int]] = []
    for item in items:
        covered = [index for index, day in enumerate(days) if item.covers_day(day)]
        if covered:
            spans.append((item, covered[0], len(covered)))

    # Column space keeps lanes minimal for what is actually visible.
    assignment = assign_lanes(
        LaneInterval(key=(item.id, position), start=col_start, end=col_start + span)
        for position, (item, col_start, span) in enumerate(spans)
    )

    placements = []
    for position in _display_order(item for item, _, _ in spans):
        item, col_start, span = spans[position]
        placements.append(
            MultiDayPlacement(
                item=item,
                lane=assignment.lanes[(item.id, position)],
                col_start=col_start,
                span=span,
                is_first_day=days[col_start] == item.first_day,
                is_last_day=days[col_start + span - 1] == item.last_day,
            )
        )
    return placements, assignment.lane_count


def _display_order(items: Iterable[EventCollectionItem]) -> list[int]:
    """Positions of ``items`` in display order, input order breaking ties."""
    keyed = [(display_sort_key(item), position) for position, item in enumerate(items)]
    return [position for _, position in sorted(keyed)]


def partition_for_columns(
    items: Iterable[EventCollectionItem],
    days: list[date],
    cell_height_px: float,
    time_zone: Union[str, ZoneInfo],
    start_hour: int = 0,
    end_hour: int = 24,
    view_type: Literal["week", "day"] = "week",
) -> Union[WeekEventCollection, DayEventCollection]:
    """Build the week (or day) view collection.

    Args:
        items: Pre-filtered items.
        days: Visible columns; a single day for the day view.
        cell_height_px: Height of one hour cell.
        time_zone: Display time zone; items are re-projected if needed.
        start_hour: First visible hour.
        end_hour: Hour the grid ends at.
        view_type: "week" or "day".

    Returns:
        WeekEventCollection or DayEventCollection.
    """
    zone = resolve_time_zone(time_zone)
    items = [reproject(item, zone) for item in items]
    all_day = sorted(
        (item for item in items if item.all_day and any(item.covers_day(day) for day in days)),
        key=display_sort_key,
    )
    timed = [item for item in items if not item.all_day]

    placements, lane_count = place_all_day_events(all_day, days)
    positioned = [
        position_events_for_day(timed, day, cell_height_px, start_hour, end_hour)
        for day in days
    ]

    logger.debug(
        f"Laid out {len(timed)} timed and {len(all_day)} all-day items "
        f"over {len(days)} columns"
    )

    collection_cls = DayEventCollection if view_type == "day" else WeekEventCollection
    return collection_cls(
        days=list(days),
        all_day_events=all_day,
        all_day_placements=placements,
        all_day_lane_count=lane_count,
        positioned_events=positioned,
    )
