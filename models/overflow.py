"""Multi-day overflow calculation for month cells and header rows.

Given the pixel height a cell can spend on event chips, decide how many lanes
fit and which events collapse behind the "+N more" indicator.
"""

import logging
import math
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from models.calendar_event import CalendarEvent
from models.collection import EventCollectionItem, build_collection, reproject
from models.lanes import LaneInterval, place_into_lanes
from models.temporal import resolve_time_zone


logger = logging.getLogger(__name__)

DEFAULT_LANE_HEIGHT_PX = 24
DEFAULT_LANE_GAP_PX = 4


class EventCapacityInfo(BaseModel):
    """How a cell's events split into visible lanes and overflow.

    Args:
        max_visible_lanes: Lanes that fit in the available height.
        total_lanes: Lanes needed to show every event.
        visible_lanes: Lanes that are drawn, lane 0 first.
        overflow_lanes: Lanes hidden behind the indicator.
        has_overflow: Whether any event is hidden.
        overflow_count: Number of hidden events.
    """

    model_config = ConfigDict(frozen=True)

    max_visible_lanes: int = Field(ge=0, description="Lanes that fit the available height")
    total_lanes: int = Field(ge=0, description="Lanes needed for every event")
    visible_lanes: list[list[EventCollectionItem]] = Field(default_factory=list)
    overflow_lanes: list[list[EventCollectionItem]] = Field(default_factory=list)
    has_overflow: bool = False
    overflow_count: int = Field(default=0, ge=0)


def calculate_event_capacity(
    available_height_px: float,
    lane_height_px: float = DEFAULT_LANE_HEIGHT_PX,
    lane_gap_px: float = DEFAULT_LANE_GAP_PX,
    has_events: bool = True,
    min_visible_lanes: Optional[int] = None,
) -> int:
    """Number of lanes that fit in ``available_height_px``.

    Each lane after the first costs one gap, hence the gap added to the
    available height before dividing.

    Args:
        available_height_px: Measured height of the cell's event area.
        lane_height_px: Height of one chip.
        lane_gap_px: Gap between chips.
        has_events: Whether the cell has anything to show.
        min_visible_lanes: Lower bound applied when the cell has events.

    Returns:
        Visible lane budget; 0 when there is nothing to show or no space.

    Raises:
        ValueError: If the lane height is not positive or the gap is negative.
    """
    if lane_height_px <= 0:
        raise ValueError("lane_height_px must be positive")
    if lane_gap_px < 0:
        raise ValueError("lane_gap_px cannot be negative")

    if not has_events:
        return 0

    if available_height_px > 0:
        lanes = max(1, math.floor((available_height_px + lane_gap_px) / (lane_height_px + lane_gap_px)))
    else:
        lanes = 0

    if min_visible_lanes is not None:
        lanes = max(lanes, min_visible_lanes)
    return lanes


def _day_interval(item: EventCollectionItem) -> LaneInterval:
    return LaneInterval(
        key=item.id,
        start=item.first_day.toordinal(),
        end=item.last_day.toordinal() + 1,
    )


def organize_events_with_overflow(
    events: Iterable[Union[EventCollectionItem, CalendarEvent]],
    available_height_px: float,
    time_zone: Union[str, ZoneInfo] = "UTC",
    lane_height_px: float = DEFAULT_LANE_HEIGHT_PX,
    lane_gap_px: float = DEFAULT_LANE_GAP_PX,
    min_visible_lanes: Optional[int] = None,
    reserve_indicator_lane: bool = False,
) -> EventCapacityInfo:
    """Split events into visible and overflow lanes.

    Lanes are assigned at calendar-day granularity: two events overlap when
    they share at least one day in ``time_zone``.

    Args:
        events: Items (or raw events, normalized here) for one cell or row.
        available_height_px: Height available for chips.
        time_zone: Display time zone.
        lane_height_px: Height of one chip.
        lane_gap_px: Gap between chips.
        min_visible_lanes: Keep at least this many lanes visible.
        reserve_indicator_lane: When something overflows and more than one
            lane is visible, give the last visible lane to the indicator.

    Returns:
        EventCapacityInfo for the cell.

    Raises:
        InvalidTimeZoneError: If ``time_zone`` cannot be resolved.
        ValueError: If the lane geometry is invalid.
    """
    zone = resolve_time_zone(time_zone)
    events = list(events)
    raw = [event for event in events if isinstance(event, CalendarEvent)]
    items = [reproject(event, zone) for event in events if isinstance(event, EventCollectionItem)]
    items.extend(build_collection(raw, zone))

    lanes = place_into_lanes(items, _day_interval)
    max_visible = calculate_event_capacity(
        available_height_px,
        lane_height_px,
        lane_gap_px,
        has_events=bool(items),
        min_visible_lanes=min_visible_lanes,
    )

    shown = max_visible
    if reserve_indicator_lane and len(lanes) > max_visible > 1:
        shown = max_visible - 1

    visible = lanes[:shown]
    overflow = lanes[shown:]
    overflow_count = sum(len(lane) for lane in overflow)

    if overflow_count:
        logger.debug(
            f"{overflow_count} of {len(items)} events overflow "
            f"({len(lanes)} lanes, {shown} visible)"
        )

    return EventCapacityInfo(
        max_visible_lanes=max_visible,
        total_lanes=len(lanes),
        visible_lanes=visible,
        overflow_lanes=overflow,
        has_overflow=overflow_count > 0,
        overflow_count=overflow_count,
    )


def get_overflow_events(info: EventCapacityInfo) -> list[EventCollectionItem]:
    """Hidden events, flattened lane by lane."""
    return [item for lane in info.overflow_lanes for item in lane]


def get_visible_events(info: EventCapacityInfo) -> list[EventCollectionItem]:
    return [item for lane in info.visible_lanes for item in lane]
