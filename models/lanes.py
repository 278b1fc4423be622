"""Lane assignment for overlapping events.

Greedy interval partitioning: intervals are visited by start time (longer
first on ties, then id) and each one takes the lowest-indexed lane that has
already been vacated. This uses exactly as many lanes as the maximum number
of intervals open at once.

Intervals are half-open ``[start, end)``: an event ending at 10:00 and one
starting at 10:00 can share a lane.
"""

import heapq
from typing import Callable, Hashable, Iterable, NamedTuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from models.collection import EventCollectionItem


T = TypeVar("T")

BASE_Z_INDEX = 10


class LaneInterval(NamedTuple):
    """A half-open interval to place in a lane.

    ``start`` and ``end`` only need to be mutually comparable numbers
    (minutes of day, epoch seconds, day ordinals).
    """

    key: Hashable
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


class LaneAssignment(NamedTuple):
    """Result of assign_lanes: lane index per key, and total lanes used."""

    lanes: dict
    lane_count: int


def lane_sort_key(interval: LaneInterval) -> tuple:
    # Keys within one call share a type (event ids or (id, position)), so they compare directly.
    return (interval.start, -interval.duration, interval.key)


def assign_lanes(intervals: Iterable[LaneInterval]) -> LaneAssignment:
    """Assign every interval the lowest free lane.

    Args:
        intervals: Intervals with unique keys.

    Returns:
        LaneAssignment mapping key -> 0-based lane, plus the lane count.
    """
    lanes: dict = {}
    occupied: list[tuple[float, int]] = []  # (end, lane) min-heap
    free: list[int] = []  # vacated lane indices min-heap
    lane_count = 0

    for interval in sorted(intervals, key=lane_sort_key):
        while occupied and occupied[0][0] <= interval.start:
            _, vacated = heapq.heappop(occupied)
            heapq.heappush(free, vacated)

        if free:
            lane = heapq.heappop(free)
        else:
            lane = lane_count
            lane_count += 1

        lanes[interval.key] = lane
        heapq.heappush(occupied, (interval.end, lane))

    return LaneAssignment(lanes=lanes, lane_count=lane_count)


def place_into_lanes(entries: Iterable[T], interval_of: Callable[[T], LaneInterval]) -> list[list[T]]:
    """Group entries into lanes, each lane ordered by start.

    Args:
        entries: Objects to place.
        interval_of: Maps an entry to its interval. Keys may repeat (the same
            event id from two calendars); every entry is still placed.

    Returns:
        One list per lane, lane 0 first.
    """
    placed = []
    for position, entry in enumerate(entries):
        interval = interval_of(entry)
        placed.append((interval._replace(key=(interval.key, position)), entry))

    assignment = assign_lanes(interval for interval, _ in placed)
    grouped: list[list[T]] = [[] for _ in range(assignment.lane_count)]
    for interval, entry in sorted(placed, key=lambda pair: lane_sort_key(pair[0])):
        grouped[assignment.lanes[interval.key]].append(entry)
    return grouped


def max_overlap(intervals: Iterable[LaneInterval]) -> int:
    """Maximum number of intervals open at any instant (sweep line).

    Ends sort before starts at the same coordinate, matching the half-open
    convention used by assign_lanes.
    """
    points = []
    for interval in intervals:
        if interval.end <= interval.start:
            continue
        points.append((interval.start, 1))
        points.append((interval.end, -1))
    points.sort(key=lambda point: (point[0], point[1]))

    current = peak = 0
    for _, delta in points:
        current += delta
        peak = max(peak, current)
    return peak


def lane_geometry(lane: int, lane_count: int) -> tuple[float, float, int]:
    """Horizontal geometry of a lane within a column.

    Returns:
        (left, width, z_index); left and width are fractions of the column.
    """
    lane_count = max(lane_count, 1)
    return lane / lane_count, 1 / lane_count, BASE_Z_INDEX + lane


def month_chip_top(lane: int, chip_height: float, gap: float) -> float:
    """Vertical offset of a month-view chip in ``lane``."""
    return lane * (chip_height + gap)


class PositionedEvent(BaseModel):
    """An item with the geometry a time-grid column needs to paint it.

    Args:
        item: The positioned item.
        top: Pixels from the top of the visible time grid.
        height: Pixel height.
        left: Offset as a fraction of the column width.
        width: Width as a fraction of the column width.
        z_index: Stacking order.
        lane: Lane index within the column.
        is_first_day: The column is the item's first day.
        is_last_day: The column is the item's last day.
    """

    model_config = ConfigDict(frozen=True)

    item: EventCollectionItem
    top: float
    height: float
    left: float
    width: float
    z_index: int
    lane: int = Field(ge=0)
    is_first_day: bool = True
    is_last_day: bool = True
