"""Unit tests for greedy lane assignment.

This module tests:
- Minimality: lane count equals the maximum number of open intervals
- No-overlap: intervals sharing a lane never overlap
- Determinism: input order does not change the assignment
- Geometry derived from lanes
"""

import random

import pytest

from models.lanes import (
    BASE_Z_INDEX,
    LaneInterval,
    assign_lanes,
    lane_geometry,
    lane_sort_key,
    max_overlap,
    month_chip_top,
    place_into_lanes,
)


def _intervals(spans):
    return [LaneInterval(key=key, start=start, end=end) for key, start, end in spans]


def _random_intervals(seed: int, count: int = 40) -> list[LaneInterval]:
    rng = random.Random(seed)
    intervals = []
    for index in range(count):
        start = rng.randrange(0, 24 * 60, 15)
        duration = rng.choice([0, 15, 30, 45, 60, 90, 120, 240])
        intervals.append(LaneInterval(key=f"e{index:02d}", start=start, end=start + duration))
    return intervals


class TestAssignLanes:
    """Test the greedy interval partitioning."""

    def test_empty_input(self):
        assignment = assign_lanes([])
        assert assignment.lanes == {}
        assert assignment.lane_count == 0

    def test_three_overlapping_morning_events_use_two_lanes(self):
        """Verify 09:00-10:00, 09:30-10:30, 10:00-11:00 share two lanes."""
        assignment = assign_lanes(
            _intervals([("a", 540, 600), ("b", 570, 630), ("c", 600, 660)])
        )
        assert assignment.lane_count == 2
        assert assignment.lanes == {"a": 0, "b": 1, "c": 0}

    def test_back_to_back_events_share_a_lane(self):
        """Verify intervals are half-open."""
        assignment = assign_lanes(_intervals([("a", 0, 60), ("b", 60, 120)]))
        assert assignment.lane_count == 1

    def test_lowest_free_lane_is_reused(self):
        """Verify a vacated lower lane is preferred over a higher one."""
        assignment = assign_lanes(
            _intervals([("a", 0, 30), ("b", 0, 120), ("c", 0, 60), ("d", 45, 90)])
        )
        # b (longest) takes lane 0, c lane 1, a lane 2; d reuses lane 2 (a ended at 30).
        assert assignment.lanes == {"b": 0, "c": 1, "a": 2, "d": 2}
        assert assignment.lane_count == 3

    def test_longer_event_wins_ties_on_start(self):
        assignment = assign_lanes(_intervals([("short", 0, 30), ("long", 0, 90)]))
        assert assignment.lanes["long"] == 0
        assert assignment.lanes["short"] == 1

    def test_whole_column_lane_count(self):
        """Verify disjoint clusters still share the column-wide lane count."""
        assignment = assign_lanes(
            _intervals([("a", 0, 60), ("b", 0, 60), ("c", 600, 660)])
        )
        assert assignment.lane_count == 2
        assert assignment.lanes["c"] == 0

    @pytest.mark.parametrize("seed", range(12))
    def test_lane_count_is_minimal(self, seed):
        """Verify lane count equals the maximum concurrent overlap."""
        intervals = _random_intervals(seed)
        nonzero = [interval for interval in intervals if interval.end > interval.start]
        assignment = assign_lanes(nonzero)
        assert assignment.lane_count == max_overlap(nonzero)

    @pytest.mark.parametrize("seed", range(12))
    def test_no_two_overlapping_intervals_share_a_lane(self, seed):
        intervals = _random_intervals(seed)
        assignment = assign_lanes(intervals)
        for lane_members in place_into_lanes(intervals, lambda interval: interval):
            for earlier, later in zip(lane_members, lane_members[1:]):
                assert earlier.end <= later.start
        assert len(assignment.lanes) == len(intervals)

    def test_place_into_lanes_keeps_repeated_keys(self):
        intervals = _intervals([("same", 0, 60), ("same", 0, 60), ("other", 90, 120)])
        grouped = place_into_lanes(intervals, lambda interval: interval)
        assert sum(len(lane) for lane in grouped) == 3
        assert len(grouped) == 2

    def test_assignment_independent_of_input_order(self):
        """Verify the same set yields the same lanes in any order."""
        intervals = _random_intervals(99)
        expected = assign_lanes(intervals)
        shuffled = list(intervals)
        random.Random(7).shuffle(shuffled)
        assert assign_lanes(shuffled) == expected


class TestSortKeyAndOverlap:
    """Test the ordering rule and overlap measurement."""

    def test_sort_key_orders_start_duration_key(self):
        intervals = _intervals([("b", 0, 30), ("a", 0, 30), ("c", 0, 60), ("d", -10, 0)])
        ordered = sorted(intervals, key=lane_sort_key)
        assert [interval.key for interval in ordered] == ["d", "c", "a", "b"]

    def test_max_overlap_half_open(self):
        assert max_overlap(_intervals([("a", 0, 60), ("b", 60, 120)])) == 1
        assert max_overlap(_intervals([("a", 0, 61), ("b", 60, 120)])) == 2

    def test_max_overlap_ignores_zero_length(self):
        assert max_overlap(_intervals([("a", 10, 10)])) == 0


class TestGeometry:
    """Test geometry derived from lane indices."""

    def test_lane_geometry_fractions(self):
        left, width, z_index = lane_geometry(1, 4)
        assert left == 0.25
        assert width == 0.25
        assert z_index == BASE_Z_INDEX + 1

    def test_single_lane_fills_column(self):
        assert lane_geometry(0, 1) == (0.0, 1.0, BASE_Z_INDEX)

    def test_zero_lane_count_treated_as_one(self):
        assert lane_geometry(0, 0)[1] == 1.0

    def test_month_chip_top(self):
        assert month_chip_top(0, 24, 4) == 0
        assert month_chip_top(3, 24, 4) == 84
