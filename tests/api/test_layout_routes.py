"""Integration tests for the layout endpoints.

This module tests:
- POST /layout/month, /layout/week, /layout/day
- POST /layout/overflow
- Error responses for invalid zones and malformed events
"""

from datetime import timedelta

from tests.fixtures.events import MONDAY, at, create_all_day_event, create_calendar_event


def _event_json(event) -> dict:
    return event.model_dump(mode="json")


def _layout_body(events, day=MONDAY, **extra) -> dict:
    return {"events": [_event_json(event) for event in events], "date": day.isoformat(), **extra}


class TestWeekLayout:
    """Tests for POST /layout/week."""

    def test_week_layout_positions_events(self, client_with_store, overlapping_morning):
        """Test that overlapping events come back in two lanes."""
        client, _, _ = client_with_store

        response = client.post("/layout/week", json=_layout_body(overlapping_morning))

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "week"
        assert data["days"][0] == "2025-01-12"
        assert len(data["positioned_events"]) == 7
        monday = data["positioned_events"][1]
        assert [entry["item"]["event"]["id"] for entry in monday] == ["a", "b", "c"]
        assert [entry["lane"] for entry in monday] == [0, 1, 0]
        assert all(entry["width"] == 0.5 for entry in monday)

    def test_week_layout_all_day_header(self, client_with_store):
        client, _, _ = client_with_store
        conference = create_all_day_event("conf", MONDAY, days=3)

        response = client.post("/layout/week", json=_layout_body([conference]))

        assert response.status_code == 200
        placement = response.json()["all_day_placements"][0]
        assert (placement["col_start"], placement["span"]) == (1, 3)
        assert placement["is_first_day"] and placement["is_last_day"]

    def test_settings_overrides(self, client_with_store):
        """Test that week start and weekend overrides change the columns."""
        client, _, _ = client_with_store

        response = client.post(
            "/layout/week",
            json=_layout_body([], settings={"week_starts_on": 1, "show_weekends": False}),
        )

        assert response.status_code == 200
        days = response.json()["days"]
        assert days == [(MONDAY + timedelta(days=offset)).isoformat() for offset in range(5)]

    def test_layout_is_cached(self, client_with_store, overlapping_morning):
        client, _, cache = client_with_store
        body = _layout_body(overlapping_morning, event_list_version="v1")

        first = client.post("/layout/week", json=body)
        second = client.post("/layout/week", json=body)

        assert first.json() == second.json()
        assert (cache.hits, cache.misses) == (1, 1)

    def test_now_bypasses_cache(self, client_with_store, overlapping_morning):
        client, _, cache = client_with_store
        body = _layout_body(
            overlapping_morning,
            now=at(MONDAY, 12).isoformat(),
            settings={"show_past_events": False},
        )

        response = client.post("/layout/week", json=body)

        assert response.status_code == 200
        assert response.json()["positioned_events"][1] == []
        assert len(cache) == 0


class TestMonthAndDayLayout:
    """Tests for POST /layout/month and /layout/day."""

    def test_month_layout_buckets(self, client_with_store):
        client, _, _ = client_with_store
        events = [
            create_calendar_event("standup", at(MONDAY, 9)),
            create_calendar_event("overnight", at(MONDAY, 22), at(MONDAY + timedelta(days=1), 2)),
            create_all_day_event("holiday", MONDAY),
        ]

        response = client.post("/layout/month", json=_layout_body(events))

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "month"
        assert data["days"][0] == "2024-12-29"
        monday = data["events_by_day"]["2025-01-13"]
        assert [item["event"]["id"] for item in monday["day_events"]] == ["standup"]
        assert [item["event"]["id"] for item in monday["spanning_events"]] == ["overnight"]
        assert [item["event"]["id"] for item in monday["all_day_events"]] == ["holiday"]
        tuesday = data["events_by_day"]["2025-01-14"]
        assert [item["event"]["id"] for item in tuesday["all_events"]] == ["overnight"]

    def test_day_layout(self, client_with_store, overlapping_morning):
        client, _, _ = client_with_store

        response = client.post("/layout/day", json=_layout_body(overlapping_morning))

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "day"
        assert data["days"] == ["2025-01-13"]
        assert len(data["positioned_events"][0]) == 3

    def test_date_only_events_from_strings(self, client_with_store):
        """Test that providers may send all-day events as YYYY-MM-DD strings."""
        client, _, _ = client_with_store
        body = {
            "events": [{"id": "trip", "start": "2025-01-13", "end": "2025-01-15", "all_day": True}],
            "date": "2025-01-13",
        }

        response = client.post("/layout/day", json=body)

        assert response.status_code == 200
        assert response.json()["all_day_events"][0]["event"]["start"] == "2025-01-13"


class TestLayoutErrors:
    """Tests for error responses from the layout endpoints."""

    def test_invalid_time_zone_returns_400(self, client_with_store, overlapping_morning):
        client, _, _ = client_with_store

        response = client.post(
            "/layout/week",
            json=_layout_body(overlapping_morning, settings={"time_zone": "Moon/Tranquility"}),
        )

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "InvalidTimeZoneError"
        assert data["time_zone"] == "Moon/Tranquility"

    def test_naive_datetime_returns_422(self, client_with_store):
        client, _, _ = client_with_store
        body = {
            "events": [{"id": "naive", "start": "2025-01-13T09:00:00", "end": "2025-01-13T10:00:00"}],
            "date": "2025-01-13",
        }

        response = client.post("/layout/week", json=body)

        assert response.status_code == 422

    def test_empty_hour_window_returns_422(self, client_with_store):
        client, _, _ = client_with_store

        response = client.post(
            "/layout/day", json=_layout_body([], settings={"start_hour": 12, "end_hour": 8})
        )

        assert response.status_code == 422
        assert response.json()["type"] == "ValidationError"


class TestOverflowLayout:
    """Tests for POST /layout/overflow."""

    def test_overflow_counts(self, client_with_store):
        client, _, _ = client_with_store
        events = [create_all_day_event(f"e{index}", MONDAY) for index in range(5)]

        response = client.post(
            "/layout/overflow",
            json={"events": [_event_json(event) for event in events], "available_height": 52},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["max_visible_lanes"] == 2
        assert data["has_overflow"] is True
        assert data["overflow_count"] == 3
        assert len(data["visible_lanes"]) == 2

    def test_overflow_invalid_time_zone(self, client_with_store):
        client, _, _ = client_with_store

        response = client.post(
            "/layout/overflow",
            json={"events": [], "available_height": 52, "time_zone": "Nope/Nope"},
        )

        assert response.status_code == 400
