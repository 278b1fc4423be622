"""Test fixtures for the calendar layout engine.

This package provides reusable factories and pytest fixtures:
- events: CalendarEvent and collection item factories
- settings: CalendarSettings factory
- api: TestClient, event store and layout cache fixtures
"""
