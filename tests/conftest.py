"""Pytest configuration and shared fixtures."""

import os

import pytest

# Load environment variables from .env file at test startup
from dotenv import load_dotenv
load_dotenv()

# Import all fixtures from fixture modules
pytest_plugins = [
    "tests.fixtures.events",
    "tests.fixtures.settings",
    "tests.fixtures.api",
]

CALENDAR_ENV_VARS = (
    "CALENDAR_TIME_ZONE",
    "CALENDAR_WEEK_STARTS_ON",
    "CALENDAR_SHOW_WEEKENDS",
    "CALENDAR_SHOW_PAST_EVENTS",
)


@pytest.fixture(autouse=True)
def _clear_calendar_env(monkeypatch):
    """Keep CALENDAR_* variables out of the tests.

    Variables from a developer's .env are removed for the test, and anything
    a test loads with load_dotenv is dropped afterwards.
    """
    for name in CALENDAR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    for name in CALENDAR_ENV_VARS:
        os.environ.pop(name, None)
