"""Utility functions for API route handlers."""

import hashlib
from typing import Iterable, Optional

from api.models import SettingsOverrides
from models.calendar_event import CalendarEvent
from models.settings import CalendarSettings
from models.temporal import resolve_time_zone


def apply_settings_overrides(
    base: CalendarSettings, overrides: Optional[SettingsOverrides]
) -> CalendarSettings:
    """Merge request overrides into the process settings.

    The zone is resolved up front so an unknown identifier surfaces as
    InvalidTimeZoneError rather than a generic validation error.

    Args:
        base: Process settings.
        overrides: Request overrides, or None.

    Returns:
        A new CalendarSettings (``base`` when there is nothing to override).

    Raises:
        InvalidTimeZoneError: If the overriding zone cannot be resolved.
    """
    if overrides is None:
        return base

    update = {}
    if overrides.time_zone is not None:
        resolve_time_zone(overrides.time_zone)
        update["time_zone"] = overrides.time_zone
    if overrides.week_starts_on is not None:
        update["week_starts_on"] = overrides.week_starts_on

    preferences = overrides.model_dump(
        include={"show_weekends", "show_past_events"}, exclude_none=True
    )
    if preferences:
        update["preferences"] = base.preferences.model_copy(update=preferences)

    metrics = overrides.model_dump(
        include={"hour_height", "start_hour", "end_hour"}, exclude_none=True
    )
    if metrics:
        update["metrics"] = base.metrics.model_validate(
            {**base.metrics.model_dump(), **metrics}
        )

    return CalendarSettings.model_validate({**base.model_dump(), **update})


def fingerprint_events(events: Iterable[CalendarEvent]) -> str:
    """Content hash of an event list, used as its version when none is given."""
    digest = hashlib.sha256()
    for event in events:
        digest.update(event.model_dump_json().encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()
