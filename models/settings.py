"""Settings threaded through every layout entry point.

There is no module-level preference state: callers build a CalendarSettings
(or load one with ``CalendarSettings.from_env``) and pass it explicitly.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.temporal import resolve_time_zone


class ViewPreferences(BaseModel):
    """User toggles that change which events and days are shown.

    Args:
        show_weekends: Include Saturday and Sunday columns.
        show_past_events: Include events that ended before "now".
    """

    model_config = ConfigDict(frozen=True)

    show_weekends: bool = Field(default=True, description="Show weekend columns")
    show_past_events: bool = Field(default=True, description="Show events that already ended")

    def cache_key(self) -> str:
        return f"weekends={int(self.show_weekends)};past={int(self.show_past_events)}"


class LayoutMetrics(BaseModel):
    """Pixel constants used to derive geometry.

    Args:
        lane_height: Height of a month-view chip / multi-day bar.
        lane_gap: Vertical gap between lanes.
        hour_height: Height of one hour cell in week and day views.
        start_hour: First hour shown in the time grid.
        end_hour: Hour the time grid ends at (exclusive).
        min_visible_lanes: Lanes kept visible regardless of measured height.
    """

    model_config = ConfigDict(frozen=True)

    lane_height: float = Field(default=24, gt=0, description="Lane height in px")
    lane_gap: float = Field(default=4, ge=0, description="Gap between lanes in px")
    hour_height: float = Field(default=64, gt=0, description="Hour cell height in px")
    start_hour: int = Field(default=0, ge=0, le=23, description="First visible hour")
    end_hour: int = Field(default=24, ge=1, le=24, description="Last visible hour (exclusive)")
    min_visible_lanes: Optional[int] = Field(
        default=None, ge=1, description="Minimum lanes kept visible"
    )

    @model_validator(mode="after")
    def validate_hour_window(self) -> "LayoutMetrics":
        """Ensure the visible hour window is not empty.

        Raises:
            ValueError: If end_hour is not after start_hour.
        """
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be after start_hour")
        return self


class CalendarSettings(BaseModel):
    """View parameters for one calendar surface.

    Args:
        time_zone: IANA display time zone.
        week_starts_on: 0 = Sunday, 1 = Monday, ... 6 = Saturday.
        preferences: View preferences.
        metrics: Geometry constants.
    """

    model_config = ConfigDict(frozen=True)

    time_zone: str = Field(default="UTC", description="Display time zone")
    week_starts_on: int = Field(default=0, ge=0, le=6, description="First weekday")
    preferences: ViewPreferences = Field(default_factory=ViewPreferences)
    metrics: LayoutMetrics = Field(default_factory=LayoutMetrics)

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        """Validate that the display zone resolves.

        Raises:
            InvalidTimeZoneError: If the identifier is unknown.
        """
        resolve_time_zone(v)
        return v

    def cache_key(self) -> str:
        """Key covering everything that changes a computed layout."""
        return f"{self.time_zone}|wso={self.week_starts_on}|{self.preferences.cache_key()}|{self.metrics.model_dump_json()}"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "CalendarSettings":
        """Build settings from environment variables (and an optional .env file).

        Recognized variables: CALENDAR_TIME_ZONE, CALENDAR_WEEK_STARTS_ON,
        CALENDAR_SHOW_WEEKENDS, CALENDAR_SHOW_PAST_EVENTS.

        Args:
            env_file: Path to a dotenv file; the default lookup is used if None.

        Returns:
            Settings with defaults for anything not set.
        """
        load_dotenv(env_file)

        values = {}
        if os.getenv("CALENDAR_TIME_ZONE"):
            values["time_zone"] = os.environ["CALENDAR_TIME_ZONE"]
        if os.getenv("CALENDAR_WEEK_STARTS_ON"):
            values["week_starts_on"] = int(os.environ["CALENDAR_WEEK_STARTS_ON"])

        preferences = {}
        if os.getenv("CALENDAR_SHOW_WEEKENDS"):
            preferences["show_weekends"] = _env_flag(os.environ["CALENDAR_SHOW_WEEKENDS"])
        if os.getenv("CALENDAR_SHOW_PAST_EVENTS"):
            preferences["show_past_events"] = _env_flag(os.environ["CALENDAR_SHOW_PAST_EVENTS"])
        if preferences:
            values["preferences"] = ViewPreferences(**preferences)

        return cls(**values)


def _env_flag(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")
