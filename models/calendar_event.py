"""Calendar event model.

Events are supplied by provider adapters and treated as snapshots by the
layout engine. ``start`` and ``end`` keep whatever representation the
provider used: a date for all-day events, an absolute instant, or a
zone-qualified datetime.
"""

import re
from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, BeforeValidator, Field, field_serializer, field_validator

from models.temporal import instant_key, is_date_only, resolve_time_zone


AttendeeStatus = Literal["accepted", "declined", "tentative", "unknown"]

# Zone-qualified strings may carry the IANA zone in brackets:
# 2025-01-15T09:00:00+01:00[Europe/Amsterdam]
_BRACKETED_ZONE = re.compile(r"^(?P<stamp>[^\[]+)\[(?P<zone>[^\]]+)\]$")


def parse_event_date_value(value: Any) -> Any:
    """Coerce a raw event boundary into a date or an aware datetime.

    Args:
        value: A date, an aware datetime, or an ISO string. Strings of the
            form YYYY-MM-DD parse as date-only values; other strings must be
            ISO datetimes with an offset, optionally followed by a bracketed
            IANA zone.

    Returns:
        A ``date`` or an aware ``datetime``.

    Raises:
        ValueError: If the value is naive, malformed or of another type.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("datetime boundaries must be timezone-aware")
        return value

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        zone_name = None
        match = _BRACKETED_ZONE.match(text)
        if match:
            text, zone_name = match.group("stamp"), match.group("zone")

        if len(text) == 10 and zone_name is None:
            return date.fromisoformat(text)

        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            raise ValueError(f"datetime boundary '{value}' has no UTC offset")
        if zone_name is not None:
            parsed = parsed.astimezone(resolve_time_zone(zone_name))
        return parsed

    raise ValueError(f"Unsupported event boundary {value!r}")


EventDateField = Annotated[Union[datetime, date], BeforeValidator(parse_event_date_value)]


class Attendee(BaseModel):
    """Represents an event attendee.

    Args:
        email: Attendee email address.
        name: Optional display name.
        status: Response status.
        organizer: Whether this attendee organizes the event.
        optional: Whether attendance is optional.
    """

    email: str = Field(description="Attendee email address")
    name: Optional[str] = Field(default=None, description="Display name")
    status: AttendeeStatus = Field(default="unknown", description="Response status")
    organizer: bool = Field(default=False, description="Is organizer")
    optional: bool = Field(default=False, description="Is attendance optional")

    @field_validator("email")
    @classmethod
    def validate_email(cls, email: str) -> str:
        """Validate email format.

        Args:
            email: Email address to validate.

        Returns:
            The lower-cased email address.

        Raises:
            ValueError: If email format is invalid.
        """
        if "@" not in email or "." not in email.split("@")[1]:
            raise ValueError(f"Invalid email format: {email}")
        return email.lower()


class Conference(BaseModel):
    """Conferencing details attached by a provider."""

    provider: str = Field(description="Conferencing provider (e.g. google-meet, zoom)")
    join_url: Optional[str] = Field(default=None, description="URL to join the call")
    meeting_code: Optional[str] = Field(default=None, description="Meeting code")


class CalendarEvent(BaseModel):
    """A calendar event as delivered by a provider adapter.

    Args:
        id: Unique event identifier (client-generated for unsaved events).
        title: Event title.
        start: Start boundary (date, instant or zoned datetime).
        end: End boundary; exclusive for date-only events.
        all_day: All-day event flag.
        calendar_id: Owning calendar (opaque to the engine).
        account_id: Owning account (opaque to the engine).
        provider_id: Source provider (opaque to the engine).
        color: Display color.
        timezone: Zone the event was authored in, kept for editing.
        description: Event description.
        location: Event location.
        attendees: List of attendees.
        conference: Conferencing details.
        read_only: Whether the event can be edited.
    """

    id: str = Field(description="Unique event identifier")
    title: str = Field(default="", description="Event title")
    start: EventDateField = Field(description="Start boundary")
    end: EventDateField = Field(description="End boundary")
    all_day: bool = Field(default=False, description="All-day event flag")
    calendar_id: str = Field(default="primary", description="Owning calendar")
    account_id: str = Field(default="", description="Owning account")
    provider_id: str = Field(default="google", description="Source provider")
    color: Optional[str] = Field(default=None, description="Display color")
    timezone: Optional[str] = Field(default=None, description="Authored time zone")
    description: Optional[str] = Field(default=None, description="Event description")
    location: Optional[str] = Field(default=None, description="Event location")
    attendees: list[Attendee] = Field(default_factory=list, description="Attendees")
    conference: Optional[Conference] = Field(default=None, description="Conferencing details")
    read_only: bool = Field(default=False, description="Read-only flag")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate that id is non-empty.

        Raises:
            ValueError: If id is empty or whitespace.
        """
        if not v or not v.strip():
            raise ValueError("id cannot be empty")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate the authored zone resolves, when given."""
        if v is not None:
            resolve_time_zone(v)
        return v

    @field_serializer("start", "end")
    def serialize_boundary(self, value: Union[date, datetime]) -> str:
        """Serialize a boundary to ISO format, keeping the IANA zone if any.

        Args:
            value: Boundary to serialize.

        Returns:
            ISO string, with a bracketed zone suffix for zoned datetimes.
        """
        if isinstance(value, datetime) and isinstance(value.tzinfo, ZoneInfo):
            return f"{value.isoformat()}[{value.tzinfo.key}]"
        return value.isoformat()

    @property
    def is_date_only(self) -> bool:
        """True when both boundaries are plain calendar dates."""
        return is_date_only(self.start) and is_date_only(self.end)

    @property
    def spans_whole_days(self) -> bool:
        """True for events laid out as all-day (flagged or date-only)."""
        return self.all_day or self.is_date_only

    def start_key(self) -> datetime:
        """Instant used to keep event lists chronologically sorted."""
        return instant_key(self.start)
