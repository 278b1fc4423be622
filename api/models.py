"""Shared request and response models for API endpoints.

Layout endpoints take a list of events, an anchor day and optional settings
overrides; event store endpoints exchange events and pending mutations.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from models.calendar_event import CalendarEvent
from models.optimistic import MutationStatus, OptimisticAction


class SettingsOverrides(BaseModel):
    """Per-request changes to the process settings.

    Every field is optional; unset fields keep the process default.

    Attributes:
        time_zone: IANA display time zone.
        week_starts_on: 0 = Sunday ... 6 = Saturday.
        show_weekends: Show weekend columns.
        show_past_events: Show events that already ended.
        hour_height: Height of one hour cell in px.
        start_hour: First visible hour.
        end_hour: Hour the time grid ends at.
    """

    time_zone: Optional[str] = None
    week_starts_on: Optional[int] = Field(default=None, ge=0, le=6)
    show_weekends: Optional[bool] = None
    show_past_events: Optional[bool] = None
    hour_height: Optional[float] = Field(default=None, gt=0)
    start_hour: Optional[int] = Field(default=None, ge=0, le=23)
    end_hour: Optional[int] = Field(default=None, ge=1, le=24)


class LayoutRequest(BaseModel):
    """Request model for month, week and day layout.

    Attributes:
        events: Events to lay out.
        date: Day the view is navigated to.
        settings: Optional overrides of the process settings.
        now: Reference instant for hiding past events (defaults to now).
        event_list_version: Caller version of the event list, used in the
            layout cache key; a content hash is used when omitted.
    """

    events: list[CalendarEvent] = Field(default_factory=list)
    date: dt.date
    settings: Optional[SettingsOverrides] = None
    now: Optional[dt.datetime] = None
    event_list_version: Optional[str] = None


class OverflowRequest(BaseModel):
    """Request model for a cell's overflow calculation.

    Attributes:
        events: Events of one month cell or header row.
        available_height: Pixel height available for chips.
        time_zone: Display zone (process default if omitted).
        lane_height: Chip height in px.
        lane_gap: Gap between chips in px.
        min_visible_lanes: Keep at least this many lanes visible.
        reserve_indicator_lane: Give one visible lane to the "+N more" chip.
    """

    events: list[CalendarEvent] = Field(default_factory=list)
    available_height: float
    time_zone: Optional[str] = None
    lane_height: Optional[float] = Field(default=None, gt=0)
    lane_gap: Optional[float] = Field(default=None, ge=0)
    min_visible_lanes: Optional[int] = Field(default=None, ge=1)
    reserve_indicator_lane: bool = False


class ReplaceEventsRequest(BaseModel):
    """Request model for installing a freshly fetched collection."""

    events: list[CalendarEvent]


class ConfirmMutationRequest(BaseModel):
    """Request model for confirming a mutation.

    Attributes:
        events: Refetched server collection; when omitted the action itself
            is folded into the confirmed collection.
    """

    events: Optional[list[CalendarEvent]] = None


class EventListResponse(BaseModel):
    """Response model for the displayed collection.

    Attributes:
        events: Confirmed events with pending actions applied.
        total: Number of displayed events.
        pending_count: Mutations awaiting confirmation.
    """

    events: list[CalendarEvent]
    total: int
    pending_count: int


class MutationResponse(BaseModel):
    """Response model for mutation endpoints.

    Attributes:
        mutation_id: Identifier used to confirm or roll back.
        status: Mutation lifecycle state.
        action: The dispatched action.
        events: Displayed collection after the transition.
        message: Human-readable message describing the result.
    """

    mutation_id: str
    status: MutationStatus
    action: OptimisticAction
    events: list[CalendarEvent]
    message: str


class ActionRequest(BaseModel):
    """Request model for dispatching an optimistic action.

    Attributes:
        action: Create, update or delete, tagged by ``type``.
    """

    action: OptimisticAction


class SelectionRequest(BaseModel):
    """Request model for re-reading the current selection."""

    event_ids: list[str] = Field(default_factory=list)
