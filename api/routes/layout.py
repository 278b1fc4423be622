"""Layout endpoints.

These endpoints run the layout engine over a posted event list and return
the tagged view collection or a cell's overflow split.
"""

import logging

from fastapi import APIRouter

from api.dependencies import LayoutCacheDep, SettingsDep
from api.models import LayoutRequest, OverflowRequest
from api.utils import apply_settings_overrides, fingerprint_events
from models.cache import LayoutCache, make_cache_key
from models.overflow import EventCapacityInfo, organize_events_with_overflow
from models.settings import CalendarSettings
from models.views.builder import ViewType, build_event_collection, get_visible_days
from models.views.month import MonthEventCollection
from models.views.week import DayEventCollection, WeekEventCollection


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/layout",
    tags=["layout"],
)


def _layout(
    request: LayoutRequest,
    view_type: ViewType,
    base_settings: CalendarSettings,
    cache: LayoutCache,
):
    settings = apply_settings_overrides(base_settings, request.settings)
    days = get_visible_days(request.date, view_type, settings)

    if request.now is not None or not settings.preferences.show_past_events:
        # Results depending on "now" are not reusable.
        return build_event_collection(request.events, days, view_type, settings, now=request.now)

    version = request.event_list_version or fingerprint_events(request.events)
    key = make_cache_key(version, days, view_type, settings)
    return cache.get_or_build(
        key, lambda: build_event_collection(request.events, days, view_type, settings)
    )


@router.post("/month", response_model=MonthEventCollection)
async def layout_month(request: LayoutRequest, settings: SettingsDep, cache: LayoutCacheDep):
    """Bucket events per day of the month grid containing ``date``.

    Args:
        request: Events, anchor day and settings overrides.
        settings: Process settings (injected).
        cache: Layout cache (injected).

    Returns:
        MonthEventCollection keyed by ISO day.
    """
    return _layout(request, "month", settings, cache)


@router.post("/week", response_model=WeekEventCollection)
async def layout_week(request: LayoutRequest, settings: SettingsDep, cache: LayoutCacheDep):
    """Position events in the week containing ``date``.

    Returns:
        WeekEventCollection with one positioned list per visible day.
    """
    return _layout(request, "week", settings, cache)


@router.post("/day", response_model=DayEventCollection)
async def layout_day(request: LayoutRequest, settings: SettingsDep, cache: LayoutCacheDep):
    """Position events on ``date``."""
    return _layout(request, "day", settings, cache)


@router.post("/overflow", response_model=EventCapacityInfo)
async def layout_overflow(request: OverflowRequest, settings: SettingsDep):
    """Split a cell's events into visible and overflow lanes.

    Args:
        request: Events, available height and lane geometry.
        settings: Process settings supplying zone and geometry defaults.

    Returns:
        EventCapacityInfo for the cell.
    """
    metrics = settings.metrics
    return organize_events_with_overflow(
        request.events,
        request.available_height,
        time_zone=request.time_zone or settings.time_zone,
        lane_height_px=request.lane_height if request.lane_height is not None else metrics.lane_height,
        lane_gap_px=request.lane_gap if request.lane_gap is not None else metrics.lane_gap,
        min_visible_lanes=(
            request.min_visible_lanes
            if request.min_visible_lanes is not None
            else metrics.min_visible_lanes
        ),
        reserve_indicator_lane=request.reserve_indicator_lane,
    )
