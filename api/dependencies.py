"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the process-wide settings, optimistic event store and
layout cache.
"""

from typing import Annotated

from fastapi import Depends

from models.cache import LayoutCache
from models.optimistic import OptimisticEventStore
from models.settings import CalendarSettings


# Global state
# One store and one cache per API process; nothing is persisted.
_settings: CalendarSettings | None = None
_event_store: OptimisticEventStore | None = None
_layout_cache: LayoutCache | None = None


def get_settings() -> CalendarSettings:
    """Get the default CalendarSettings for this process.

    Request bodies may override individual fields on top of these.

    Returns:
        The shared settings, loaded from the environment on first use.
    """
    global _settings

    if _settings is None:
        _settings = CalendarSettings.from_env()

    return _settings


def get_event_store() -> OptimisticEventStore:
    """Get the shared OptimisticEventStore instance.

    Returns:
        The shared store.

    Raises:
        RuntimeError: If the store hasn't been initialized yet.
    """
    if _event_store is None:
        raise RuntimeError("Event store not initialized. Call initialize_state() first.")

    return _event_store


def get_layout_cache() -> LayoutCache:
    """Get the shared LayoutCache instance.

    Raises:
        RuntimeError: If the cache hasn't been initialized yet.
    """
    if _layout_cache is None:
        raise RuntimeError("Layout cache not initialized. Call initialize_state() first.")

    return _layout_cache


def initialize_state() -> OptimisticEventStore:
    """Create the shared store and cache.

    This should be called once when the FastAPI app starts up.

    Returns:
        The newly created OptimisticEventStore.
    """
    global _settings, _event_store, _layout_cache

    _settings = CalendarSettings.from_env()
    _event_store = OptimisticEventStore()
    _layout_cache = LayoutCache()

    return _event_store


def shutdown_state() -> None:
    """Drop the shared store and cache when the app shuts down."""
    global _settings, _event_store, _layout_cache

    if _layout_cache is not None:
        _layout_cache.invalidate()

    _settings = None
    _event_store = None
    _layout_cache = None


# Type aliases for dependency injection
SettingsDep = Annotated[CalendarSettings, Depends(get_settings)]
EventStoreDep = Annotated[OptimisticEventStore, Depends(get_event_store)]
LayoutCacheDep = Annotated[LayoutCache, Depends(get_layout_cache)]
