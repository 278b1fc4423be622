"""Memoization for computed layouts.

The engine functions are pure and never consult this cache; callers that
recompute on every input change (resize, navigation) wrap them with it.
"""

import logging
from collections import OrderedDict
from datetime import date
from typing import Callable, Hashable, Iterable, TypeVar

from models.settings import CalendarSettings
from models.temporal import visible_range_key


logger = logging.getLogger(__name__)

T = TypeVar("T")


def make_cache_key(
    event_list_version: Hashable,
    days: Iterable[date],
    view_type: str,
    settings: CalendarSettings,
) -> tuple:
    """Composite key for one computed layout.

    Args:
        event_list_version: Anything that changes when the event list does.
        days: Visible days.
        view_type: "month", "week" or "day".
        settings: View settings (zone, week start, preferences, metrics).

    Returns:
        A hashable tuple.
    """
    return (event_list_version, visible_range_key(days), view_type, settings.cache_key())


class LayoutCache:
    """Least-recently-used cache of layout results.

    Args:
        max_entries: Entries kept before the least recently used is evicted.
    """

    def __init__(self, max_entries: int = 32):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get_or_build(self, key: Hashable, builder: Callable[[], T]) -> T:
        """Return the cached value for ``key``, building it on a miss.

        Args:
            key: Cache key, usually from make_cache_key.
            builder: Zero-argument callable computing the value.

        Returns:
            The cached or freshly built value.
        """
        if key in self._entries:
            self._entries.move_to_end(key)
            self.hits += 1
            logger.debug(f"Layout cache hit ({self.hits} hits, {self.misses} misses)")
            return self._entries[key]

        self.misses += 1
        value = builder()
        self._entries[key] = value
        if len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Layout cache evicted {evicted!r}")
        return value

    def invalidate(self) -> None:
        """Drop every entry; counters are kept."""
        self._entries.clear()
