"""Caller-owned memoization of sampled paths."""

from collections import OrderedDict
from datetime import date
from typing import Any, Optional

from analemma_viz.clock import TimeOfDay, parse_time_of_day
from analemma_viz.logger import get_logger
from analemma_viz.sampler import (
    AnalemmaPath,
    DailyPath,
    sample_day_path,
    sample_year_path,
)

logger = get_logger(__name__)


class PathCache:
    """LRU cache of year and day paths keyed by their full configuration.

    Not shared between threads.
    """

    def __init__(self, capacity: int = 32):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.store: OrderedDict = OrderedDict()
        self.hits = 0
        self.misses = 0

    def _get(self, key: tuple) -> Optional[Any]:
        if key in self.store:
            self.store.move_to_end(key)
            self.hits += 1
            return self.store[key]
        self.misses += 1
        return None

    def _set(self, key: tuple, value: Any) -> None:
        self.store[key] = value
        self.store.move_to_end(key)
        if len(self.store) > self.capacity:
            evicted, _ = self.store.popitem(last=False)
            logger.debug(f"Evicted cached path {evicted}")

    def get_year_path(
        self,
        year: int,
        time_of_day: TimeOfDay,
        latitude: float,
        longitude: float,
        tz: Optional[str] = None,
    ) -> AnalemmaPath:
        """Return the year path, sampling it on a miss."""
        hour, minute = parse_time_of_day(time_of_day)
        key = ("year", year, hour, minute, latitude, longitude, tz)
        path = self._get(key)
        if path is None:
            path = sample_year_path(year, (hour, minute), latitude, longitude, tz)
            self._set(key, path)
        return path

    def get_day_path(
        self,
        day: date,
        latitude: float,
        longitude: float,
        tz: Optional[str] = None,
    ) -> DailyPath:
        """Return the day path, sampling it on a miss."""
        key = ("day", day, latitude, longitude, tz)
        path = self._get(key)
        if path is None:
            path = sample_day_path(day, latitude, longitude, tz)
            self._set(key, path)
        return path

    def clear(self) -> None:
        """Drop every cached path and reset counters."""
        self.store.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> dict:
        """Cache statistics."""
        return {
            "size": len(self.store),
            "capacity": self.capacity,
            "hits": self.hits,
            "misses": self.misses,
        }

    def __len__(self) -> int:
        return len(self.store)
