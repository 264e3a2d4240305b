"""Main module for Analemma Visualizer.

This module ties configuration, sampling and caching together into the
session object a renderer drives: it owns the current options, recomputes
both paths when they change and answers point queries about the sun.
"""

from dataclasses import asdict, dataclass, replace
from datetime import date
from pathlib import Path
from typing import Optional

from analemma_viz.cache import PathCache
from analemma_viz.clock import (
    days_in_year,
    format_time_of_day,
    local_instant,
    nth_day_of_year,
    parse_time_of_day,
)
from analemma_viz.config import (
    Config,
    ObservationConfig,
    ObserverConfig,
    load_config,
)
from analemma_viz.logger import get_logger, setup_logger
from analemma_viz.sampler import (
    AnalemmaPath,
    DailyPath,
    DayMarker,
    clamp_day_index,
    day_label,
    marker_indices,
)
from analemma_viz.solar import SolarPosition, compute_solar_position

logger = get_logger(__name__)

OBSERVER_OPTIONS = {"latitude", "longitude", "timezone"}
OBSERVATION_OPTIONS = {"observation_time", "year", "mark_interval", "day_of_year"}


@dataclass(frozen=True)
class DayInfo:
    """Answer to "where is the sun on day N at the observation time"."""

    date: date
    day_of_year: int  # 1-based
    time_of_day: str
    label: Optional[str]
    position: SolarPosition

    def to_dict(self) -> dict:
        """Convert day info to dictionary for JSON export."""
        return {
            "date": self.date.isoformat(),
            "day_of_year": self.day_of_year,
            "time_of_day": self.time_of_day,
            "label": self.label,
            "position": self.position.to_dict(),
        }


class AnalemmaSession:
    """Current visualizer options and the paths derived from them."""

    def __init__(self, config: Config, cache: Optional[PathCache] = None):
        """Initialize the session.

        Args:
            config: Visualizer configuration.
            cache: Path cache; a private one is created if None.
        """
        self.config = config
        self.cache = cache if cache is not None else PathCache()
        self._day_index = config.observation.day_of_year
        self._year_path: Optional[AnalemmaPath] = None
        self._day_path: Optional[DailyPath] = None

    @property
    def observer(self) -> ObserverConfig:
        return self.config.observer

    @property
    def observation(self) -> ObservationConfig:
        return self.config.observation

    @property
    def day_index(self) -> int:
        """0-based day of year shown as the daily sun path."""
        return self._day_index

    @property
    def year_path(self) -> AnalemmaPath:
        """Analemma for the current options."""
        if self._year_path is None:
            logger.info(
                f"Computing analemma for {self.observation.year} at "
                f"{self.observation.observation_time} "
                f"({self.observer.latitude}, {self.observer.longitude})"
            )
            self._year_path = self.cache.get_year_path(
                self.observation.year,
                self.observation.observation_time,
                self.observer.latitude,
                self.observer.longitude,
                self.observer.timezone,
            )
        return self._year_path

    @property
    def day_path(self) -> DailyPath:
        """Daily sun path for the current day index."""
        if self._day_path is None:
            self._day_index = clamp_day_index(
                self._day_index, days_in_year(self.observation.year)
            )
            day = self.date_for_index(self._day_index)
            logger.info(f"Computing daily sun path for {day.isoformat()}")
            self._day_path = self.cache.get_day_path(
                day,
                self.observer.latitude,
                self.observer.longitude,
                self.observer.timezone,
            )
        return self._day_path

    def date_for_index(self, day_index: int) -> date:
        """Calendar date of a 0-based day index in the current year."""
        return nth_day_of_year(self.observation.year, day_index + 1)

    def update_options(self, **changes) -> None:
        """Apply option changes and drop the derived paths.

        Accepted keys: latitude, longitude, timezone, observation_time,
        year, mark_interval, day_of_year.

        Raises:
            ValueError: On unknown keys or values failing validation.
        """
        unknown = set(changes) - OBSERVER_OPTIONS - OBSERVATION_OPTIONS
        if unknown:
            raise ValueError(f"Unknown options: {', '.join(sorted(unknown))}")

        observer = replace(
            self.observer,
            **{k: v for k, v in changes.items() if k in OBSERVER_OPTIONS},
        )
        observation = replace(
            self.observation,
            **{k: v for k, v in changes.items() if k in OBSERVATION_OPTIONS},
        )
        self.config = replace(self.config, observer=observer, observation=observation)

        if "day_of_year" in changes:
            self._day_index = observation.day_of_year
        self._year_path = None
        self._day_path = None
        logger.info(f"Options updated: {changes}")

    def jump_to_day(self, day_index: int) -> int:
        """Show the daily path for another day.

        Args:
            day_index: 0-based day of year; clamped to the current year.

        Returns:
            The clamped day index.
        """
        clamped = clamp_day_index(day_index, len(self.year_path))
        if clamped != self._day_index:
            self._day_index = clamped
            self._day_path = None
        return clamped

    def markers(self) -> list[DayMarker]:
        """Day markers for the current analemma."""
        return marker_indices(len(self.year_path), self.observation.mark_interval)

    def describe_day(self, day_index: int) -> DayInfo:
        """Sun position on a day of the year at the observation time.

        Args:
            day_index: 0-based day of year; clamped to the current year.

        Returns:
            DayInfo for that day.
        """
        index = clamp_day_index(day_index, len(self.year_path))
        sample = self.year_path[index]
        hour, minute = parse_time_of_day(self.observation.observation_time)
        return DayInfo(
            date=sample.instant.date(),
            day_of_year=index + 1,
            time_of_day=format_time_of_day(hour, minute),
            label=day_label(index),
            position=sample.position,
        )

    def describe_instant(self, day: date, hour: int, minute: int) -> SolarPosition:
        """Sun position at a clock time on any date for the current observer."""
        instant = local_instant(day, hour, minute, self.observer.timezone)
        return compute_solar_position(
            instant, self.observer.latitude, self.observer.longitude
        )

    def get_status(self) -> dict:
        """Get current session status.

        Returns:
            Dictionary with the options and derived path sizes.
        """
        return {
            "observer": asdict(self.observer),
            "observation": asdict(self.observation),
            "day_index": self._day_index,
            "paths": {
                "analemma_points": len(self.year_path),
                "day_path_points": len(self.day_path),
            },
            "cache": self.cache.stats(),
        }


def run_session(config_path: Optional[Path] = None) -> AnalemmaSession:
    """Create a session from a configuration file.

    Args:
        config_path: Path to configuration file.

    Returns:
        Session with logging configured.
    """
    config = load_config(config_path)
    setup_logger(config.logging)
    return AnalemmaSession(config)
