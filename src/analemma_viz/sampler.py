"""Analemma and daily sun path sampling.

Drives the solar model across a year at a fixed clock time, or across one
day at ten-minute steps, and projects each position onto the path sphere.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

import numpy as np

from analemma_viz.clock import (
    TimeOfDay,
    local_instant,
    nth_day_of_year,
    parse_time_of_day,
    require_finite,
)
from analemma_viz.geometry import PATH_RADIUS, SampledPoint, spherical_to_cartesian
from analemma_viz.logger import get_logger
from analemma_viz.solar import SolarPosition, compute_solar_position

logger = get_logger(__name__)

# Approximate equinox/solstice indices for a non-leap year (0 = Jan 1).
# Fixed convention: one day off in leap years after February.
SEASON_MARKERS = {
    79: "Spring Equinox (approx.)",
    171: "Summer Solstice (approx.)",
    265: "Fall Equinox (approx.)",
    354: "Winter Solstice (approx.)",
}
FIRST_DAY_LABEL = "First day of year"

DAY_PATH_STEP_MINUTES = 10


@dataclass(frozen=True)
class PathSample:
    """One solar sample of a path."""

    instant: datetime
    position: SolarPosition
    point: SampledPoint


@dataclass(frozen=True)
class AnalemmaPath:
    """Sun positions at the same clock time on each day of a year.

    Index i is day i + 1 of the year.
    """

    year: int
    time_of_day: tuple[int, int]
    latitude: float
    longitude: float
    samples: tuple[PathSample, ...]

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, day_index: int) -> PathSample:
        return self.samples[day_index]

    @property
    def points(self) -> list[SampledPoint]:
        return [s.point for s in self.samples]

    @property
    def positions(self) -> list[SolarPosition]:
        return [s.position for s in self.samples]

    def as_array(self) -> np.ndarray:
        """Points as an (N, 3) float array."""
        return np.array(self.points, dtype=float).reshape(-1, 3)


@dataclass(frozen=True)
class DailyPath:
    """Above-horizon sun positions for one calendar day."""

    day: date
    latitude: float
    longitude: float
    samples: tuple[PathSample, ...]
    apex: Optional[PathSample] = field(default=None)

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, index: int) -> PathSample:
        return self.samples[index]

    @property
    def points(self) -> list[SampledPoint]:
        return [s.point for s in self.samples]

    def as_array(self) -> np.ndarray:
        """Points as an (N, 3) float array."""
        return np.array(self.points, dtype=float).reshape(-1, 3)


@dataclass(frozen=True)
class DayMarker:
    """Marker placed on the analemma every few days."""

    day_index: int
    label: Optional[str]
    is_special: bool


def _sample(instant: datetime, latitude: float, longitude: float) -> PathSample:
    position = compute_solar_position(instant, latitude, longitude)
    point = spherical_to_cartesian(position.altitude, position.azimuth, PATH_RADIUS)
    return PathSample(instant=instant, position=position, point=point)


def sample_year_path(
    year: int,
    time_of_day: TimeOfDay,
    latitude: float,
    longitude: float,
    tz: Optional[str] = None,
) -> AnalemmaPath:
    """Sample the analemma for a year.

    Args:
        year: Calendar year.
        time_of_day: Clock time as "HH:MM", (hour, minute) or time.
        latitude: Observer latitude in degrees.
        longitude: Observer longitude in degrees.
        tz: IANA timezone for the clock time; None uses the host clock.

    Returns:
        AnalemmaPath with 365 or 366 samples in day order.
    """
    hour, minute = parse_time_of_day(time_of_day)
    require_finite(latitude=latitude, longitude=longitude)

    samples = []
    for day in range(1, 367):
        day_date = nth_day_of_year(year, day)
        if day_date.year > year:
            continue
        instant = local_instant(day_date, hour, minute, tz)
        samples.append(_sample(instant, latitude, longitude))

    logger.debug(
        f"Sampled {len(samples)} days for {year} at {hour:02d}:{minute:02d} "
        f"({latitude}, {longitude})"
    )
    return AnalemmaPath(
        year=year,
        time_of_day=(hour, minute),
        latitude=latitude,
        longitude=longitude,
        samples=tuple(samples),
    )


def highest_point(samples: Sequence[PathSample]) -> Optional[PathSample]:
    """Sample with the greatest y coordinate, the first one on ties."""
    best = None
    for sample in samples:
        if best is None or sample.point.y > best.point.y:
            best = sample
    return best


def sample_day_path(
    day: date,
    latitude: float,
    longitude: float,
    tz: Optional[str] = None,
) -> DailyPath:
    """Sample the sun's path above the horizon for one day.

    Args:
        day: Calendar date.
        latitude: Observer latitude in degrees.
        longitude: Observer longitude in degrees.
        tz: IANA timezone for the clock times; None uses the host clock.

    Returns:
        DailyPath holding only samples with altitude >= 0.
    """
    require_finite(latitude=latitude, longitude=longitude)

    samples = []
    for hour in range(24):
        for minute in range(0, 60, DAY_PATH_STEP_MINUTES):
            instant = local_instant(day, hour, minute, tz)
            sample = _sample(instant, latitude, longitude)
            if sample.position.altitude < 0:
                continue
            samples.append(sample)

    logger.debug(f"Sampled {len(samples)} above-horizon points for {day.isoformat()}")
    return DailyPath(
        day=day,
        latitude=latitude,
        longitude=longitude,
        samples=tuple(samples),
        apex=highest_point(samples),
    )


def marker_indices(path_length: int, interval: int) -> list[DayMarker]:
    """Day markers along an analemma of the given length.

    Args:
        path_length: Number of samples in the path.
        interval: Days between markers.

    Returns:
        Markers at 0, interval, 2 * interval, ... below path_length.
    """
    if interval < 1:
        raise ValueError("interval must be positive")

    markers = []
    for index in range(0, path_length, interval):
        if index == 0:
            markers.append(DayMarker(index, FIRST_DAY_LABEL, False))
        elif index in SEASON_MARKERS:
            markers.append(DayMarker(index, SEASON_MARKERS[index], True))
        else:
            markers.append(DayMarker(index, None, False))
    return markers


def day_label(day_index: int) -> Optional[str]:
    """Label of a fixed calendar marker day, if any."""
    if day_index == 0:
        return FIRST_DAY_LABEL
    return SEASON_MARKERS.get(day_index)


def clamp_day_index(day_index: int, path_length: int) -> int:
    """Clamp a day index into [0, path_length - 1]."""
    return max(0, min(path_length - 1, day_index))
