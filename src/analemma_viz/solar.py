"""Solar position model for Analemma Visualizer.

Low-order analytic approximation of the sun's apparent position: mean
longitude and anomaly, equation of center, obliquity with a single
nutation term, and the equation of time. Accurate to a few arc-minutes,
with no refraction or observer elevation.

All public angles are in degrees. Every function here is pure.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from analemma_viz.clock import require_finite, timezone_offset_hours
from analemma_viz.logger import get_logger

logger = get_logger(__name__)

# Julian Date of the Unix epoch and of J2000.0
UNIX_EPOCH_JD = 2440587.5
J2000_JD = 2451545.0
MS_PER_DAY = 86400000
DAYS_PER_CENTURY = 36525

# Smallest magnitude allowed for cos(lat) * cos(alt) in the azimuth formula
AZIMUTH_DIVISOR_EPSILON = 1e-12

TWO_PI = 2 * math.pi


@dataclass(frozen=True)
class SolarPosition:
    """Apparent solar position for an observer.

    Attributes:
        altitude: Angle above the horizon, degrees in [-90, 90].
        azimuth: Bearing in degrees in [0, 360).
        declination: Solar declination, degrees.
        right_ascension: Right ascension, degrees in (-180, 180].
        hour_angle: Local hour angle, degrees in [0, 360).
    """

    altitude: float
    azimuth: float
    declination: float
    right_ascension: float
    hour_angle: float

    def to_dict(self) -> dict:
        """Convert position to dictionary for JSON export."""
        return {
            "altitude": self.altitude,
            "azimuth": self.azimuth,
            "declination": self.declination,
            "right_ascension": self.right_ascension,
            "hour_angle": self.hour_angle,
        }


def normalize_angle(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    return degrees % 360


def normalize_angle_radians(radians: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    return radians % TWO_PI


def julian_date(instant: datetime) -> float:
    """Julian Date of an aware datetime."""
    unix_millis = instant.timestamp() * 1000
    return unix_millis / MS_PER_DAY + UNIX_EPOCH_JD


def julian_centuries(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jd - J2000_JD) / DAYS_PER_CENTURY


def equation_of_time(
    mean_longitude: float,
    eccentricity: float,
    mean_anomaly: float,
    obliquity: float,
) -> float:
    """Equation of time in radians.

    Args:
        mean_longitude: Mean solar longitude, degrees.
        eccentricity: Earth orbit eccentricity.
        mean_anomaly: Mean anomaly, degrees.
        obliquity: True obliquity of the ecliptic, degrees.

    Returns:
        Equation of time as an angle in radians (not normalized).
    """
    l0 = math.radians(mean_longitude)
    m = math.radians(mean_anomaly)
    e = eccentricity
    y = math.tan(math.radians(obliquity) / 2) ** 2

    return (
        y * math.sin(2 * l0)
        - 2 * e * math.sin(m)
        + 4 * e * y * math.sin(m) * math.cos(2 * l0)
        - 0.5 * y * y * math.sin(4 * l0)
        - 1.25 * e * e * math.sin(2 * m)
    )


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))


def _azimuth_divisor(lat_rad: float, alt_rad: float) -> float:
    divisor = math.cos(lat_rad) * math.cos(alt_rad)
    if abs(divisor) < AZIMUTH_DIVISOR_EPSILON:
        logger.debug(
            f"Azimuth divisor {divisor:.3e} clamped near the pole or zenith; "
            "azimuth is approximate"
        )
        return math.copysign(AZIMUTH_DIVISOR_EPSILON, divisor)
    return divisor


def compute_solar_position(
    instant: datetime,
    latitude: float,
    longitude: float,
) -> SolarPosition:
    """Compute the sun's apparent position for an observer.

    Out-of-range coordinates are not rejected; they produce defined but
    physically meaningless results.

    Args:
        instant: Timezone-aware datetime. Its offset west of UTC is
            added to the UTC clock to form the hour-angle clock.
        latitude: Observer latitude in degrees.
        longitude: Observer longitude in degrees.

    Returns:
        SolarPosition for the instant.

    Raises:
        InputValidationError: If the instant is naive or a coordinate is
            not finite.
    """
    require_finite(latitude=latitude, longitude=longitude)
    offset_hours = timezone_offset_hours(instant)

    t = julian_centuries(julian_date(instant))

    l0 = normalize_angle(280.46646 + 36000.76983 * t + 0.0003032 * t * t)
    m = normalize_angle(357.52911 + 35999.05029 * t - 0.0001537 * t * t)
    e = 0.016708634 - 0.000042037 * t - 0.0000001267 * t * t

    m_rad = math.radians(m)
    c = (
        (1.914602 - 0.004817 * t - 0.000014 * t * t) * math.sin(m_rad)
        + (0.019993 - 0.000101 * t) * math.sin(2 * m_rad)
        + 0.000289 * math.sin(3 * m_rad)
    )
    l_true = l0 + c

    obliq = 23.439281 - 0.0130042 * t - 0.00000016 * t * t + 0.000000504 * t * t * t
    nutation = -0.0048 * math.sin(math.radians(125.04 - 1934.136 * t))
    true_obliq = obliq + nutation

    l_true_rad = math.radians(l_true)
    obliq_rad = math.radians(true_obliq)
    ra = math.degrees(
        math.atan2(math.cos(obliq_rad) * math.sin(l_true_rad), math.cos(l_true_rad))
    )
    dec = math.degrees(math.asin(math.sin(obliq_rad) * math.sin(l_true_rad)))

    eot = 4 * math.degrees(
        normalize_angle_radians(equation_of_time(l0, e, m, true_obliq))
    )

    utc = instant.astimezone(timezone.utc)
    local_hours = utc.hour + utc.minute / 60 + offset_hours
    ha = normalize_angle((local_hours - 12) * 15 + longitude + eot)

    lat_rad = math.radians(latitude)
    dec_rad = math.radians(dec)
    ha_rad = math.radians(ha)

    sin_alt = math.sin(lat_rad) * math.sin(dec_rad) + math.cos(lat_rad) * math.cos(
        dec_rad
    ) * math.cos(ha_rad)
    altitude = math.degrees(math.asin(_clamp_unit(sin_alt)))

    cos_az = (math.sin(dec_rad) - math.sin(lat_rad) * sin_alt) / _azimuth_divisor(
        lat_rad, math.radians(altitude)
    )
    azimuth = math.degrees(math.acos(_clamp_unit(cos_az)))
    if math.sin(ha_rad) > 0:
        azimuth = normalize_angle(360 - azimuth)

    return SolarPosition(
        altitude=altitude,
        azimuth=azimuth,
        declination=dec,
        right_ascension=ra,
        hour_angle=ha,
    )
