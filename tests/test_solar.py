"""Tests for solar position module."""

import math
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from analemma_viz.clock import InputValidationError
from analemma_viz.solar import (
    SolarPosition,
    compute_solar_position,
    julian_centuries,
    julian_date,
    normalize_angle,
    normalize_angle_radians,
)

UTC = timezone.utc


@pytest.fixture
def noon_utc():
    """Noon UTC on a winter day."""
    return datetime(2023, 1, 15, 12, 0, tzinfo=UTC)


class TestAngleHelpers:
    """Tests for angle normalization helpers."""

    def test_normalize_angle_wraps_negative(self):
        """Test that negative angles wrap by floor-modulo."""
        assert normalize_angle(-30) == pytest.approx(330)
        assert normalize_angle(-720) == pytest.approx(0)

    def test_normalize_angle_large(self):
        """Test that large angles wrap into [0, 360)."""
        assert normalize_angle(725) == pytest.approx(5)
        assert normalize_angle(360) == 0

    def test_normalize_angle_radians(self):
        """Test radian normalization into [0, 2*pi)."""
        assert normalize_angle_radians(-0.5) == pytest.approx(2 * math.pi - 0.5)
        assert normalize_angle_radians(7.0) == pytest.approx(7.0 - 2 * math.pi)


class TestJulianDate:
    """Tests for Julian Date conversion."""

    def test_j2000_epoch(self):
        """Test that J2000.0 maps to JD 2451545.0."""
        jd = julian_date(datetime(2000, 1, 1, 12, 0, tzinfo=UTC))
        assert jd == pytest.approx(2451545.0)
        assert julian_centuries(jd) == pytest.approx(0.0)

    def test_unix_epoch(self):
        """Test that the Unix epoch maps to JD 2440587.5."""
        assert julian_date(datetime(1970, 1, 1, tzinfo=UTC)) == pytest.approx(2440587.5)

    def test_offset_does_not_change_instant(self):
        """Test that the same instant in two zones has the same Julian Date."""
        utc_time = datetime(2024, 3, 1, 3, 0, tzinfo=UTC)
        tokyo_time = utc_time.astimezone(ZoneInfo("Asia/Tokyo"))
        assert julian_date(utc_time) == pytest.approx(julian_date(tokyo_time))

    def test_one_century(self):
        """Test Julian centuries after 36525 days."""
        assert julian_centuries(2451545.0 + 36525) == pytest.approx(1.0)


class TestComputeSolarPosition:
    """Tests for compute_solar_position."""

    def test_returns_solar_position(self, noon_utc):
        """Test that a SolarPosition is returned."""
        result = compute_solar_position(noon_utc, 40.0, 0.0)
        assert isinstance(result, SolarPosition)

    @pytest.mark.parametrize("latitude", [-90, -66.5, -30, 0, 30, 66.5, 90])
    @pytest.mark.parametrize("longitude", [-180, -74.006, 0, 139.7, 180])
    def test_ranges(self, latitude, longitude):
        """Test altitude and azimuth ranges across the globe and the year."""
        start = datetime(2023, 1, 1, 0, 0, tzinfo=UTC)
        for step in range(0, 365 * 24, 53):
            instant = start + timedelta(hours=step)
            result = compute_solar_position(instant, latitude, longitude)
            assert -90 <= result.altitude <= 90
            assert 0 <= result.azimuth < 360
            assert 0 <= result.hour_angle <= 360
            assert math.isfinite(result.declination)
            assert math.isfinite(result.right_ascension)

    @pytest.mark.parametrize(
        "day,expected",
        [
            (datetime(2023, 3, 21, 12, 0, tzinfo=UTC), 0.0),
            (datetime(2023, 9, 23, 12, 0, tzinfo=UTC), 0.0),
        ],
    )
    def test_equinox_declination(self, day, expected):
        """Test that declination is near zero at the equinoxes."""
        result = compute_solar_position(day, 0.0, 0.0)
        assert abs(result.declination - expected) < 1.0

    def test_june_solstice_declination(self):
        """Test declination near +23.4 at the June solstice."""
        result = compute_solar_position(datetime(2023, 6, 21, 12, 0, tzinfo=UTC), 0, 0)
        assert result.declination == pytest.approx(23.44, abs=0.3)

    def test_december_solstice_declination(self):
        """Test declination near -23.4 at the December solstice."""
        result = compute_solar_position(datetime(2023, 12, 21, 12, 0, tzinfo=UTC), 0, 0)
        assert result.declination == pytest.approx(-23.44, abs=0.3)

    def test_right_ascension_at_equinox(self):
        """Test right ascension near zero at the March equinox."""
        result = compute_solar_position(datetime(2023, 3, 20, 21, 24, tzinfo=UTC), 0, 0)
        assert abs(result.right_ascension) < 0.5

    def test_equation_of_time_november(self):
        """Test the equation-of-time term in early November.

        At local noon on the prime meridian the hour angle is just the
        equation-of-time term, about +16.4 in early November.
        """
        result = compute_solar_position(datetime(2023, 11, 3, 12, 0, tzinfo=UTC), 0, 0)
        assert result.hour_angle == pytest.approx(16.4, abs=0.5)

    def test_equation_of_time_february(self):
        """Test the equation-of-time term in mid February (about -14.2)."""
        result = compute_solar_position(datetime(2023, 2, 11, 12, 0, tzinfo=UTC), 0, 0)
        assert result.hour_angle == pytest.approx(360 - 14.2, abs=0.5)

    def test_longitude_shifts_hour_angle(self, noon_utc):
        """Test that longitude adds directly to the hour angle."""
        base = compute_solar_position(noon_utc, 40.0, 0.0)
        east = compute_solar_position(noon_utc, 40.0, 30.0)
        assert normalize_angle(east.hour_angle - base.hour_angle) == pytest.approx(30.0)

    def test_utc_offset_sets_local_hours(self):
        """Test that the offset west of UTC is added to the UTC clock."""
        utc_time = datetime(2023, 5, 1, 12, 0, tzinfo=UTC)
        tokyo_time = utc_time.astimezone(ZoneInfo("Asia/Tokyo"))

        base = compute_solar_position(utc_time, 35.0, 139.7)
        shifted = compute_solar_position(tokyo_time, 35.0, 139.7)

        # Offset is -9 hours west, so the hour-angle clock reads 03:00
        assert shifted.declination == pytest.approx(base.declination)
        assert normalize_angle(shifted.hour_angle - base.hour_angle) == pytest.approx(225.0)

    def test_half_hour_offset(self):
        """Test fractional UTC offsets."""
        utc_time = datetime(2023, 5, 1, 6, 30, tzinfo=UTC)
        kolkata_time = utc_time.astimezone(ZoneInfo("Asia/Kolkata"))

        base = compute_solar_position(utc_time, 20.0, 77.0)
        shifted = compute_solar_position(kolkata_time, 20.0, 77.0)

        assert normalize_angle(shifted.hour_angle - base.hour_angle) == pytest.approx(277.5)

    def test_new_york_reference_hour_angle(self):
        """Test a New York winter noon against the reference model output."""
        instant = datetime(2024, 1, 1, 12, 0, tzinfo=ZoneInfo("America/New_York"))
        result = compute_solar_position(instant, 40.7128, -74.006)

        # UTC 17:00 plus 5 hours west gives a 22:00 hour-angle clock
        assert result.hour_angle == pytest.approx(72.57, abs=0.1)
        assert result.altitude == pytest.approx(-2.7, abs=0.5)
        assert result.declination == pytest.approx(-23.0, abs=0.2)

    def test_idempotent(self, noon_utc):
        """Test that identical inputs give identical output."""
        first = compute_solar_position(noon_utc, 51.5, -0.12)
        second = compute_solar_position(noon_utc, 51.5, -0.12)
        assert first == second

    def test_naive_datetime_rejected(self):
        """Test that naive datetimes fail fast."""
        with pytest.raises(InputValidationError, match="timezone-aware"):
            compute_solar_position(datetime(2023, 1, 1, 12, 0), 40.0, 0.0)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_coordinates_rejected(self, noon_utc, bad):
        """Test that non-finite coordinates fail fast."""
        with pytest.raises(InputValidationError, match="finite"):
            compute_solar_position(noon_utc, bad, 0.0)
        with pytest.raises(InputValidationError, match="finite"):
            compute_solar_position(noon_utc, 0.0, bad)

    def test_out_of_range_coordinates_not_rejected(self, noon_utc):
        """Test that out-of-range coordinates still produce finite output."""
        result = compute_solar_position(noon_utc, 120.0, 400.0)
        assert math.isfinite(result.altitude)
        assert 0 <= result.azimuth < 360


class TestPolarLatitudes:
    """Tests for degenerate latitudes near the poles."""

    @pytest.mark.parametrize("latitude", [90.0, -90.0, 89.9999999])
    def test_pole_is_finite(self, noon_utc, latitude):
        """Test that the azimuth divisor guard keeps results finite."""
        result = compute_solar_position(noon_utc, latitude, 0.0)
        assert math.isfinite(result.altitude)
        assert math.isfinite(result.azimuth)
        assert 0 <= result.azimuth < 360

    def test_pole_altitude_equals_declination(self):
        """Test that at the north pole altitude tracks declination."""
        instant = datetime(2023, 6, 21, 12, 0, tzinfo=UTC)
        result = compute_solar_position(instant, 90.0, 0.0)
        assert result.altitude == pytest.approx(result.declination, abs=1e-6)


class TestAzimuthReflection:
    """Tests for the afternoon azimuth branch."""

    @pytest.fixture
    def daytime_positions(self):
        """Minute-by-minute positions above the horizon for one winter day."""
        start = datetime(2023, 1, 15, 0, 0, tzinfo=UTC)
        positions = []
        for minute in range(24 * 60):
            result = compute_solar_position(start + timedelta(minutes=minute), 40.0, 0.0)
            if result.altitude > 0:
                positions.append(result)
        return positions

    def test_branch_follows_hour_angle_sign(self, daytime_positions):
        """Test that reflection happens exactly when sin(hour angle) > 0."""
        for result in daytime_positions:
            if math.sin(math.radians(result.hour_angle)) > 0:
                assert result.azimuth >= 180
            else:
                assert result.azimuth <= 180

    def test_both_branches_sampled(self, daytime_positions):
        """Test that the day spans both sides of the meridian."""
        signs = {math.sin(math.radians(r.hour_angle)) > 0 for r in daytime_positions}
        assert signs == {True, False}

    def test_continuous_through_meridian(self, daytime_positions):
        """Test that azimuth has no jumps across the meridian crossing."""
        azimuths = [r.azimuth for r in daytime_positions]
        steps = [abs(b - a) for a, b in zip(azimuths, azimuths[1:])]
        assert max(steps) < 2.0
