from datetime import datetime, timezone

import numpy as np
import pytest

from skytracker.physics.ephemeris import (
    mean_obliquity,
    moon_position,
    sun_orbit_eccentricity,
    sun_position,
)
from skytracker.physics.timebase import J2000_INSTANT, instant_from_datetime


def test_sun_longitude_at_j2000():
    sun = sun_position(J2000_INSTANT)
    # mean longitude 280.46 deg, equation of center about -0.08 deg
    assert sun.longitude_deg == pytest.approx(280.46, abs=0.2)
    assert sun.longitude_deg == pytest.approx(280.382, abs=0.01)


def test_sun_latitude_at_j2000_is_winter_declination():
    assert sun_position(J2000_INSTANT).latitude_deg == pytest.approx(-23.03, abs=0.05)


def test_sun_latitude_near_zero_at_march_equinox():
    t = instant_from_datetime(datetime(2000, 3, 20, 7, 35, tzinfo=timezone.utc))
    sun = sun_position(t)
    assert abs(sun.latitude_deg) < 0.1
    assert min(sun.longitude_deg, 360.0 - sun.longitude_deg) < 0.2


def test_sun_latitude_bounded_by_obliquity():
    eps = np.degrees(mean_obliquity(J2000_INSTANT))
    for day in range(0, 366, 7):
        lat = sun_position(J2000_INSTANT + day * 86400.0).latitude_deg
        assert abs(lat) <= eps + 1e-9


def test_moon_at_j2000():
    moon = moon_position(J2000_INSTANT)
    assert moon.longitude_deg == pytest.approx(224.018, abs=0.01)
    assert moon.latitude_deg == pytest.approx(5.1198, abs=0.001)


def test_moon_latitude_bounded():
    for hour in range(0, 24 * 30, 6):
        assert abs(moon_position(J2000_INSTANT + hour * 3600.0).latitude_deg) <= 5.12819 + 1e-9


def test_positions_are_continuous_and_deterministic():
    t = instant_from_datetime(datetime(2024, 6, 1, tzinfo=timezone.utc))
    a, b = sun_position(t), sun_position(t + 1.0)
    assert a == sun_position(t)
    assert abs(b.longitude - a.longitude) < 1e-6
    m0, m1 = moon_position(t), moon_position(t + 1.0)
    assert abs(m1.longitude - m0.longitude) < 1e-5


def test_eccentricity_at_j2000():
    assert sun_orbit_eccentricity(J2000_INSTANT) == pytest.approx(0.016708634)


def test_far_from_epoch_still_returns_values():
    for t in (-1e10, 1e11):
        assert np.isfinite(sun_position(t).longitude)
        assert np.isfinite(moon_position(t).latitude)
