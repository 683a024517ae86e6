# skytracker/physics/frames.py
"""
Inertial / angular positions -> shared render-space Cartesian frame.

Render frame: y is the Earth's polar axis, x-z the equatorial plane,
distances in display units (Earth sphere radius = DISPLAY_EARTH_RADIUS).
Everything here is a pure function; nothing is cached between calls.
"""
from __future__ import annotations

import numpy as np
from sgp4.propagation import gstime

from skytracker.config.settings import (
    WGS84_A_KM,
    WGS84_B_KM,
    GEODETIC_MAX_ITER,
    DISPLAY_EARTH_RADIUS,
    display_height_ratio,
)
from skytracker.models.positions import (
    CelestialAngularPosition,
    GeodeticPosition,
    InertialPosition,
    RenderPosition,
)
from skytracker.physics.timebase import julian_date

_F = (WGS84_A_KM - WGS84_B_KM) / WGS84_A_KM
_E2 = 2.0 * _F - _F * _F


def sidereal_angle(instant: float) -> float:
    """Greenwich mean sidereal time (radians, [0, 2pi))."""
    return float(gstime(julian_date(instant)))


def wrap_pi(angle: float) -> float:
    return float((angle + np.pi) % (2.0 * np.pi) - np.pi)


def inertial_to_geodetic(r_km, gmst: float) -> GeodeticPosition:
    """
    TEME position (km) -> geodetic latitude/longitude/height on WGS-84,
    given the sidereal angle. Latitude by fixed-point iteration.
    """
    x, y, z = (float(c) for c in r_km)
    R = np.hypot(x, y)

    longitude = wrap_pi(np.arctan2(y, x) - gmst)
    latitude = np.arctan2(z, R)

    for _ in range(GEODETIC_MAX_ITER):
        s = np.sin(latitude)
        C = 1.0 / np.sqrt(1.0 - _E2 * s * s)
        latitude = np.arctan2(z + WGS84_A_KM * C * _E2 * s, R)

    # valid at the poles, where R / cos(latitude) is 0 / 0
    s = np.sin(latitude)
    height = R * np.cos(latitude) + z * s - WGS84_A_KM * np.sqrt(1.0 - _E2 * s * s)
    return GeodeticPosition(latitude=float(latitude), longitude=longitude, height_km=float(height))


def geodetic_to_render(geo: GeodeticPosition, gmst: float) -> RenderPosition:
    """
    Height is scaled by display/real Earth radius and added to the display
    radius; longitude is shifted by the sidereal angle before projection.
    """
    r = DISPLAY_EARTH_RADIUS + geo.height_km * display_height_ratio()
    phi = np.pi / 2.0 - geo.latitude        # colatitude
    theta = geo.longitude + gmst

    sin_phi = np.sin(phi)
    return RenderPosition(
        x=float(r * sin_phi * np.cos(theta)),
        y=float(r * np.cos(phi)),
        z=float(r * sin_phi * np.sin(theta)),
    )


def inertial_to_render(position: InertialPosition, gmst: float) -> RenderPosition:
    return geodetic_to_render(inertial_to_geodetic(position.r_km, gmst), gmst)


def celestial_to_render(angles: CelestialAngularPosition, distance: float) -> RenderPosition:
    """Fixed display distance; only the direction carries information."""
    cos_lat = np.cos(angles.latitude)
    return RenderPosition(
        x=float(distance * cos_lat * np.cos(angles.longitude)),
        y=float(distance * np.sin(angles.latitude)),
        z=float(distance * cos_lat * np.sin(angles.longitude)),
    )


def render_positions_array(positions) -> np.ndarray:
    """Stack RenderPositions into an (N, 3) array; (0, 3) when empty."""
    if not positions:
        return np.zeros((0, 3), dtype=float)
    return np.array([[p.x, p.y, p.z] for p in positions], dtype=float)
