"""
Project settings (constants + small helpers).
Units: kilometers (km), seconds (s), radians unless a name says _DEG.
Display units are arbitrary scene units (Earth sphere radius = DISPLAY_EARTH_RADIUS).
"""
from __future__ import annotations

import math
import os
from typing import Optional

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
OUTPUT_DIR = os.path.join(BASE_DIR, "outputs")
TLE_CACHE_DIR = os.path.join(BASE_DIR, ".tle_cache")

# Run
VALIDATE_ON_IMPORT = False

# Time base
SECONDS_PER_DAY = 86400.0
JD_UNIX_EPOCH = 2440587.5      # Julian date of 1970-01-01T00:00:00Z
JD_J2000 = 2451545.0           # Julian date of J2000.0
DAYS_PER_JULIAN_CENTURY = 36525.0

# Earth
REAL_EARTH_RADIUS_KM = 6371.0  # height scale divisor for the display
WGS84_A_KM = 6378.137
WGS84_B_KM = 6356.7523142
GEODETIC_MAX_ITER = 20
EARTH_ROTATION_PERIOD_S = SECONDS_PER_DAY  # one display spin per simulated day

# Display geometry
DISPLAY_EARTH_RADIUS = 5.0
SUN_DISPLAY_DISTANCE = 50.0
MOON_DISPLAY_DISTANCE = 10.0

# Time-scale control (slider 1..1000, step 1; 0 freezes the scene)
TIME_SCALE_MIN = 0.0
TIME_SCALE_MAX = 1000.0
TIME_SCALE_DEFAULT = 1.0

# Element-set download
CELESTRAK_GP_URL = "https://celestrak.org/NORAD/elements/gp.php"
DEFAULT_TLE_GROUP = "starlink"
TLE_CACHE_TTL_HOURS = 6.0
HTTP_TIMEOUT_S = 20.0
HTTP_RETRIES = 3
HTTP_BACKOFF_S = 0.6

# Headless runner
DEFAULT_FRAMES = 10
DEFAULT_FRAME_INTERVAL_S = 1.0 / 60.0


def display_height_ratio() -> float:
    """Display units per real kilometer of altitude."""
    return DISPLAY_EARTH_RADIUS / REAL_EARTH_RADIUS_KM


def clamp_time_scale(val: Optional[float]) -> float:
    try:
        out = float(TIME_SCALE_DEFAULT if val is None else val)
    except (TypeError, ValueError):
        out = float(TIME_SCALE_DEFAULT)
    if not math.isfinite(out):
        out = float(TIME_SCALE_DEFAULT)
    return max(float(TIME_SCALE_MIN), min(float(TIME_SCALE_MAX), out))


def validate_settings() -> None:
    if SECONDS_PER_DAY <= 0:
        raise ValueError("SECONDS_PER_DAY must be > 0")
    if EARTH_ROTATION_PERIOD_S <= 0:
        raise ValueError("EARTH_ROTATION_PERIOD_S must be > 0")
    if DISPLAY_EARTH_RADIUS <= 0:
        raise ValueError("DISPLAY_EARTH_RADIUS must be > 0")
    if REAL_EARTH_RADIUS_KM <= 0:
        raise ValueError("REAL_EARTH_RADIUS_KM must be > 0")
    if WGS84_B_KM <= 0 or WGS84_B_KM > WGS84_A_KM:
        raise ValueError("WGS84_B_KM must be in (0, WGS84_A_KM]")
    if GEODETIC_MAX_ITER <= 0:
        raise ValueError("GEODETIC_MAX_ITER must be > 0")
    if SUN_DISPLAY_DISTANCE <= DISPLAY_EARTH_RADIUS:
        raise ValueError("SUN_DISPLAY_DISTANCE must be > DISPLAY_EARTH_RADIUS")
    if MOON_DISPLAY_DISTANCE <= DISPLAY_EARTH_RADIUS:
        raise ValueError("MOON_DISPLAY_DISTANCE must be > DISPLAY_EARTH_RADIUS")

    if TIME_SCALE_MIN < 0:
        raise ValueError("TIME_SCALE_MIN must be >= 0")
    if TIME_SCALE_MAX < TIME_SCALE_MIN:
        raise ValueError("TIME_SCALE_MAX must be >= TIME_SCALE_MIN")
    if not (TIME_SCALE_MIN <= TIME_SCALE_DEFAULT <= TIME_SCALE_MAX):
        raise ValueError("TIME_SCALE_DEFAULT must lie in [TIME_SCALE_MIN, TIME_SCALE_MAX]")
    if not math.isfinite(TIME_SCALE_MAX):
        raise ValueError("TIME_SCALE_MAX must be finite")

    if TLE_CACHE_TTL_HOURS < 0:
        raise ValueError("TLE_CACHE_TTL_HOURS must be >= 0")
    if HTTP_TIMEOUT_S <= 0:
        raise ValueError("HTTP_TIMEOUT_S must be > 0")
    if HTTP_RETRIES <= 0:
        raise ValueError("HTTP_RETRIES must be > 0")


if VALIDATE_ON_IMPORT:
    validate_settings()
