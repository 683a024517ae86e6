# skytracker/physics/timebase.py
"""
Simulated instants are POSIX seconds (UTC, float). These helpers move
between that, datetimes and Julian dates.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Tuple

from sgp4.api import jday

from skytracker.config.settings import (
    SECONDS_PER_DAY,
    JD_UNIX_EPOCH,
    JD_J2000,
    DAYS_PER_JULIAN_CENTURY,
)


def julian_date(instant: float) -> float:
    return float(instant) / SECONDS_PER_DAY + JD_UNIX_EPOCH


def julian_date_parts(instant: float) -> Tuple[float, float]:
    """
    Split into (whole-ish day, fraction) the way Satrec.sgp4 wants it.
    Splitting before adding the Unix-epoch offset keeps sub-millisecond
    precision that a single float JD would lose.
    """
    days = float(instant) / SECONDS_PER_DAY
    whole = math.floor(days)
    return JD_UNIX_EPOCH + whole, days - whole


def julian_centuries_since_j2000(instant: float) -> float:
    return (julian_date(instant) - JD_J2000) / DAYS_PER_JULIAN_CENTURY


def instant_from_datetime(t_utc: datetime) -> float:
    """Naive datetimes are taken as UTC."""
    if t_utc.tzinfo is None:
        t_utc = t_utc.replace(tzinfo=timezone.utc)
    else:
        t_utc = t_utc.astimezone(timezone.utc)

    jd, fr = jday(
        t_utc.year, t_utc.month, t_utc.day,
        t_utc.hour, t_utc.minute,
        t_utc.second + t_utc.microsecond * 1e-6,
    )
    return ((jd - JD_UNIX_EPOCH) + fr) * SECONDS_PER_DAY


def instant_to_datetime(instant: float) -> datetime:
    return datetime.fromtimestamp(float(instant), tz=timezone.utc)


# J2000.0 is 2000-01-01T12:00:00 TT; the models here ignore TT-UTC.
J2000_INSTANT = (JD_J2000 - JD_UNIX_EPOCH) * SECONDS_PER_DAY
