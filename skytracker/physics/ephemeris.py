# skytracker/physics/ephemeris.py
import numpy as np

from skytracker.models.positions import CelestialAngularPosition
from skytracker.physics.timebase import julian_centuries_since_j2000

# Low-precision analytical Sun/Moon models, polynomials in Julian centuries from J2000.0.
# Good to a fraction of a degree near the present; accuracy drifts far from J2000 but
# every instant still yields a value. Output angles are for visual placement.


def sun_orbit_eccentricity(instant: float) -> float:
    T = julian_centuries_since_j2000(instant)
    return 0.016708634 - 0.000042037 * T


def mean_obliquity(instant: float) -> float:
    """Mean obliquity of the ecliptic (radians)."""
    T = julian_centuries_since_j2000(instant)
    return np.radians(23.439281 - 0.0130042 * T)


def sun_position(instant: float) -> CelestialAngularPosition:
    """
    Sun: mean longitude plus equation of center. Latitude is the
    declination-like angle asin(sin(lambda) * sin(eps)).
    """
    T = julian_centuries_since_j2000(instant)
    L0 = 280.46646 + 36000.76983 * T
    M = np.radians(357.52911 + 35999.05029 * T)
    C = (1.914602 - 0.004817 * T) * np.sin(M) + (0.019993 - 0.000101 * T) * np.sin(2.0 * M)

    lam = np.radians(L0 + C)
    eps = mean_obliquity(instant)
    return CelestialAngularPosition(
        longitude=float(lam),
        latitude=float(np.arcsin(np.sin(lam) * np.sin(eps))),
    )


def moon_position(instant: float) -> CelestialAngularPosition:
    """
    Moon: mean longitude with the two leading periodic terms
    (equation of center and evection), latitude from the argument of latitude.
    """
    T = julian_centuries_since_j2000(instant)
    L = 218.3164591 + 481267.88134236 * T
    M = np.radians(134.9634114 + 477198.8676313 * T)
    F = np.radians(93.2720993 + 483202.0175273 * T)
    D = np.radians(297.8502042 + 445267.1115168 * T)

    lam = L + 6.28875 * np.sin(M) + 1.27402 * np.sin(2.0 * D - M)
    beta = 5.12819 * np.sin(F)
    return CelestialAngularPosition(longitude=float(np.radians(lam)), latitude=float(np.radians(beta)))
