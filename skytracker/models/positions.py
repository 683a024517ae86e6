# skytracker/models/positions.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class InertialPosition:
    r_km: np.ndarray   # position in km (TEME, Earth-centered inertial)
    v_kms: np.ndarray  # velocity in km/s (TEME)
    instant: float     # POSIX seconds the state is valid for


@dataclass(frozen=True)
class GeodeticPosition:
    latitude: float    # rad
    longitude: float   # rad, [-pi, pi]
    height_km: float


@dataclass(frozen=True)
class CelestialAngularPosition:
    """
    Placement angles for the Sun or Moon (radians). Longitude is not wrapped.
    """
    longitude: float
    latitude: float

    @property
    def longitude_deg(self) -> float:
        return float(np.degrees(self.longitude)) % 360.0

    @property
    def latitude_deg(self) -> float:
        return float(np.degrees(self.latitude))


@dataclass(frozen=True)
class RenderPosition:
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.as_array()))
