from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np
from sgp4.api import Satrec, SGP4_ERRORS
from sgp4.earth_gravity import wgs72
from sgp4.io import verify_checksum
from sgp4.io import twoline2rv as io_twoline2rv

from skytracker.config.settings import SECONDS_PER_DAY, JD_UNIX_EPOCH
from skytracker.models.element_set import OrbitalElementSet
from skytracker.models.positions import InertialPosition
from skytracker.physics.timebase import julian_date_parts

TLE_LINE_LENGTH = 69


class PropagationError(RuntimeError):
    """
    An element set that cannot be turned into a state, or a state that
    cannot be propagated to the requested instant. Always object-local.
    """

    def __init__(self, message: str, name: str = "", code: Optional[int] = None):
        super().__init__(message)
        self.name = name
        self.code = code


@dataclass(frozen=True, eq=False)
class OrbitalState:
    name: str
    element_set: OrbitalElementSet
    satrec: Any = field(repr=False)  # sgp4 Satrec (or anything with .sgp4(jd, fr))
    epoch: float                     # POSIX seconds of the element-set epoch


def _check_line(line: str, number: int, name: str) -> None:
    if len(line) != TLE_LINE_LENGTH:
        raise PropagationError(
            f"line {number} has {len(line)} characters, expected {TLE_LINE_LENGTH}", name=name
        )
    if not line[68].isdigit():
        raise PropagationError(f"line {number} has no checksum digit", name=name)
    try:
        verify_checksum(line)
    except ValueError as e:
        raise PropagationError(f"line {number} checksum mismatch: {e}", name=name) from e


def _check_fields(tle1: str, tle2: str, name: str) -> None:
    """
    Strict field parse with the pure-Python reader. The fast Satrec parser
    stops at the first bad character of a number instead of rejecting it.
    """
    try:
        io_twoline2rv(tle1, tle2, wgs72)
    except (ValueError, IndexError) as e:
        raise PropagationError(f"invalid field format: {e}", name=name) from e


def satrec_from_tle(tle1: str, tle2: str) -> Satrec:
    return Satrec.twoline2rv(tle1, tle2)


def build_state(element_set: OrbitalElementSet) -> OrbitalState:
    """
    Validate an element set and initialise the SGP4 model for it, once.
    Raises PropagationError; never returns a half-built state.
    """
    name = element_set.name
    l1, l2 = element_set.line1, element_set.line2

    _check_line(l1, 1, name)
    _check_line(l2, 2, name)
    if l1[2:7] != l2[2:7]:
        raise PropagationError(
            f"catalog number mismatch between lines ({l1[2:7].strip()} vs {l2[2:7].strip()})", name=name
        )

    _check_fields(l1, l2, name)

    try:
        sat = satrec_from_tle(l1, l2)
    except (ValueError, IndexError) as e:
        raise PropagationError(f"unparsable element set: {e}", name=name) from e

    if sat.error != 0:
        raise PropagationError(
            f"SGP4 init error code={sat.error}: {SGP4_ERRORS.get(sat.error, 'unknown')}",
            name=name, code=sat.error,
        )
    if not sat.no_kozai > 0.0:
        raise PropagationError("mean motion is not positive", name=name)

    epoch = ((sat.jdsatepoch - JD_UNIX_EPOCH) + sat.jdsatepochF) * SECONDS_PER_DAY
    return OrbitalState(name=name, element_set=element_set, satrec=sat, epoch=float(epoch))


def propagate(state: OrbitalState, instant: float) -> InertialPosition:
    """
    Position of `state` at `instant` (POSIX seconds), TEME km and km/s.
    Pure: the same (state, instant) always gives the same result.
    """
    jd, fr = julian_date_parts(instant)
    e, r_km, v_kms = state.satrec.sgp4(jd, fr)
    if e != 0:
        raise PropagationError(
            f"SGP4 error code={e}: {SGP4_ERRORS.get(e, 'unknown')}", name=state.name, code=e
        )

    r = np.array(r_km, dtype=float)
    v = np.array(v_kms, dtype=float)
    if not (np.all(np.isfinite(r)) and np.all(np.isfinite(v))):
        raise PropagationError("SGP4 returned a non-finite state", name=state.name)

    return InertialPosition(r_km=r, v_kms=v, instant=float(instant))


def minutes_since_epoch(state: OrbitalState, instant: float) -> float:
    return (float(instant) - state.epoch) / 60.0
