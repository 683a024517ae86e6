"""
Per-frame scene computation.

Each frame takes one instant from the shared clock and feeds it, unchanged,
to the Earth rotation model, the Sun/Moon ephemeris and every satellite's
propagator, then converts everything into render space. Orbital states are
built once, when the engine is created.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from skytracker.config.settings import SUN_DISPLAY_DISTANCE, MOON_DISPLAY_DISTANCE
from skytracker.data.tle_parser import parse
from skytracker.models.element_set import OrbitalElementSet
from skytracker.models.positions import CelestialAngularPosition, RenderPosition
from skytracker.physics.ephemeris import sun_position, moon_position
from skytracker.physics.frames import sidereal_angle, inertial_to_render, celestial_to_render
from skytracker.physics.rotation import earth_rotation_angle
from skytracker.propagation.sgp4_propagator import (
    OrbitalState,
    PropagationError,
    build_state,
    propagate,
)
from skytracker.simulation.clock import SimulationClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteOutcome:
    object_id: str
    name: str
    position: Optional[RenderPosition] = None
    error: Optional[PropagationError] = None

    @property
    def ok(self) -> bool:
        return self.position is not None


@dataclass(frozen=True)
class LoadFailure:
    object_id: str
    name: str
    error: PropagationError


@dataclass
class FrameResult:
    instant: float
    earth_rotation: float          # rad, unwrapped, 0 at clock start
    sidereal_angle: float          # rad, GMST at `instant`
    sun_angles: CelestialAngularPosition
    sun: RenderPosition
    sun_light: RenderPosition
    moon_angles: CelestialAngularPosition
    moon: RenderPosition
    outcomes: List[SatelliteOutcome] = field(default_factory=list)

    @property
    def satellites(self) -> List[Tuple[str, RenderPosition]]:
        return [(o.object_id, o.position) for o in self.outcomes if o.ok]

    @property
    def failures(self) -> List[SatelliteOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def skipped(self) -> int:
        return len(self.failures)


def _object_id(index: int, name: str) -> str:
    return f"{index}:{name}"


def satellite_outcome(object_id: str, state: OrbitalState, instant: float, gmst: float) -> SatelliteOutcome:
    try:
        pos = propagate(state, instant)
    except PropagationError as e:
        return SatelliteOutcome(object_id=object_id, name=state.name, error=e)
    return SatelliteOutcome(object_id=object_id, name=state.name, position=inertial_to_render(pos, gmst))


class SceneEngine:
    """
    Holds the shared clock and the cached orbital states; computes frames.
    Satellite outcomes keep source order whether or not a worker pool is used.
    """

    def __init__(
        self,
        element_sets: Iterable[OrbitalElementSet],
        clock: Optional[SimulationClock] = None,
        max_workers: Optional[int] = None,
    ):
        self.clock = clock if clock is not None else SimulationClock()
        self.max_workers = max_workers
        self.states: List[Tuple[str, OrbitalState]] = []
        self.load_failures: List[LoadFailure] = []
        self.skip_counts: Dict[str, int] = {}
        self.frames_computed = 0
        self._pool: Optional[ThreadPoolExecutor] = None

        for i, es in enumerate(element_sets):
            oid = _object_id(i, es.name)
            try:
                self.states.append((oid, build_state(es)))
            except PropagationError as e:
                logger.warning("Excluding %s: %s", oid, e)
                self.load_failures.append(LoadFailure(object_id=oid, name=es.name, error=e))

        logger.info(
            "Orbital states built: %d tracked, %d excluded",
            len(self.states), len(self.load_failures),
        )

    @classmethod
    def from_text(cls, raw_text: str, clock: Optional[SimulationClock] = None,
                  max_workers: Optional[int] = None) -> "SceneEngine":
        return cls(parse(raw_text), clock=clock, max_workers=max_workers)

    @property
    def tracked_count(self) -> int:
        return len(self.states)

    def set_time_scale(self, factor: float, wall_time: Optional[float] = None) -> float:
        return self.clock.set_scale(factor, wall_time=wall_time)

    def _executor(self) -> ThreadPoolExecutor:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="scene")
        return self._pool

    def _satellite_outcomes(self, instant: float, gmst: float) -> List[SatelliteOutcome]:
        if self.max_workers and self.max_workers > 1 and len(self.states) > 1:
            return list(self._executor().map(
                lambda item: satellite_outcome(item[0], item[1], instant, gmst),
                self.states,
            ))
        return [satellite_outcome(oid, st, instant, gmst) for oid, st in self.states]

    def compute_frame(self, wall_time: Optional[float] = None) -> FrameResult:
        instant = self.clock.now(wall_time)
        elapsed = instant - self.clock.origin_instant
        gmst = sidereal_angle(instant)

        sun_angles = sun_position(instant)
        moon_angles = moon_position(instant)
        sun = celestial_to_render(sun_angles, SUN_DISPLAY_DISTANCE)

        outcomes = self._satellite_outcomes(instant, gmst)
        for o in outcomes:
            if not o.ok:
                self.skip_counts[o.object_id] = self.skip_counts.get(o.object_id, 0) + 1
                logger.debug("Skipping %s this frame: %s", o.object_id, o.error)

        self.frames_computed += 1
        return FrameResult(
            instant=instant,
            earth_rotation=earth_rotation_angle(elapsed),
            sidereal_angle=gmst,
            sun_angles=sun_angles,
            sun=sun,
            sun_light=sun,
            moon_angles=moon_angles,
            moon=celestial_to_render(moon_angles, MOON_DISPLAY_DISTANCE),
            outcomes=outcomes,
        )

    @property
    def total_skips(self) -> int:
        return sum(self.skip_counts.values())

    def close(self) -> None:
        """Shut down the worker pool, if one was started. Safe to call twice."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "SceneEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
