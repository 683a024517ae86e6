from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

from skytracker.config.settings import TIME_SCALE_DEFAULT, clamp_time_scale

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Wall-clock seconds -> simulated instant (POSIX seconds) under a scale factor.

    One instance is shared by every consumer of a frame. A scale change
    rebases at the instant of change, so simulated time is continuous:

        sim(wall) = sim_at_change + (wall - wall_at_change) * scale
    """

    def __init__(
        self,
        start_wall_time: Optional[float] = None,
        scale: float = TIME_SCALE_DEFAULT,
        start_instant: Optional[float] = None,
        wall_clock: Callable[[], float] = time.time,
    ):
        self._wall_clock = wall_clock
        wall0 = float(wall_clock() if start_wall_time is None else start_wall_time)

        self.origin_wall_time = wall0
        self.origin_instant = float(wall0 if start_instant is None else start_instant)

        # rebase point
        self._wall_at_change = wall0
        self._sim_at_change = self.origin_instant
        self._scale = clamp_time_scale(scale)

    @property
    def scale(self) -> float:
        return self._scale

    def _wall(self, wall_time: Optional[float]) -> float:
        return float(self._wall_clock() if wall_time is None else wall_time)

    def now(self, wall_time: Optional[float] = None) -> float:
        w = self._wall(wall_time)
        return self._sim_at_change + (w - self._wall_at_change) * self._scale

    def elapsed(self, wall_time: Optional[float] = None) -> float:
        """Simulated seconds since the clock started."""
        return self.now(wall_time) - self.origin_instant

    def set_scale(self, factor: float, wall_time: Optional[float] = None) -> float:
        """
        Change the time scale. Out-of-range values are clamped; a non-finite
        value leaves the current scale in place. Returns the scale in effect.
        """
        try:
            value = float(factor)
        except (TypeError, ValueError):
            value = math.nan
        if not math.isfinite(value):
            logger.warning("Ignoring non-finite time scale %r (keeping %.3g)", factor, self._scale)
            return self._scale

        w = self._wall(wall_time)
        sim = self.now(w)
        new_scale = clamp_time_scale(value)
        if new_scale != value:
            logger.info("Time scale %.6g clamped to %.6g", value, new_scale)

        self._wall_at_change = w
        self._sim_at_change = sim
        self._scale = new_scale
        logger.info("Time scale set to %.6gx (rebased at wall=%.3f, sim=%.3f)", new_scale, w, sim)
        return new_scale
