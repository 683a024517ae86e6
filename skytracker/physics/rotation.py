# skytracker/physics/rotation.py
import numpy as np

from skytracker.config.settings import EARTH_ROTATION_PERIOD_S


def earth_rotation_angle(simulated_elapsed_s: float) -> float:
    """
    Earth's display spin (radians): one full turn per 86400 simulated seconds.
    Linear and unwrapped; wrapping is left to the renderer.
    """
    return 2.0 * np.pi * float(simulated_elapsed_s) / EARTH_ROTATION_PERIOD_S
