import logging
import os

import numpy as np
import matplotlib.pyplot as plt

from skytracker.config import settings
from skytracker.config.settings import DISPLAY_EARTH_RADIUS
from skytracker.physics.frames import render_positions_array

logger = logging.getLogger(__name__)


def plot_frame(frame, path=None):
    """
    3D snapshot of one frame in render space: Earth sphere, satellites, Sun, Moon.
    Render y is the polar axis, so it is drawn as the plot's vertical axis.
    """
    if path is None:
        os.makedirs(settings.OUTPUT_DIR, exist_ok=True)
        path = os.path.join(settings.OUTPUT_DIR, "frame_snapshot.png")

    fig = plt.figure(figsize=(8, 8))
    ax = fig.add_subplot(projection="3d")
    ax.set_title(f"Scene at t={frame.instant:.0f} s ({len(frame.satellites)} satellites)")

    # Earth wireframe, rotated with the frame's spin angle
    u, v = np.mgrid[0:2 * np.pi:24j, 0:np.pi:12j]
    u = u + frame.earth_rotation
    ex = DISPLAY_EARTH_RADIUS * np.cos(u) * np.sin(v)
    ey = DISPLAY_EARTH_RADIUS * np.cos(v)
    ez = DISPLAY_EARTH_RADIUS * np.sin(u) * np.sin(v)
    ax.plot_wireframe(ex, ez, ey, color="tab:blue", linewidth=0.3, alpha=0.5)

    sats = render_positions_array([p for _, p in frame.satellites])
    if len(sats):
        ax.scatter(sats[:, 0], sats[:, 2], sats[:, 1], s=2, c="red", label="Satellites")

    ax.scatter([frame.moon.x], [frame.moon.z], [frame.moon.y], s=30, c="gray", label="Moon")

    # Sun sits far outside the Earth-Moon box; draw its direction at the Moon's distance
    sun = frame.sun.as_array()
    sun_dir = sun / np.linalg.norm(sun) * frame.moon.radius
    ax.scatter([sun_dir[0]], [sun_dir[2]], [sun_dir[1]], s=60, c="orange", label="Sun (direction)")

    lim = max(frame.moon.radius, DISPLAY_EARTH_RADIUS) * 1.1
    ax.set_xlim(-lim, lim)
    ax.set_ylim(-lim, lim)
    ax.set_zlim(-lim, lim)
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_zlabel("y")
    ax.legend(loc="upper right")

    plt.tight_layout()
    plt.savefig(path)
    plt.close(fig)

    logger.info("Saved frame snapshot: %s", path)
    return path
