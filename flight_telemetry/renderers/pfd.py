"""
Primary flight display geometry.

The attitude indicator is a square window of side ``size`` centred on
the aircraft symbol. The horizon is rotated by roll, shifted by
``pitch * (size / 2) / 45`` (45 degrees of pitch reach the window edge)
and clipped to the window.
"""

import logging
import math
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

PITCH_FULL_SCALE_DEG = 45.0


def pitch_offset(pitch: float, size: float) -> float:
    return pitch * (size / 2) / PITCH_FULL_SCALE_DEG


def _rotate(x: float, y: float, angle_rad: float) -> Point:
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return x * c - y * s, x * s + y * c


def clip_segment(p0: Point, p1: Point, half: float) -> Optional[Tuple[Point, Point]]:
    """Liang-Barsky clip of a segment to the square [-half, half]^2."""
    x0, y0 = p0
    dx, dy = p1[0] - x0, p1[1] - y0
    t0, t1 = 0.0, 1.0

    for p, q in ((-dx, x0 + half), (dx, half - x0), (-dy, y0 + half), (dy, half - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


def project_horizon(roll: float, pitch: float, size: float) -> Optional[Tuple[Point, Point]]:
    """
    Horizon line endpoints in window coordinates (origin at centre,
    y pointing down, as on a canvas).

    Args:
        roll: Bank angle in degrees, positive right wing down
        pitch: Pitch in degrees, positive nose up
        size: Side of the square attitude window

    Returns:
        Clipped endpoints, or None when the horizon is outside the window
    """
    angle = math.radians(roll)
    offset = pitch_offset(pitch, size)
    # A line long enough to span the window at any bank angle
    reach = size * 2
    p0 = _rotate(-reach, offset, angle)
    p1 = _rotate(reach, offset, angle)
    return clip_segment(p0, p1, size / 2)


def is_sky(x: float, y: float, roll: float, pitch: float, size: float) -> bool:
    """Whether a window point lies above the horizon."""
    # Undo the roll rotation, then compare against the shifted horizon
    _, local_y = _rotate(x, y, -math.radians(roll))
    return local_y < pitch_offset(pitch, size)


def attitude_grid(
    roll: float,
    pitch: float,
    width: int,
    height: int,
    sky: str = " ",
    ground: str = "░"
) -> List[str]:
    """
    Character raster of the attitude window.

    Terminal cells are about twice as tall as wide, so rows are sampled
    at double the column spacing to keep the horizon angle true.
    """
    size = float(width)
    rows = []
    for j in range(height):
        y = (j + 0.5 - height / 2) * 2.0
        row = []
        for i in range(width):
            x = i + 0.5 - width / 2
            if i == width // 2 and j == height // 2:
                row.append("+")
            else:
                row.append(sky if is_sky(x, y, roll, pitch, size) else ground)
        rows.append("".join(row))
    return rows


def heading_label(heading: float) -> str:
    """Cardinal point for a heading in degrees."""
    names = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]
    return names[int(((heading % 360) + 22.5) // 45) % 8]
