"""Axis-aligned boxes and line clipping."""
import math
from typing import NamedTuple, Optional, Tuple

import numpy as np

from penhatch.types import Vector

# Direction components smaller than this are treated as zero
_EPS = 1e-12


class Box(NamedTuple):
    """Axis-aligned box ``[min_x, max_x] x [min_y, max_y]``."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def of_size(cls, width: float, height: float) -> "Box":
        return cls(0.0, 0.0, float(width), float(height))

    def contains(self, point: Vector) -> bool:
        """Half-open containment: min inclusive, max exclusive. False for NaN."""
        x, y = float(point[0]), float(point[1])
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y

    def scaled(self, factor: float) -> "Box":
        """Box spanning ``[-factor * max, factor * max]`` on each axis."""
        return Box(-self.max_x * factor, -self.max_y * factor,
                   self.max_x * factor, self.max_y * factor)


def _slab(lo: float, hi: float, origin: float, d: float) -> Optional[Tuple[float, float]]:
    """Parametric interval where ``origin + t * d`` lies within ``[lo, hi]``."""
    if abs(d) < _EPS:
        # Parallel to this slab: everything or nothing
        if lo <= origin <= hi:
            return -math.inf, math.inf
        return None

    t0 = (lo - origin) / d
    t1 = (hi - origin) / d
    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def box_intersection(
    box: Box,
    origin: Vector,
    direction: Vector
) -> Optional[Tuple[Vector, Vector]]:
    """
    Clip the infinite line ``origin + t * direction`` to a box (slab method).

    Args:
        box: Clipping box
        origin: Any point on the line
        direction: Line direction, need not be unit length

    Returns:
        (entry, exit) points on the box boundary, or None when the line misses
        the box or the direction is degenerate (zero, NaN or infinite)
    """
    ox, oy = float(origin[0]), float(origin[1])
    dx, dy = float(direction[0]), float(direction[1])

    if not all(math.isfinite(v) for v in (ox, oy, dx, dy)):
        return None
    if abs(dx) < _EPS and abs(dy) < _EPS:
        return None

    x_slab = _slab(box.min_x, box.max_x, ox, dx)
    y_slab = _slab(box.min_y, box.max_y, oy, dy)
    if x_slab is None or y_slab is None:
        return None

    txmin, txmax = x_slab
    tymin, tymax = y_slab
    if txmin > tymax or tymin > txmax:
        return None

    t_entry = max(txmin, tymin)
    t_exit = min(txmax, tymax)

    d = np.array([dx, dy])
    o = np.array([ox, oy])
    return o + d * t_entry, o + d * t_exit


def rotate(vector: Vector, radians: float) -> Vector:
    """Rotate a 2D vector counter-clockwise."""
    c, s = math.cos(radians), math.sin(radians)
    x, y = float(vector[0]), float(vector[1])
    return np.array([c * x - s * y, s * x + c * y])
