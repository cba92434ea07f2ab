"""Direction fields that orient hatch strokes.

A field maps normalized grid coordinates ``(x, y)`` in [0, 1] to a unit
vector. The default is a seeded billow noise field with turbulent domain
displacement; constant and closed-form fields are drop-in alternatives.
"""
import logging
import math
from typing import Callable, Dict, Optional

import numpy as np

from penhatch.types import ConfigError, Vector

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Gradient noise
# ---------------------------------------------------------------------------

def _hash_wang(key: np.ndarray) -> np.ndarray:
    """Wang hash, vectorised uint32."""
    k = np.asarray(key, dtype=np.uint32)
    k = (k ^ np.uint32(61)) ^ (k >> np.uint32(16))
    k = k * np.uint32(9)
    k = k ^ (k >> np.uint32(4))
    k = k * np.uint32(0x27D4EB2D)
    k = k ^ (k >> np.uint32(15))
    return k


def _hash3d(x: np.ndarray, y: np.ndarray, seed: np.uint32) -> np.ndarray:
    return _hash_wang(x ^ _hash_wang(y ^ _hash_wang(seed)))


def _fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _grad(hash_val: np.ndarray, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
    h = hash_val & np.uint32(3)
    gx = np.where(h & np.uint32(1), -1.0, 1.0)
    gy = np.where(h & np.uint32(2), -1.0, 1.0)
    return gx * dx + gy * dy


def perlin2d(x, y, seed: int) -> np.ndarray:
    """
    2D Perlin gradient noise, roughly in [-1, 1].

    Args:
        x, y: Coordinates, scalars or arrays of the same shape
        seed: Any integer; reduced modulo 2**32

    Returns:
        Noise values, at least 1-D
    """
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    y = np.atleast_1d(np.asarray(y, dtype=np.float64))

    ix = np.floor(x).astype(np.int64)
    iy = np.floor(y).astype(np.int64)
    fx = x - ix
    fy = y - iy

    u = _fade(fx)
    v = _fade(fy)

    with np.errstate(over="ignore"):
        ux = ix.astype(np.uint32)
        uy = iy.astype(np.uint32)
        s = np.uint32(seed % 2**32)
        one = np.uint32(1)

        g00 = _grad(_hash3d(ux, uy, s), fx, fy)
        g10 = _grad(_hash3d(ux + one, uy, s), fx - 1.0, fy)
        g01 = _grad(_hash3d(ux, uy + one, s), fx, fy - 1.0)
        g11 = _grad(_hash3d(ux + one, uy + one, s), fx - 1.0, fy - 1.0)

    x0 = g00 + u * (g10 - g00)
    x1 = g01 + u * (g11 - g01)
    return x0 + v * (x1 - x0)


def fbm2d(x, y, seed: int, octaves: int = 6, lacunarity: float = 2.0,
          persistence: float = 0.5, frequency: float = 1.0) -> np.ndarray:
    """Fractal Brownian motion, normalized by total amplitude."""
    total = np.zeros_like(np.atleast_1d(np.asarray(x, dtype=np.float64)))
    amplitude = 1.0
    max_amp = 0.0
    for i in range(octaves):
        total = total + amplitude * perlin2d(x * frequency, y * frequency, seed + i)
        max_amp += amplitude
        frequency *= lacunarity
        amplitude *= persistence
    return total / max_amp


def billow2d(x, y, seed: int, octaves: int = 6, lacunarity: float = 2.0,
             persistence: float = 0.5, frequency: float = 1.0) -> np.ndarray:
    """Billow noise: fBm over folded octaves ``2|n| - 1``."""
    total = np.zeros_like(np.atleast_1d(np.asarray(x, dtype=np.float64)))
    amplitude = 1.0
    max_amp = 0.0
    for i in range(octaves):
        n = perlin2d(x * frequency, y * frequency, seed + i)
        total = total + amplitude * (2.0 * np.abs(n) - 1.0)
        max_amp += amplitude
        frequency *= lacunarity
        amplitude *= persistence
    return total / max_amp


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

class DirectionField:
    """Maps normalized coordinates to a unit direction vector."""

    def direction(self, x: float, y: float) -> Vector:
        raise NotImplementedError

    def __call__(self, x: float, y: float) -> Vector:
        return self.direction(x, y)


def _normalize(vx: float, vy: float) -> Vector:
    norm = math.hypot(vx, vy)
    if norm == 0.0 or not math.isfinite(norm):
        # Degenerate; the hatch generator leaves the block blank
        return np.zeros(2)
    return np.array([vx / norm, vy / norm])


class NoiseField(DirectionField):
    """
    Billow noise displaced by turbulence, scaled to an angle.

    The turbulence step offsets the sample point by two independent fBm
    fields before the billow lookup, which breaks up the lattice-aligned
    look of plain gradient noise. Identical seeds give identical fields.
    """

    def __init__(
        self,
        seed: int,
        frequency: float = 1.0,
        octaves: int = 6,
        turbulence_power: float = 1.0,
        turbulence_frequency: float = 1.0,
        turbulence_roughness: int = 3
    ):
        self.seed = int(seed)
        self.frequency = frequency
        self.octaves = octaves
        self.turbulence_power = turbulence_power
        self.turbulence_frequency = turbulence_frequency
        self.turbulence_roughness = turbulence_roughness

    def value(self, x: float, y: float) -> float:
        """Noise value clamped to [-1, 1]."""
        # Fixed fractional offsets keep the displacement lookups off the lattice
        dx = fbm2d(x + 12414.0 / 65536.0, y + 65124.0 / 65536.0, self.seed + 101,
                   octaves=self.turbulence_roughness, frequency=self.turbulence_frequency)
        dy = fbm2d(x + 26519.0 / 65536.0, y + 18128.0 / 65536.0, self.seed + 202,
                   octaves=self.turbulence_roughness, frequency=self.turbulence_frequency)

        n = billow2d(
            x + self.turbulence_power * dx,
            y + self.turbulence_power * dy,
            self.seed,
            octaves=self.octaves,
            frequency=self.frequency,
        )
        return float(np.clip(n[0], -1.0, 1.0))

    def direction(self, x: float, y: float) -> Vector:
        angle = self.value(x, y) * math.pi
        if angle <= -math.pi:
            angle += 2.0 * math.pi
        return np.array([math.cos(angle), math.sin(angle)])


class ConstantField(DirectionField):
    """Same direction everywhere."""

    def __init__(self, angle_degrees: float = 0.0):
        self.angle = math.radians(angle_degrees)
        self._vector = np.array([math.cos(self.angle), math.sin(self.angle)])

    def direction(self, x: float, y: float) -> Vector:
        return self._vector.copy()


class FunctionField(DirectionField):
    """Closed-form field from a plain ``f(x, y) -> (vx, vy)`` function."""

    def __init__(self, func: Callable[[float, float], tuple]):
        self.func = func

    def direction(self, x: float, y: float) -> Vector:
        vx, vy = self.func(x, y)
        return _normalize(float(vx), float(vy))


def _diagonal(x: float, y: float) -> tuple:
    return 1.0, 1.0


def _swirl(x: float, y: float) -> tuple:
    x = x * 10.0 - 5.0
    y = y * 10.0 - 5.0
    return y, math.cos(math.sin(x) - y)


def _vortex(x: float, y: float) -> tuple:
    x = x * 10.0 - 5.0
    y = -y * 10.0 - 5.0
    r = math.sqrt(x * x + y * y)
    return r, y * math.sin(min(y, x) - max(math.cos(x), r))


FIELD_NAMES = ("noise", "constant", "diagonal", "swirl", "vortex")

_CLOSED_FORM: Dict[str, Callable[[float, float], tuple]] = {
    "diagonal": _diagonal,
    "swirl": _swirl,
    "vortex": _vortex,
}


def make_field(name: str, seed: int = 0, angle: Optional[float] = None) -> DirectionField:
    """
    Build a direction field by name.

    Args:
        name: One of FIELD_NAMES
        seed: Seed for the noise field
        angle: Degrees, for the constant field

    Raises:
        ConfigError: If the name is unknown
    """
    if name == "noise":
        return NoiseField(seed)
    if name == "constant":
        return ConstantField(angle or 0.0)
    if name in _CLOSED_FORM:
        return FunctionField(_CLOSED_FORM[name])
    raise ConfigError(f"Unknown direction field '{name}', expected one of {FIELD_NAMES}")
