from __future__ import annotations

import uuid

import numpy as np

# Eight unit gradients: the axes plus the diagonals.
_GRADIENTS = np.array(
    [
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
    ],
    dtype=np.float64,
)
_GRADIENTS /= np.linalg.norm(_GRADIENTS, axis=1, keepdims=True)


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve used by Improved Perlin Noise (2002)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def seed_to_int(seed: uuid.UUID | int) -> int:
    if isinstance(seed, uuid.UUID):
        return seed.int
    return int(seed)


def permutation_table(seed: uuid.UUID | int) -> np.ndarray:
    rng = np.random.default_rng(seed_to_int(seed))
    p = rng.permutation(256).astype(np.int32)
    return np.concatenate([p, p])


class SurfaceNoise:
    """Seeded 2D Perlin lattice noise over a body's surface plane."""

    def __init__(
        self,
        seed: uuid.UUID | int,
        *,
        octaves: int = 4,
        lacunarity: float = 2.0,
        persistence: float = 0.5,
    ):
        self.seed = seed_to_int(seed)
        self.perm = permutation_table(self.seed)
        self.octaves = max(int(octaves), 1)
        self.lacunarity = float(lacunarity)
        self.persistence = float(persistence)

    def _gradient_dot(self, h: np.ndarray, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        g = _GRADIENTS[h & 7]
        return g[..., 0] * dx + g[..., 1] * dy

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Single-octave Perlin noise, roughly in [-1, 1]."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        x_floor = np.floor(x)
        y_floor = np.floor(y)
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255
        xf = x - x_floor
        yf = y - y_floor

        p = self.perm
        left = p[xi]
        right = p[(xi + 1) & 255]
        h00 = p[left + yi]
        h01 = p[left + ((yi + 1) & 255)]
        h10 = p[right + yi]
        h11 = p[right + ((yi + 1) & 255)]

        d00 = self._gradient_dot(h00, xf, yf)
        d10 = self._gradient_dot(h10, xf - 1.0, yf)
        d01 = self._gradient_dot(h01, xf, yf - 1.0)
        d11 = self._gradient_dot(h11, xf - 1.0, yf - 1.0)

        u = fade(xf)
        v = fade(yf)
        return lerp(lerp(d00, d10, u), lerp(d01, d11, u), v)

    def fbm(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Fractal sum of octaves, normalized by the total amplitude."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        amp = 1.0
        freq = 1.0
        amp_sum = 0.0
        total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
        for _ in range(self.octaves):
            total += amp * self.noise(x * freq, y * freq)
            amp_sum += amp
            amp *= self.persistence
            freq *= self.lacunarity

        if amp_sum == 0.0:
            return total
        return total / amp_sum
