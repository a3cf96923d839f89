from __future__ import annotations

import uuid
from typing import Protocol

import numpy as np
import structlog
from scipy.spatial import cKDTree

from bodies.errors import PreconditionError
from worldgen.noise import SurfaceNoise

logger = structlog.get_logger(__name__)

NEIGHBORS = 3
MIN_COMPLEXITY = 50
MAX_COMPLEXITY = 1000


class ElevationSource(Protocol):
    def elevation_at(self, points: np.ndarray) -> np.ndarray:  # pragma: no cover
        ...


def _as_points(points: np.ndarray) -> np.ndarray:
    p = np.asarray(points, dtype=np.float64)
    if p.ndim == 1:
        p = p.reshape(1, 2)
    if p.ndim != 2 or p.shape[1] != 2:
        raise ValueError("points must have shape (n, 2)")
    return p


class PointIndex:
    """Append-only 2D point index.

    Points are queried through a KD-tree; the tree is rebuilt once the unindexed
    tail grows past `rebuild_every`, and the tail is scanned directly until then.
    """

    def __init__(self, capacity: int = 0, *, rebuild_every: int = 64):
        capacity = max(int(capacity), 1)
        self.locations = np.empty((capacity, 2), dtype=np.float64)
        self.elevations = np.empty(capacity, dtype=np.float64)
        self.count = 0
        self.rebuild_every = max(int(rebuild_every), 1)
        self._tree: cKDTree | None = None
        self._indexed = 0

    def __len__(self) -> int:
        return self.count

    def _grow(self) -> None:
        size = self.locations.shape[0] * 2
        locations = np.empty((size, 2), dtype=np.float64)
        elevations = np.empty(size, dtype=np.float64)
        locations[: self.count] = self.locations[: self.count]
        elevations[: self.count] = self.elevations[: self.count]
        self.locations = locations
        self.elevations = elevations

    def _rebuild(self) -> None:
        self._tree = cKDTree(self.locations[: self.count])
        self._indexed = self.count

    def insert(self, x: float, y: float, elevation: float) -> None:
        if self.count == self.locations.shape[0]:
            self._grow()
        self.locations[self.count] = (x, y)
        self.elevations[self.count] = elevation
        self.count += 1
        if self.count - self._indexed >= self.rebuild_every:
            self._rebuild()

    def nearest(self, x: float, y: float) -> tuple[float, int] | None:
        """Distance to and index of the closest stored point, if any."""
        if self.count == 0:
            return None

        best_d = np.inf
        best_i = -1
        if self._tree is not None and self._indexed > 0:
            d, i = self._tree.query((x, y), k=1)
            best_d, best_i = float(d), int(i)

        tail = self.locations[self._indexed : self.count]
        if tail.shape[0]:
            d = np.hypot(tail[:, 0] - x, tail[:, 1] - y)
            j = int(np.argmin(d))
            if float(d[j]) < best_d:
                best_d, best_i = float(d[j]), self._indexed + j

        return best_d, best_i

    def query(self, points: np.ndarray, k: int) -> tuple[np.ndarray, np.ndarray]:
        if self.count == 0:
            raise PreconditionError("cannot query an empty point index")
        if self._tree is None or self._indexed != self.count:
            self._rebuild()
        d, i = self._tree.query(_as_points(points), k=int(k))
        return np.asarray(d, dtype=np.float64), np.asarray(i, dtype=np.int64)


class ScatteredElevation:
    """Elevation from scattered sample points, blended over the 3 nearest."""

    def __init__(self, index: PointIndex):
        self.index = index

    @classmethod
    def from_points(cls, locations: np.ndarray, elevations: np.ndarray) -> ScatteredElevation:
        locations = _as_points(locations)
        elevations = np.asarray(elevations, dtype=np.float64).reshape(-1)
        if locations.shape[0] != elevations.shape[0]:
            raise ValueError("locations and elevations must have the same length")
        index = PointIndex(locations.shape[0])
        for (x, y), e in zip(locations, elevations):
            index.insert(float(x), float(y), float(e))
        return cls(index)

    @classmethod
    def generate(
        cls,
        *,
        radius: float,
        chaos: float,
        elevation_range: tuple[float, float],
        rng: np.random.Generator,
    ) -> ScatteredElevation:
        """Random-walk elevations over a square of half-width `radius`.

        Each new point draws its elevation within ``chaos * distance`` of its
        nearest existing neighbour, clipped to `elevation_range`.
        """

        radius = float(radius)
        chaos = float(chaos)
        lo, hi = (float(elevation_range[0]), float(elevation_range[1]))

        complexity = int(rng.integers(MIN_COMPLEXITY, MAX_COMPLEXITY))
        index = PointIndex(complexity)

        for _ in range(complexity):
            x = float(rng.uniform(-radius, radius))
            y = float(rng.uniform(-radius, radius))
            nearest = index.nearest(x, y)
            if nearest is None:
                low, high = -chaos, chaos
            else:
                distance, j = nearest
                neighbor = float(index.elevations[j])
                low, high = neighbor - distance * chaos, neighbor + distance * chaos

            low = max(low, lo)
            high = min(high, hi)
            if low > high:
                low, high = lo, hi
            index.insert(x, y, float(rng.uniform(low, high)))

        logger.debug(
            "elevation.scattered",
            complexity=complexity,
            chaos=chaos,
            elevation_min=float(np.min(index.elevations[: index.count])),
            elevation_max=float(np.max(index.elevations[: index.count])),
        )
        return cls(index)

    @property
    def complexity(self) -> int:
        return len(self.index)

    def elevation_at(self, points: np.ndarray) -> np.ndarray:
        """Blend the 3 nearest elevations, each weighted by its own distance share.

        The weight is ``distance_i / sum(distances)``, not inverse distance; the
        farthest of the three contributes the most.
        """

        if len(self.index) < NEIGHBORS:
            raise PreconditionError(
                f"sampling needs at least {NEIGHBORS} points, index holds {len(self.index)}"
            )
        p = _as_points(points)
        if p.shape[0] == 0:
            return np.zeros(0, dtype=np.float64)

        d, i = self.index.query(p, NEIGHBORS)
        e = self.index.elevations[i]
        total = np.sum(d, axis=1)
        out = np.empty(p.shape[0], dtype=np.float64)

        ok = total > 0.0
        out[ok] = np.sum((d[ok] / total[ok, None]) * e[ok], axis=1)
        # Only reachable when the query sits on three coincident points.
        out[~ok] = np.mean(e[~ok], axis=1)
        return out


class NoiseElevation:
    """Elevation read straight from coherent noise, no index required."""

    def __init__(
        self,
        *,
        seed: uuid.UUID | int,
        radius: float,
        chaos: float,
        elevation_range: tuple[float, float],
        octaves: int = 4,
    ):
        self.radius = float(radius)
        self.chaos = float(chaos)
        self.elevation_range = (float(elevation_range[0]), float(elevation_range[1]))
        self.noise = SurfaceNoise(seed, octaves=int(octaves))

    def elevation_at(self, points: np.ndarray) -> np.ndarray:
        p = _as_points(points)
        scaled = p / self.radius * self.chaos
        n = self.noise.fbm(scaled[:, 0], scaled[:, 1])
        t = np.clip((n + 1.0) * 0.5, 0.0, 1.0)
        lo, hi = self.elevation_range
        return lo + t * (hi - lo)
