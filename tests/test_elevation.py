from __future__ import annotations

import uuid

import numpy as np
import pytest

from bodies.errors import PreconditionError
from worldgen.elevation import (
    MAX_COMPLEXITY,
    MIN_COMPLEXITY,
    NoiseElevation,
    PointIndex,
    ScatteredElevation,
)


def test_sampling_needs_three_points() -> None:
    field = ScatteredElevation.from_points(np.array([[0.0, 0.0], [1.0, 1.0]]), np.array([1.0, 2.0]))
    with pytest.raises(PreconditionError):
        field.elevation_at(np.array([[0.5, 0.5]]))


def test_distance_share_weighting() -> None:
    locations = np.array(
        [
            [1.0, 0.0],
            [0.0, 2.0],
            [-3.0, 0.0],
            [100.0, 100.0],
        ]
    )
    elevations = np.array([10.0, 20.0, 30.0, 1000.0])
    field = ScatteredElevation.from_points(locations, elevations)
    out = field.elevation_at(np.array([[0.0, 0.0]]))
    # distances 1, 2, 3: weights 1/6, 2/6, 3/6 (not inverse distance)
    assert out[0] == pytest.approx((1 * 10.0 + 2 * 20.0 + 3 * 30.0) / 6.0)


def test_sampling_accepts_single_point_shape() -> None:
    field = ScatteredElevation.from_points(
        np.array([[0.0, 0.0], [4.0, 0.0], [0.0, 4.0]]), np.array([5.0, 5.0, 5.0])
    )
    out = field.elevation_at(np.array([1.0, 1.0]))
    assert out.shape == (1,)
    assert out[0] == pytest.approx(5.0)


def test_point_index_nearest_matches_brute_force() -> None:
    rng = np.random.default_rng(0)
    index = PointIndex(4, rebuild_every=16)
    pts = rng.uniform(-100.0, 100.0, size=(200, 2))
    for x, y in pts:
        index.insert(float(x), float(y), 0.0)
    assert len(index) == 200

    for q in rng.uniform(-120.0, 120.0, size=(50, 2)):
        d, i = index.nearest(float(q[0]), float(q[1]))
        brute = np.hypot(pts[:, 0] - q[0], pts[:, 1] - q[1])
        assert d == pytest.approx(float(np.min(brute)))
        assert i == int(np.argmin(brute))


def test_point_index_empty() -> None:
    index = PointIndex()
    assert index.nearest(0.0, 0.0) is None
    with pytest.raises(PreconditionError):
        index.query(np.zeros((1, 2)), 1)


def test_scattered_generation_is_deterministic() -> None:
    kw = dict(radius=6371.0, chaos=1.5, elevation_range=(-1200.0, 1900.0))
    a = ScatteredElevation.generate(rng=np.random.default_rng(4), **kw)
    b = ScatteredElevation.generate(rng=np.random.default_rng(4), **kw)
    n = a.complexity
    assert n == b.complexity
    assert MIN_COMPLEXITY <= n < MAX_COMPLEXITY
    assert np.array_equal(a.index.locations[:n], b.index.locations[:n])
    assert np.array_equal(a.index.elevations[:n], b.index.elevations[:n])


def test_scattered_generation_respects_bounds() -> None:
    chaos = 1.5
    lo, hi = -100.0, 100.0
    field = ScatteredElevation.generate(
        radius=500.0, chaos=chaos, elevation_range=(lo, hi), rng=np.random.default_rng(7)
    )
    n = field.complexity
    loc = field.index.locations[:n]
    elev = field.index.elevations[:n]

    assert bool(np.all(np.abs(loc) <= 500.0))
    assert bool(np.all((elev >= lo) & (elev <= hi)))
    assert -chaos <= elev[0] <= chaos

    for i in range(1, n):
        d = np.hypot(loc[:i, 0] - loc[i, 0], loc[:i, 1] - loc[i, 1])
        j = int(np.argmin(d))
        assert abs(elev[i] - elev[j]) <= chaos * d[j] + 1e-9


def test_first_point_falls_back_to_range() -> None:
    field = ScatteredElevation.generate(
        radius=10.0, chaos=1.0, elevation_range=(500.0, 600.0), rng=np.random.default_rng(1)
    )
    assert 500.0 <= field.index.elevations[0] <= 600.0


def test_noise_elevation_range_and_determinism() -> None:
    seed = uuid.UUID(int=12345)
    kw = dict(radius=6371.0, chaos=1.7, elevation_range=(-1000.0, 1700.0))
    a = NoiseElevation(seed=seed, **kw)
    b = NoiseElevation(seed=seed, **kw)
    rng = np.random.default_rng(0)
    pts = rng.uniform(-6371.0, 6371.0, size=(500, 2))
    ea = a.elevation_at(pts)
    assert np.array_equal(ea, b.elevation_at(pts))
    assert bool(np.all((ea >= -1000.0) & (ea <= 1700.0)))
    assert float(np.std(ea)) > 0.0


def test_noise_elevation_changes_with_seed() -> None:
    kw = dict(radius=6371.0, chaos=1.7, elevation_range=(-1000.0, 1700.0))
    pts = np.random.default_rng(0).uniform(-6371.0, 6371.0, size=(64, 2))
    a = NoiseElevation(seed=uuid.UUID(int=1), **kw).elevation_at(pts)
    b = NoiseElevation(seed=uuid.UUID(int=2), **kw).elevation_at(pts)
    assert not np.allclose(a, b)


def test_noise_elevation_is_continuous() -> None:
    field = NoiseElevation(
        seed=uuid.UUID(int=3), radius=1000.0, chaos=1.5, elevation_range=(0.0, 100.0)
    )
    pts = np.random.default_rng(2).uniform(-1000.0, 1000.0, size=(100, 2))
    step = field.elevation_at(pts + 1e-3) - field.elevation_at(pts)
    assert float(np.max(np.abs(step))) < 0.1
