from __future__ import annotations

import uuid

import numpy as np

from worldgen.noise import SurfaceNoise, fade, lerp, permutation_table


def test_fade_endpoints() -> None:
    out = fade(np.array([0.0, 1.0], dtype=np.float64))
    assert out[0] == 0.0
    assert out[1] == 1.0


def test_lerp_basic() -> None:
    out = lerp(np.array([0.0, 10.0]), np.array([10.0, 20.0]), np.array([0.0, 0.5]))
    assert np.allclose(out, np.array([0.0, 15.0]))


def test_permutation_accepts_uuid_seed() -> None:
    seed = uuid.UUID("00000000-0000-0000-0000-000000000000")
    p = permutation_table(seed)
    assert p.shape == (512,)
    assert np.array_equal(p[:256], p[256:])
    assert sorted(p[:256].tolist()) == list(range(256))


def test_noise_is_zero_on_lattice() -> None:
    n = SurfaceNoise(7)
    x = np.array([0.0, 1.0, -3.0, 17.0])
    y = np.array([0.0, 4.0, 2.0, -8.0])
    assert np.allclose(n.noise(x, y), 0.0)
    assert np.allclose(n.fbm(x, y), 0.0)


def test_noise_deterministic_and_bounded() -> None:
    a = SurfaceNoise(uuid.UUID(int=99))
    b = SurfaceNoise(uuid.UUID(int=99))
    xg, yg = np.meshgrid(np.linspace(-3, 3, 48), np.linspace(-3, 3, 48))
    za = a.fbm(xg, yg)
    assert za.shape == xg.shape
    assert np.array_equal(za, b.fbm(xg, yg))
    assert float(np.max(np.abs(za))) < 1.0
