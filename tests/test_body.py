from __future__ import annotations

import math
import uuid

import pytest

from bodies.body import Body, Light, calculate_origin, set_origin_by_angle
from bodies.errors import ConfigurationError
from bodies.palettes import sunlike
from viz.render import generate


def test_calculate_origin() -> None:
    assert calculate_origin(0.0, 10.0) == (10.0, 0.0)
    x, y = calculate_origin(math.pi / 2.0, 10.0)
    assert x == pytest.approx(0.0, abs=1e-12)
    assert y == pytest.approx(10.0)

    x, y = calculate_origin(-2.35619, 150_200_000.0)
    assert x == pytest.approx(150_200_000.0 * math.cos(-2.35619))
    assert y == pytest.approx(150_200_000.0 * math.sin(-2.35619))
    assert x < 0.0 and y < 0.0


def test_set_origin_by_angle_mutates_body() -> None:
    body = Body(origin=(5.0, 0.0))
    set_origin_by_angle(body, math.pi, 5.0)
    assert body.origin[0] == pytest.approx(-5.0)
    assert body.distance == pytest.approx(5.0)
    assert body.angle == pytest.approx(math.pi)


def test_orbiting_constructor() -> None:
    seed = uuid.UUID(int=42)
    body = Body.orbiting(angle=0.5, distance=1000.0, radius=50.0, palette=sunlike(), seed=seed)
    assert body.seed == seed
    assert body.distance == pytest.approx(1000.0)
    assert body.angle == pytest.approx(0.5)
    assert body.palette.name == "sunlike"


def test_reseed_assigns_new_seed() -> None:
    body = Body(seed=uuid.UUID(int=0))
    new = body.reseed()
    assert body.seed == new
    assert new != uuid.UUID(int=0)
    assert body.reseed(uuid.UUID(int=7)) == uuid.UUID(int=7)


def test_seed_string_is_parsed() -> None:
    body = Body(seed="00000000-0000-0000-0000-000000000001")  # type: ignore[arg-type]
    assert body.seed.int == 1


@pytest.mark.parametrize("radius", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_radius(radius: float) -> None:
    with pytest.raises(ConfigurationError):
        Body(radius=radius)


def test_invalid_distance() -> None:
    with pytest.raises(ConfigurationError):
        Body.orbiting(angle=0.0, distance=0.0)
    with pytest.raises(ConfigurationError):
        set_origin_by_angle(Body(), 0.0, -3.0)


def test_light_validation() -> None:
    assert Light().sols == 1.0
    with pytest.raises(ConfigurationError):
        Light(sols=-0.5)
    with pytest.raises(ConfigurationError):
        Light(color=(2.0, 0.0, 0.0))


def test_default_body_sits_one_au_out() -> None:
    body = Body()
    assert body.distance == pytest.approx(150_200_000.0)
    assert body.angle == pytest.approx(-2.35619)


@pytest.mark.parametrize("resolution", [16, 64])
def test_default_body_renders_lit(resolution: int) -> None:
    planet = generate(Body(seed=uuid.UUID(int=0)), resolution, Light())
    assert planet.rgba.shape == (resolution, resolution, 4)
    assert planet.rgba[resolution // 2, resolution // 2, 3] == 255
    assert sum(planet.stats.values()) > 0
