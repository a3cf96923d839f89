from __future__ import annotations

import math
import uuid

import pytest

from bodies.body import Body, Light
from bodies.palettes import Sunlike, sunlike
from planetsmith.editor import (
    EditorState,
    NewSeed,
    RegenerationThrottle,
    Reposition,
    RepositionFromClick,
    SetLight,
    SetOptions,
    SetPalette,
    SetResolution,
    click_angle,
)
from worldgen.terrain import TerrainOptions


def _state() -> EditorState:
    return EditorState(
        body=Body.orbiting(angle=0.0, distance=1.0e8, seed=uuid.UUID(int=3)),
        resolution=16,
        throttle=RegenerationThrottle(interval=0.25),
    )


def test_throttle_coalesces_requests() -> None:
    t = RegenerationThrottle(interval=0.25)
    assert not t.pending
    assert not t.fire(0.0)

    t.request(0.0)
    assert t.pending
    assert not t.fire(0.1)
    t.request(0.2)
    assert t.coalesced == 1
    assert t.remaining(0.3) == pytest.approx(0.15)
    assert not t.fire(0.3)
    assert t.fire(0.5)
    assert not t.pending
    assert not t.fire(0.6)


def test_click_angle() -> None:
    assert click_angle(100.0, 50.0, 100.0, 100.0) == pytest.approx(0.0)
    assert click_angle(50.0, 100.0, 100.0, 100.0) == pytest.approx(math.pi / 2.0)
    assert click_angle(0.0, 50.0, 100.0, 100.0) == pytest.approx(math.pi)


def test_rapid_commands_render_once() -> None:
    state = _state()
    for i, angle in enumerate([0.1, 0.2, 0.3, 0.4]):
        state.dispatch(Reposition(angle), now=i * 0.05)
    assert state.poll(now=0.2) is None
    assert state.renders == 0

    planet = state.poll(now=1.0)
    assert planet is not None
    assert state.renders == 1
    assert state.planet is planet
    assert planet.rgba.shape == (16, 16, 4)
    assert state.body.angle == pytest.approx(0.4)
    assert state.body.distance == pytest.approx(1.0e8)
    assert state.poll(now=2.0) is None


def test_reposition_from_click_keeps_distance() -> None:
    state = _state()
    state.dispatch(RepositionFromClick(x=50.0, y=0.0, width=100.0, height=100.0), now=0.0)
    assert state.body.angle == pytest.approx(-math.pi / 2.0)
    assert state.body.distance == pytest.approx(1.0e8)


def test_commands_update_state() -> None:
    state = _state()
    state.dispatch(NewSeed(uuid.UUID(int=11)), now=0.0)
    assert state.body.seed == uuid.UUID(int=11)

    state.dispatch(SetLight(None), now=0.0)
    assert state.light is None
    state.dispatch(SetLight(Light(sols=2.0)), now=0.0)
    assert state.light == Light(sols=2.0)

    state.dispatch(SetResolution(24), now=0.0)
    state.dispatch(SetPalette(sunlike()), now=0.0)
    state.dispatch(SetOptions(TerrainOptions(strategy="noise")), now=0.0)

    planet = state.poll(now=1.0)
    assert planet is not None
    assert planet.resolution == 24
    assert all(isinstance(k, Sunlike) for k in planet.stats)


def test_unknown_command() -> None:
    with pytest.raises(TypeError):
        _state().dispatch("spin", now=0.0)  # type: ignore[arg-type]


def test_plot_click_repositions_around_the_light() -> None:
    state = _state()
    state.dispatch(RepositionFromClick.from_plot(0.0, 1.0, 1.3), now=0.0)
    assert state.body.angle == pytest.approx(math.pi / 2.0)
    state.dispatch(RepositionFromClick.from_plot(-1.0, 0.0, 1.3), now=0.1)
    assert state.body.angle == pytest.approx(math.pi)
    assert state.body.distance == pytest.approx(1.0e8)
    assert state.throttle.pending
