"""Editor state driven by explicit commands.

The front-end never touches the body directly: it dispatches commands, and a
throttle decides when the accumulated changes are turned into one render.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import Union

import structlog

from bodies.body import Body, Light, set_origin_by_angle
from bodies.palettes import Palette
from viz.render import GeneratedPlanet, generate
from worldgen.terrain import TerrainOptions

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NewSeed:
    seed: uuid.UUID | None = None


@dataclass(frozen=True)
class Reposition:
    angle: float


@dataclass(frozen=True)
class RepositionFromClick:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_plot(cls, x: float, y: float, extent: float) -> RepositionFromClick:
        """Click at data coordinates of a square plot spanning +-extent around the light."""
        extent = float(extent)
        return cls(x=float(x) + extent, y=float(y) + extent, width=2.0 * extent, height=2.0 * extent)


@dataclass(frozen=True)
class SetLight:
    light: Light | None


@dataclass(frozen=True)
class SetResolution:
    resolution: int


@dataclass(frozen=True)
class SetPalette:
    palette: Palette


@dataclass(frozen=True)
class SetOptions:
    options: TerrainOptions


Command = Union[
    NewSeed, Reposition, RepositionFromClick, SetLight, SetResolution, SetPalette, SetOptions
]


def click_angle(x: float, y: float, width: float, height: float) -> float:
    """Angle of a click relative to the center of a width x height view."""
    return math.atan2(float(y) - float(height) / 2.0, float(x) - float(width) / 2.0)


@dataclass
class RegenerationThrottle:
    """Coalesces regeneration requests that arrive within `interval` seconds.

    A request arms the throttle; further requests push the deadline back. The
    throttle fires once the deadline passes without another request.
    """

    interval: float = 0.25
    deadline: float | None = None
    coalesced: int = 0

    def request(self, now: float) -> None:
        if self.deadline is not None:
            self.coalesced += 1
        self.deadline = float(now) + float(self.interval)

    @property
    def pending(self) -> bool:
        return self.deadline is not None

    def remaining(self, now: float) -> float:
        if self.deadline is None:
            return 0.0
        return max(self.deadline - float(now), 0.0)

    def fire(self, now: float) -> bool:
        if self.deadline is None or float(now) < self.deadline:
            return False
        self.deadline = None
        self.coalesced = 0
        return True


@dataclass
class EditorState:
    body: Body
    resolution: int = 128
    light: Light | None = field(default_factory=Light)
    options: TerrainOptions = field(default_factory=TerrainOptions)
    throttle: RegenerationThrottle = field(default_factory=RegenerationThrottle)
    planet: GeneratedPlanet | None = None
    renders: int = 0

    def dispatch(self, command: Command, now: float) -> None:
        if isinstance(command, NewSeed):
            self.body.reseed(command.seed)
        elif isinstance(command, Reposition):
            set_origin_by_angle(self.body, command.angle, self.body.distance)
        elif isinstance(command, RepositionFromClick):
            angle = click_angle(command.x, command.y, command.width, command.height)
            set_origin_by_angle(self.body, angle, self.body.distance)
        elif isinstance(command, SetLight):
            self.light = command.light
        elif isinstance(command, SetResolution):
            self.resolution = int(command.resolution)
        elif isinstance(command, SetPalette):
            self.body.palette = command.palette
        elif isinstance(command, SetOptions):
            self.options = command.options
        else:
            raise TypeError(f"unknown editor command: {command!r}")
        self.throttle.request(now)

    def poll(self, now: float) -> GeneratedPlanet | None:
        """Render if the throttle window has elapsed; returns the new planet."""
        if not self.throttle.fire(now):
            return None
        return self.regenerate()

    def regenerate(self) -> GeneratedPlanet:
        self.planet = generate(self.body, self.resolution, self.light, self.options)
        self.renders += 1
        logger.debug("editor.regenerated", seed=str(self.body.seed), renders=self.renders)
        return self.planet
