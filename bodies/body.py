from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field

import numpy as np

from bodies.colors import RGB, srgb_to_linear
from bodies.errors import ConfigurationError
from bodies.palettes import Palette, earthlike

Point = tuple[float, float]

# About one astronomical unit out, at -135 degrees.
DEFAULT_ANGLE = -2.35619
DEFAULT_DISTANCE = 150_200_000.0


def calculate_origin(angle: float, distance: float) -> Point:
    """Place a body `distance` km from the light, rotated by `angle` radians."""
    angle = float(angle)
    distance = float(distance)
    return (distance * math.cos(angle), distance * math.sin(angle))


def _check_length(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise ConfigurationError(f"{name} must be a finite positive length (got {value})")
    return value


@dataclass(frozen=True)
class Light:
    """A directional light source sitting at the system origin."""

    color: RGB = (1.0, 1.0, 1.0)
    sols: float = 1.0

    def __post_init__(self) -> None:
        sols = float(self.sols)
        if not math.isfinite(sols) or sols < 0.0:
            raise ConfigurationError(f"light intensity must be >= 0 (got {self.sols})")
        if len(self.color) != 3 or not all(0.0 <= float(c) <= 1.0 for c in self.color):
            raise ConfigurationError(f"light color must be an sRGB triple in [0, 1]: {self.color}")
        object.__setattr__(self, "sols", sols)
        object.__setattr__(self, "color", tuple(float(c) for c in self.color))

    def linear(self) -> np.ndarray:
        return srgb_to_linear(np.array(self.color, dtype=np.float64))


@dataclass
class Body:
    """A planet or star: seed, placement relative to the light, size, palette."""

    seed: uuid.UUID = field(default_factory=uuid.uuid4)
    origin: Point = field(default_factory=lambda: calculate_origin(DEFAULT_ANGLE, DEFAULT_DISTANCE))
    radius: float = 6371.0
    palette: Palette = field(default_factory=earthlike)

    def __post_init__(self) -> None:
        if not isinstance(self.seed, uuid.UUID):
            self.seed = uuid.UUID(str(self.seed))
        self.radius = _check_length("radius", self.radius)
        x, y = (float(v) for v in self.origin)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ConfigurationError(f"origin must be finite (got {self.origin})")
        self.origin = (x, y)

    @classmethod
    def orbiting(
        cls,
        *,
        angle: float,
        distance: float,
        radius: float = 6371.0,
        palette: Palette | None = None,
        seed: uuid.UUID | None = None,
    ) -> Body:
        return cls(
            seed=seed if seed is not None else uuid.uuid4(),
            origin=calculate_origin(angle, _check_length("distance", distance)),
            radius=radius,
            palette=palette if palette is not None else earthlike(),
        )

    @property
    def distance(self) -> float:
        return math.hypot(*self.origin)

    @property
    def angle(self) -> float:
        return math.atan2(self.origin[1], self.origin[0])

    def reseed(self, seed: uuid.UUID | None = None) -> uuid.UUID:
        self.seed = seed if seed is not None else uuid.uuid4()
        return self.seed


def set_origin_by_angle(body: Body, angle: float, distance: float) -> None:
    body.origin = calculate_origin(angle, _check_length("distance", distance))
