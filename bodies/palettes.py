from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

import numpy as np

from bodies.colors import RGB, rgb8, srgb_to_linear
from bodies.errors import ConfigurationError, PreconditionError

K = TypeVar("K", bound=Hashable)


class Earthlike(enum.Enum):
    DEEP_OCEAN = "DeepOcean"
    SHALLOW_OCEAN = "ShallowOcean"
    BEACH = "Beach"
    GRASS = "Grass"
    FOREST = "Forest"
    MOUNTAIN = "Mountain"
    SNOW = "Snow"


class Sunlike(enum.Enum):
    DEEP_BASE = "DeepBase"
    BRIGHT_MIDDLE = "BrightMiddle"
    HOT_TOP = "HotTop"


@total_ordering
@dataclass(frozen=True, eq=False)
class ElevationColor(Generic[K]):
    """A (category, sRGB color, elevation) anchor.

    Anchors order and compare by elevation only; the category and color do not
    take part in equality.
    """

    kind: K
    color: RGB
    elevation: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElevationColor):
            return NotImplemented
        return self.elevation == other.elevation

    def __lt__(self, other: ElevationColor) -> bool:
        if not isinstance(other, ElevationColor):
            return NotImplemented
        return self.elevation < other.elevation

    def __hash__(self) -> int:
        return hash(self.elevation)

    @property
    def rgb8(self) -> tuple[int, int, int]:
        r, g, b = (int(math.floor(min(max(c, 0.0), 1.0) * 255.0 + 1e-9)) for c in self.color)
        return (r, g, b)

    def linear(self) -> np.ndarray:
        return srgb_to_linear(np.array(self.color, dtype=np.float64))


@dataclass(frozen=True)
class Palette(Generic[K]):
    """Ascending-by-elevation anchors plus the chaos ceiling for the body type."""

    anchors: tuple[ElevationColor[K], ...]
    max_chaos: float = 2.0
    name: str = "custom"
    kinds: tuple[K, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        anchors = tuple(self.anchors)
        if not anchors:
            raise PreconditionError("a palette needs at least one anchor")
        for a in anchors:
            if not math.isfinite(float(a.elevation)):
                raise ConfigurationError(f"palette elevation must be finite: {a.elevation}")
        if not (math.isfinite(float(self.max_chaos)) and float(self.max_chaos) > 1.0):
            raise ConfigurationError("max_chaos must be finite and > 1.0")
        # Stable sort keeps author order for equal elevations.
        object.__setattr__(self, "anchors", tuple(sorted(anchors)))
        if not self.kinds:
            seen: dict[K, None] = {}
            for a in self.anchors:
                seen.setdefault(a.kind, None)
            object.__setattr__(self, "kinds", tuple(seen))

    def __len__(self) -> int:
        return len(self.anchors)

    def __iter__(self) -> Iterator[ElevationColor[K]]:
        return iter(self.anchors)

    def __getitem__(self, index: int) -> ElevationColor[K]:
        return self.anchors[index]

    @property
    def min_elevation(self) -> float:
        return float(self.anchors[0].elevation)

    @property
    def max_elevation(self) -> float:
        return float(self.anchors[-1].elevation)


def palette_from(
    entries: Iterable[tuple[K, tuple[int, int, int], float]],
    *,
    max_chaos: float = 2.0,
    name: str = "custom",
) -> Palette[K]:
    anchors = tuple(
        ElevationColor(kind=kind, color=rgb8(*color), elevation=float(elevation))
        for kind, color, elevation in entries
    )
    return Palette(anchors=anchors, max_chaos=float(max_chaos), name=str(name))


def earthlike() -> Palette[Earthlike]:
    return palette_from(
        [
            (Earthlike.DEEP_OCEAN, (19, 30, 180), -1000.0),
            (Earthlike.SHALLOW_OCEAN, (98, 125, 223), -100.0),
            (Earthlike.BEACH, (209, 207, 169), 0.0),
            (Earthlike.GRASS, (56, 156, 48), 50.0),
            (Earthlike.FOREST, (21, 96, 34), 400.0),
            (Earthlike.MOUNTAIN, (122, 114, 104), 1000.0),
            (Earthlike.SNOW, (238, 246, 245), 1700.0),
        ],
        max_chaos=2.0,
        name="earthlike",
    )


def sunlike() -> Palette[Sunlike]:
    return palette_from(
        [
            (Sunlike.DEEP_BASE, (196, 58, 10), -600.0),
            (Sunlike.BRIGHT_MIDDLE, (247, 153, 28), 0.0),
            (Sunlike.HOT_TOP, (255, 236, 170), 600.0),
        ],
        max_chaos=4.0,
        name="sunlike",
    )


PRESETS = {
    "earthlike": earthlike,
    "sunlike": sunlike,
}


def preset(name: str) -> Palette:
    try:
        return PRESETS[str(name)]()
    except KeyError:
        raise ConfigurationError(
            f"unknown palette: {name} (choose from {', '.join(sorted(PRESETS))})"
        ) from None
