from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Hashable, TypeVar

import numpy as np
import structlog

from bodies.body import Body, Light
from bodies.colors import linear_to_srgb, srgb_to_linear, to_rgb8
from bodies.errors import ConfigurationError, PreconditionError
from worldgen.elevation import ElevationSource, NoiseElevation, ScatteredElevation
from worldgen.gradient import ExpandedGradient, expand, target_range

logger = structlog.get_logger(__name__)

K = TypeVar("K", bound=Hashable)

STRATEGIES = ("scattered", "noise")
TIE_BREAKS = ("nearest", "weighted")
MIN_CHAOS = 1.0
# Spreads the terminator so it lands near the visible edge, not on the silhouette.
TERMINATOR_SPREAD = 1.4


@dataclass(frozen=True)
class TerrainOptions:
    strategy: str = "scattered"
    tie_break: str = "nearest"
    octaves: int = 4

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"unknown elevation strategy: {self.strategy} (choose from {', '.join(STRATEGIES)})"
            )
        if self.tie_break not in TIE_BREAKS:
            raise ConfigurationError(
                f"unknown tie-break: {self.tie_break} (choose from {', '.join(TIE_BREAKS)})"
            )
        if int(self.octaves) < 1:
            raise ConfigurationError("octaves must be >= 1")


def resolve_indices(
    gradient_elevations: np.ndarray,
    elevations: np.ndarray,
    *,
    tie_break: str = "nearest",
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Map elevations to gradient indices by binary search.

    Exact hits keep their index. Below the first entry clamps to 0 and above
    the last clamps to the final entry. Otherwise the closer neighbour wins,
    ties going to the lower one; with ``tie_break="weighted"`` the upper
    neighbour is picked with probability ``gap_below / (gap_below + gap_above)``.
    """

    g = np.asarray(gradient_elevations, dtype=np.float64)
    e = np.asarray(elevations, dtype=np.float64)
    n = g.shape[0]
    if n == 0:
        raise PreconditionError("cannot resolve against an empty gradient")

    i = np.searchsorted(g, e, side="left")
    idx = np.minimum(i, n - 1)
    exact = (i < n) & (g[idx] == e)

    between = (~exact) & (i > 0) & (i < n)
    above = np.where(between, g[idx] - e, 0.0)
    below = np.where(between, e - g[np.maximum(i - 1, 0)], 0.0)

    if tie_break == "weighted":
        if rng is None:
            raise PreconditionError("weighted tie-break needs a random stream")
        draws = rng.random(e.shape)
        span = above + below
        p_upper = np.divide(below, span, out=np.zeros_like(span), where=span > 0.0)
        pick_upper = draws < p_upper
    else:
        pick_upper = above < below

    out = np.where(between & ~pick_upper, i - 1, idx)
    return out.astype(np.int64)


def light_multiplier(
    points: np.ndarray,
    *,
    origin: tuple[float, float],
    radius: float,
    light: Light,
) -> np.ndarray:
    """Per-point linear RGB factor from a light sitting at the system origin."""

    p = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    radius = float(radius)

    space = p + np.asarray(origin, dtype=np.float64)
    distance_to_light = np.hypot(space[:, 0], space[:, 1])
    if np.any(distance_to_light == 0.0):
        raise PreconditionError("a surface point coincides with the light source")

    angle_to_light = np.arctan2(space[:, 1], space[:, 0]) + math.pi
    focus_x = radius * np.cos(angle_to_light)
    focus_y = radius * np.sin(angle_to_light)
    distance_from_focus = np.hypot(p[:, 0] - focus_x, p[:, 1] - focus_y)

    distance_dimming = 1.0 - 1.0 / distance_to_light
    sphere_dimming = distance_from_focus / (radius * TERMINATOR_SPREAD)
    factor = np.minimum(float(light.sols) * distance_dimming * sphere_dimming, 1.0)

    lit = light.linear()[None, :] - factor[:, None]
    return np.maximum(lit, 0.0)


class Terrain(Generic[K]):
    """Generated surface for one body: elevation source, gradient, placement."""

    def __init__(
        self,
        *,
        surface_chaos: float,
        origin: tuple[float, float],
        radius: float,
        source: ElevationSource,
        gradient: ExpandedGradient[K],
        elevation_range: tuple[float, float],
        tie_break: str = "nearest",
        rng: np.random.Generator | None = None,
    ):
        self.surface_chaos = float(surface_chaos)
        self.origin = (float(origin[0]), float(origin[1]))
        self.radius = float(radius)
        self.source = source
        self.gradient = gradient
        self.elevation_range = elevation_range
        self.tie_break = str(tie_break)
        self.rng = rng

    @classmethod
    def generate(cls, body: Body, options: TerrainOptions | None = None) -> Terrain:
        options = options or TerrainOptions()
        rng = np.random.default_rng(body.seed.int)
        palette = body.palette

        elevation_range = target_range(palette, rng)
        surface_chaos = float(rng.uniform(MIN_CHAOS, palette.max_chaos))
        gradient = ExpandedGradient.from_anchors(
            expand(palette.anchors, elevation_range, rng), palette.kinds
        )

        source: ElevationSource
        if options.strategy == "noise":
            source = NoiseElevation(
                seed=body.seed,
                radius=body.radius,
                chaos=surface_chaos,
                elevation_range=elevation_range,
                octaves=options.octaves,
            )
        else:
            source = ScatteredElevation.generate(
                radius=body.radius,
                chaos=surface_chaos,
                elevation_range=elevation_range,
                rng=rng,
            )

        logger.debug(
            "terrain.generated",
            seed=str(body.seed),
            palette=palette.name,
            strategy=options.strategy,
            surface_chaos=surface_chaos,
            elevation_range=elevation_range,
            gradient_size=len(gradient),
            complexity=source.complexity if isinstance(source, ScatteredElevation) else None,
        )
        return cls(
            surface_chaos=surface_chaos,
            origin=body.origin,
            radius=body.radius,
            source=source,
            gradient=gradient,
            elevation_range=elevation_range,
            tie_break=options.tie_break,
            rng=rng,
        )

    def elevation_at(self, points: np.ndarray) -> np.ndarray:
        return self.source.elevation_at(points)

    def resolve(self, elevations: np.ndarray) -> np.ndarray:
        return resolve_indices(
            self.gradient.elevations,
            elevations,
            tie_break=self.tie_break,
            rng=self.rng,
        )

    def sample(self, point: tuple[float, float]) -> tuple[K, float]:
        elevation = float(self.elevation_at(np.array([point], dtype=np.float64))[0])
        j = int(self.resolve(np.array([elevation]))[0])
        return self.gradient.anchors[j].kind, elevation

    def shade(
        self, points: np.ndarray, light: Light | None = None
    ) -> tuple[np.ndarray, np.ndarray]:
        """Kind indices and 8-bit sRGB colors for body-local points (km)."""

        p = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        j = self.resolve(self.elevation_at(p))
        srgb = self.gradient.srgb[j]

        if light is None:
            rgb = to_rgb8(srgb)
        else:
            base = srgb_to_linear(srgb)
            lit = base * light_multiplier(p, origin=self.origin, radius=self.radius, light=light)
            rgb = to_rgb8(linear_to_srgb(lit))

        return self.gradient.kind_index[j], rgb

    def shade_point(
        self, point: tuple[float, float], light: Light | None = None
    ) -> tuple[K, tuple[int, int, int]]:
        kind_index, rgb = self.shade(np.array([point], dtype=np.float64), light)
        r, g, b = (int(c) for c in rgb[0])
        return self.gradient.kinds[int(kind_index[0])], (r, g, b)
