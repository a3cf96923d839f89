from __future__ import annotations

import io
import math
from dataclasses import dataclass, field
from typing import Generic, Hashable, TypeVar

import numpy as np
import structlog
from PIL import Image

from bodies.body import Body, Light
from bodies.errors import ConfigurationError
from worldgen.terrain import Terrain, TerrainOptions

logger = structlog.get_logger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass
class GeneratedPlanet(Generic[K]):
    rgba: np.ndarray
    stats: dict[K, int] = field(default_factory=dict)

    @property
    def resolution(self) -> int:
        return int(self.rgba.shape[0])

    def named_stats(self) -> dict[str, int]:
        """Pixel counts keyed by category name, for logs and charts."""
        return {getattr(k, "value", str(k)): v for k, v in self.stats.items()}

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.rgba, dtype=np.uint8))

    def png_bytes(self) -> bytes:
        out = io.BytesIO()
        self.to_image().save(out, format="PNG")
        return out.getvalue()


def edge_alpha(distance: np.ndarray, radius: float) -> np.ndarray:
    """Opacity from distance to the disc center; fades across the last pixel."""

    d = np.asarray(distance, dtype=np.float64)
    delta = float(radius) - d
    alpha = np.where(delta < 1.0, np.floor(255.0 * np.clip(delta, 0.0, 1.0)), 255.0)
    return alpha.astype(np.uint8)


def pixel_grid(resolution: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Pixel x, pixel y, and distance from the image center, row-major."""

    n = int(resolution)
    r = n / 2.0
    ys, xs = np.mgrid[0:n, 0:n].astype(np.float64)
    distance = np.hypot(xs - r, ys - r)
    return xs, ys, distance


def _check_resolution(resolution: int) -> int:
    try:
        value = float(resolution)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"resolution must be a positive integer (got {resolution!r})") from exc
    if not math.isfinite(value) or value < 1 or value != int(value):
        raise ConfigurationError(f"resolution must be a positive integer (got {resolution!r})")
    return int(value)


def render(terrain: Terrain[K], resolution: int, light: Light | None = None) -> GeneratedPlanet[K]:
    """Composite the lit, anti-aliased disc of `terrain` into an RGBA grid."""

    n = _check_resolution(resolution)
    pixel_radius = n / 2.0
    scale = terrain.radius / pixel_radius

    xs, ys, distance = pixel_grid(n)
    inside = distance < pixel_radius

    rgba = np.zeros((n, n, 4), dtype=np.uint8)
    points = np.stack([xs[inside] * scale, ys[inside] * scale], axis=1) - terrain.radius

    kind_index, rgb = terrain.shade(points, light)
    rgba[inside, :3] = rgb
    rgba[inside, 3] = edge_alpha(distance[inside], pixel_radius)

    counts = np.bincount(kind_index, minlength=len(terrain.gradient.kinds))
    stats = {
        kind: int(counts[i]) for i, kind in enumerate(terrain.gradient.kinds) if counts[i] > 0
    }

    planet = GeneratedPlanet(rgba=rgba, stats=stats)
    logger.debug(
        "planet.rendered",
        resolution=n,
        inside=int(np.count_nonzero(inside)),
        lit=light is not None,
        stats=planet.named_stats(),
    )
    return planet


def generate(
    body: Body,
    resolution: int,
    light: Light | None = None,
    options: TerrainOptions | None = None,
) -> GeneratedPlanet:
    """Build a fresh terrain for `body` and render it."""

    n = _check_resolution(resolution)
    terrain = Terrain.generate(body, options)
    return render(terrain, n, light)
