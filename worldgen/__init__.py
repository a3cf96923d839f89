from __future__ import annotations

from worldgen.elevation import (
    ElevationSource,
    NoiseElevation,
    PointIndex,
    ScatteredElevation,
)
from worldgen.gradient import ExpandedGradient, expand, target_range
from worldgen.noise import SurfaceNoise
from worldgen.terrain import (
    Terrain,
    TerrainOptions,
    light_multiplier,
    resolve_indices,
)

__all__ = [
    "ElevationSource",
    "ExpandedGradient",
    "NoiseElevation",
    "PointIndex",
    "ScatteredElevation",
    "SurfaceNoise",
    "Terrain",
    "TerrainOptions",
    "expand",
    "light_multiplier",
    "resolve_indices",
    "target_range",
]
