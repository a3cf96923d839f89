from __future__ import annotations

from bodies import Body, Light, calculate_origin, earthlike, set_origin_by_angle, sunlike
from viz.render import GeneratedPlanet, generate
from worldgen.terrain import Terrain, TerrainOptions

__all__ = [
    "Body",
    "GeneratedPlanet",
    "Light",
    "Terrain",
    "TerrainOptions",
    "calculate_origin",
    "earthlike",
    "generate",
    "set_origin_by_angle",
    "sunlike",
]
