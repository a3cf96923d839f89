from __future__ import annotations

from viz.export import save_png
from viz.render import GeneratedPlanet, edge_alpha, generate, pixel_grid, render

__all__ = ["GeneratedPlanet", "edge_alpha", "generate", "pixel_grid", "render", "save_png"]
