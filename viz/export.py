from __future__ import annotations

from pathlib import Path

import structlog

from bodies.errors import ImageWriteError
from viz.render import GeneratedPlanet

logger = structlog.get_logger(__name__)


def save_png(planet: GeneratedPlanet, path: str | Path) -> Path:
    """Write the planet as an RGBA PNG, raising ImageWriteError on failure."""

    path = Path(path)
    try:
        planet.to_image().save(path, format="PNG")
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"could not write {path}: {exc}") from exc
    logger.info("image.written", path=str(path), resolution=planet.resolution)
    return path
