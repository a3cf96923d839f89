from bodies.body import Body, Light, calculate_origin, set_origin_by_angle
from bodies.colors import parse_hex_color
from bodies.errors import (
    ConfigurationError,
    ImageWriteError,
    PlanetError,
    PreconditionError,
)
from bodies.palettes import (
    Earthlike,
    ElevationColor,
    Palette,
    Sunlike,
    earthlike,
    palette_from,
    preset,
    sunlike,
)

__all__ = [
    "Body",
    "ConfigurationError",
    "Earthlike",
    "ElevationColor",
    "ImageWriteError",
    "Light",
    "Palette",
    "PlanetError",
    "PreconditionError",
    "Sunlike",
    "calculate_origin",
    "earthlike",
    "palette_from",
    "parse_hex_color",
    "preset",
    "set_origin_by_angle",
    "sunlike",
]
