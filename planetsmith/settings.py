"""Configuration management."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from bodies.body import DEFAULT_ANGLE, DEFAULT_DISTANCE
from bodies.errors import ConfigurationError


class Settings(BaseSettings):
    """Defaults for generation, overridable through PLANETSMITH_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLANETSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Rendering
    resolution: int = Field(default=128, gt=0, le=8192, description="Image size in pixels")
    output: str = Field(default="output.png", description="Default PNG output path")

    # Body placement
    distance_km: float = Field(default=DEFAULT_DISTANCE, gt=0, description="Distance from the light")
    angle_rad: float = Field(default=DEFAULT_ANGLE, description="Rotation around the light")
    radius_km: float = Field(default=6_371.0, gt=0, description="Body radius")
    palette: Literal["earthlike", "sunlike"] = Field(default="earthlike")

    # Lighting
    sols: float = Field(default=1.0, ge=0, description="Light intensity multiplier")

    # Terrain
    strategy: Literal["scattered", "noise"] = Field(default="scattered")
    tie_break: Literal["nearest", "weighted"] = Field(default="nearest")
    octaves: int = Field(default=4, ge=1, le=12)

    # Editor
    debounce_s: float = Field(default=0.25, ge=0, description="Regeneration throttle window")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console")


def load_settings(**overrides: object) -> Settings:
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
