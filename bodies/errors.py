from __future__ import annotations


class PlanetError(Exception):
    """Base class for every error raised while building or rendering a body."""


class ConfigurationError(PlanetError, ValueError):
    """Invalid user-facing input, detected before any generation work."""


class PreconditionError(PlanetError, AssertionError):
    """A caller broke an invariant of the generation pipeline."""


class ImageWriteError(PlanetError, OSError):
    """The rendered image could not be written."""
