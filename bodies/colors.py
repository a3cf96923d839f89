from __future__ import annotations

import numpy as np

from bodies.errors import ConfigurationError

RGB = tuple[float, float, float]


def srgb_to_linear(c: np.ndarray) -> np.ndarray:
    c = np.asarray(c, dtype=np.float64)
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(c: np.ndarray) -> np.ndarray:
    c = np.asarray(c, dtype=np.float64)
    # Negative channels only appear after darkening; they encode as black.
    c = np.maximum(c, 0.0)
    return np.where(c <= 0.0031308, 12.92 * c, 1.055 * np.power(c, 1.0 / 2.4) - 0.055)


def lighten(linear: np.ndarray, amount: float) -> np.ndarray:
    """Shift every linear channel by `amount` (negative darkens)."""
    return np.asarray(linear, dtype=np.float64) + float(amount)


def darken(linear: np.ndarray, amount: float) -> np.ndarray:
    return lighten(linear, -float(amount))


def to_rgb8(srgb: np.ndarray) -> np.ndarray:
    """Quantize sRGB floats to bytes, truncating like an integer cast."""
    s = np.clip(np.asarray(srgb, dtype=np.float64), 0.0, 1.0)
    return np.floor(s * 255.0).astype(np.uint8)


def rgb8(red: int, green: int, blue: int) -> RGB:
    for v in (red, green, blue):
        if not (0 <= int(v) <= 255):
            raise ConfigurationError(f"color channel out of range: {v}")
    return (int(red) / 255.0, int(green) / 255.0, int(blue) / 255.0)


def parse_hex_color(value: str) -> RGB:
    """Parse a 6-digit hexadecimal color such as ``FF1234`` (``#`` allowed)."""

    text = str(value).strip()
    if text.startswith("#"):
        text = text[1:]
    if len(text) != 6:
        raise ConfigurationError(
            f"only 6-character hexadecimal codes are allowed, e.g. FF1234 (got {value!r})"
        )
    try:
        raw = bytes.fromhex(text)
    except ValueError as exc:
        raise ConfigurationError(
            f"only 6-character hexadecimal codes are allowed, e.g. FF1234 (got {value!r})"
        ) from exc
    return rgb8(raw[0], raw[1], raw[2])
