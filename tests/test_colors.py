from __future__ import annotations

import numpy as np
import pytest

from bodies.colors import (
    darken,
    lighten,
    linear_to_srgb,
    parse_hex_color,
    rgb8,
    srgb_to_linear,
    to_rgb8,
)
from bodies.errors import ConfigurationError


def test_srgb_linear_roundtrip() -> None:
    c = np.linspace(0.0, 1.0, 11)
    assert np.allclose(linear_to_srgb(srgb_to_linear(c)), c)
    assert srgb_to_linear(np.array(0.0)) == 0.0
    assert np.isclose(srgb_to_linear(np.array(1.0)), 1.0)


def test_linear_to_srgb_negative_is_black() -> None:
    assert float(linear_to_srgb(np.array(-0.25))) == 0.0


def test_shade_is_additive_per_channel() -> None:
    base = np.array([0.2, 0.4, 0.6])
    assert np.allclose(lighten(base, 0.1), [0.3, 0.5, 0.7])
    assert np.allclose(darken(base, 0.1), [0.1, 0.3, 0.5])


def test_to_rgb8_truncates_and_clips() -> None:
    out = to_rgb8(np.array([1.0, 0.5, -0.2, 1.7]))
    assert out.tolist() == [255, 127, 0, 255]


def test_parse_hex_color() -> None:
    assert parse_hex_color("FF0000") == (1.0, 0.0, 0.0)
    assert parse_hex_color("#00ff00") == (0.0, 1.0, 0.0)
    assert parse_hex_color("808080") == rgb8(128, 128, 128)


@pytest.mark.parametrize("value", ["FFF", "FF00000", "GG0000", "", "#12345"])
def test_parse_hex_color_rejects_malformed(value: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_hex_color(value)
