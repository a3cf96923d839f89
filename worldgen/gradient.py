from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Sequence, TypeVar

import numpy as np

from bodies.colors import darken, lighten, linear_to_srgb
from bodies.errors import PreconditionError
from bodies.palettes import ElevationColor, Palette

K = TypeVar("K", bound=Hashable)

SHADE_DELTA = 0.1
RANGE_OVEREXTENSION = 0.3


def target_range(palette: Palette, rng: np.random.Generator) -> tuple[float, float]:
    """Palette elevation span, widened by up to 30% of its width on both ends."""
    lo = palette.min_elevation
    hi = palette.max_elevation
    variance = (hi - lo) * float(rng.random()) * RANGE_OVEREXTENSION
    return (lo - variance, hi + variance)


def _to_anchor(kind: K, linear: np.ndarray, elevation: float) -> ElevationColor[K]:
    srgb = linear_to_srgb(linear)
    return ElevationColor(
        kind=kind,
        color=(float(srgb[0]), float(srgb[1]), float(srgb[2])),
        elevation=float(elevation),
    )


def _band(
    kind: K,
    start: float,
    end: float,
    base: np.ndarray,
    rng: np.random.Generator,
    *,
    delta: float,
) -> list[ElevationColor[K]]:
    mid = float(rng.uniform(start, end))
    mid_shade = float(rng.uniform(0.0, delta))
    return [
        _to_anchor(kind, darken(base, delta), start),
        _to_anchor(kind, lighten(base, mid_shade), mid),
        _to_anchor(kind, lighten(base, delta), end),
    ]


def _strictly_ascending(anchors: list[ElevationColor[K]]) -> list[ElevationColor[K]]:
    out: list[ElevationColor[K]] = []
    prev = -np.inf
    for a in anchors:
        e = float(a.elevation)
        if e <= prev:
            e = float(np.nextafter(prev, np.inf))
            a = ElevationColor(kind=a.kind, color=a.color, elevation=e)
        out.append(a)
        prev = e
    return out


def expand(
    anchors: Sequence[ElevationColor[K]],
    elevation_range: tuple[float, float],
    rng: np.random.Generator,
    *,
    delta: float = SHADE_DELTA,
) -> list[ElevationColor[K]]:
    """Expand sparse palette anchors into a banded, shaded gradient.

    Each anchor owns one band and contributes three entries: a darkened floor
    at the band start, a randomly lightened midpoint, and a lightened ceiling at
    the band end. The first band starts at ``elevation_range[0]`` and the last
    ends at ``elevation_range[1]``; interior bands end at a random cut between
    their anchor and the next one, and the next band picks up from that cut.
    The result is strictly ascending and always ``3 * len(anchors)`` long.
    """

    anchors = list(anchors)
    if not anchors:
        raise PreconditionError("cannot expand an empty palette")

    lo, hi = (float(elevation_range[0]), float(elevation_range[1]))
    delta = float(delta)

    out: list[ElevationColor[K]] = []
    start = lo
    last = len(anchors) - 1
    for i, anchor in enumerate(anchors):
        base = anchor.linear()
        if i == last:
            end = max(hi, start)
        else:
            cut = float(rng.uniform(float(anchor.elevation), float(anchors[i + 1].elevation)))
            end = max(cut, start)
        out.extend(_band(anchor.kind, start, end, base, rng, delta=delta))
        start = float(np.nextafter(end, np.inf))

    return _strictly_ascending(out)


@dataclass(frozen=True)
class ExpandedGradient(Generic[K]):
    """Strictly ascending gradient with column arrays for vectorized lookup."""

    anchors: tuple[ElevationColor[K], ...]
    elevations: np.ndarray
    srgb: np.ndarray
    kind_index: np.ndarray
    kinds: tuple[K, ...]

    @classmethod
    def from_anchors(
        cls, anchors: Sequence[ElevationColor[K]], kinds: Sequence[K] = ()
    ) -> ExpandedGradient[K]:
        anchors = tuple(anchors)
        if not anchors:
            raise PreconditionError("gradient needs at least one anchor")
        order: dict[K, int] = {k: i for i, k in enumerate(kinds)}
        for a in anchors:
            order.setdefault(a.kind, len(order))
        elevations = np.array([a.elevation for a in anchors], dtype=np.float64)
        if np.any(np.diff(elevations) <= 0.0):
            raise PreconditionError("gradient elevations must be strictly ascending")
        return cls(
            anchors=anchors,
            elevations=elevations,
            srgb=np.array([a.color for a in anchors], dtype=np.float64),
            kind_index=np.array([order[a.kind] for a in anchors], dtype=np.int32),
            kinds=tuple(order),
        )

    def __len__(self) -> int:
        return len(self.anchors)
