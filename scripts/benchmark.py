from __future__ import annotations

import sys
import time
import uuid
from pathlib import Path


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    print(f"{label}: {ms:.2f} ms")
    return ms


def main() -> None:
    """Quick CPU benchmark.

    Intended targets (laptop-class CPU):
    - Scattered terrain 256x256: < ~150ms
    - Noise terrain 256x256: < ~100ms
    """

    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))

    from bodies.body import Body, Light, calculate_origin
    from bodies.palettes import earthlike
    from viz.render import generate
    from worldgen.terrain import Terrain, TerrainOptions

    body = Body(
        seed=uuid.UUID(int=0),
        origin=calculate_origin(-2.35619, 150_200_000.0),
        radius=6371.0,
        palette=earthlike(),
    )
    light = Light()

    _timeit("Terrain.generate (scattered)", lambda: Terrain.generate(body))
    for resolution in (128, 256, 512):
        for strategy in ("scattered", "noise"):
            options = TerrainOptions(strategy=strategy)
            _timeit(
                f"generate {strategy} {resolution}x{resolution}",
                lambda: generate(body, resolution, light, options),
            )


if __name__ == "__main__":
    main()
