from __future__ import annotations

import argparse
import sys
import time
import uuid
from pathlib import Path
from typing import Sequence

import structlog

from bodies.body import Body, Light
from bodies.colors import parse_hex_color
from bodies.errors import ConfigurationError, ImageWriteError, PlanetError
from bodies.palettes import preset
from planetsmith.logs import configure_logging
from planetsmith.settings import Settings, get_settings
from viz.export import save_png
from viz.render import generate
from worldgen.terrain import STRATEGIES, TIE_BREAKS, TerrainOptions

logger = structlog.get_logger(__name__)


def _add_body_arguments(p: argparse.ArgumentParser, settings: Settings) -> None:
    p.add_argument("-d", "--distance", type=float, default=settings.distance_km,
                   help="distance from the sun, in kilometers")
    p.add_argument("-a", "--angle", type=float, default=settings.angle_rad,
                   help="rotation around the sun, in radians")
    p.add_argument("--radius", type=float, default=settings.radius_km,
                   help="body radius, in kilometers")
    p.add_argument("--palette", choices=["earthlike", "sunlike"], default=settings.palette)
    p.add_argument("--seed", type=str, default=None, help="UUID seed (random when omitted)")
    p.add_argument("-p", "--resolution", type=int, default=settings.resolution,
                   help="render resolution, in pixels")
    p.add_argument("--sun-color", type=str, default=None,
                   help="simulate sun lighting with this 6-digit hex color, e.g. FFFFFF")
    p.add_argument("--sols", type=float, default=settings.sols,
                   help="sun intensity when lighting is simulated")
    p.add_argument("--strategy", choices=list(STRATEGIES), default=settings.strategy)
    p.add_argument("--tie-break", choices=list(TIE_BREAKS), default=settings.tie_break)
    p.add_argument("--octaves", type=int, default=settings.octaves,
                   help="noise octaves for the noise strategy")


def build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    settings = settings or get_settings()
    parser = argparse.ArgumentParser(prog="planetsmith", description="A pixel-art planet generator")
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--log-format", choices=["console", "json"], default=settings.log_format)
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="render a body to a PNG file")
    gen.add_argument("-o", "--output", type=Path, default=Path(settings.output))
    gen.add_argument("-r", "--repeat", type=float, default=None,
                     help="regenerate with a new seed every N seconds")
    _add_body_arguments(gen, settings)

    sub.add_parser("edit", help="open the interactive editor")
    return parser


def parse_seed(value: str | None) -> uuid.UUID | None:
    if value is None:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise ConfigurationError(f"seed must be a UUID (got {value!r})") from exc


def light_from_args(args: argparse.Namespace) -> Light | None:
    if args.sun_color is None:
        return None
    return Light(color=parse_hex_color(args.sun_color), sols=args.sols)


def body_from_args(args: argparse.Namespace) -> Body:
    return Body.orbiting(
        angle=args.angle,
        distance=args.distance,
        radius=args.radius,
        palette=preset(args.palette),
        seed=parse_seed(args.seed),
    )


def run_generate(args: argparse.Namespace) -> int:
    # Validate everything user-supplied before the first render.
    light = light_from_args(args)
    options = TerrainOptions(strategy=args.strategy, tie_break=args.tie_break, octaves=args.octaves)
    body = body_from_args(args)
    if args.repeat is not None and args.repeat < 0:
        raise ConfigurationError("repeat interval must be >= 0")

    while True:
        planet = generate(body, args.resolution, light, options)
        save_png(planet, args.output)
        logger.info(
            "planet.generated",
            seed=str(body.seed),
            output=str(args.output),
            stats=planet.named_stats(),
        )
        if args.repeat is None:
            return 0
        time.sleep(args.repeat)
        body.reseed()


def run_edit() -> int:
    from streamlit.web import cli as stcli

    app = Path(__file__).resolve().parent.parent / "streamlit_app.py"
    sys.argv = ["streamlit", "run", str(app)]
    return int(stcli.main() or 0)


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        parser = build_parser()
    except ConfigurationError as exc:
        configure_logging()
        logger.error("settings.invalid", error=str(exc))
        return 2
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args([*argv, "generate"])
    configure_logging(args.log_level, args.log_format)

    command = args.command

    try:
        if command == "edit":
            return run_edit()
        return run_generate(args)
    except ImageWriteError as exc:
        logger.error("planet.write_failed", error=str(exc))
        return 1
    except PlanetError as exc:
        logger.error("planet.invalid", error=str(exc))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
