"""Windowed demo runner for the starfield."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import pygame
from pygame.locals import DOUBLEBUF, RESIZABLE

from starfield.core.config import DEFAULT_CFG
from starfield.core.engine import Starfield
from starfield.core.logging_utils import FrameStatsLogger, setup_logging
from starfield.render.pygame_backend import PygameFrameScheduler, PygameStage, PygameSurface

logger = logging.getLogger(__name__)

WINDOWED_DEFAULT_SIZE = (1000, 800)
CAPTION = "Starfield"

# Options exposed one-to-one as flags, with their argument types.
_OPTION_FLAGS = {
    "star_count": int,
    "speed": float,
    "trail_length": float,
    "mobile_speed_multiplier": float,
    "desktop_speed_multiplier": float,
    "mobile_trail_multiplier": float,
    "desktop_trail_multiplier": float,
    "mobile_breakpoint": float,
    "dpr_cap": float,
    "z_index": int,
    "background_color": str,
    "star_color": str,
}


def _set_display_mode_with_vsync(size: tuple[int, int], flags: int = 0) -> pygame.Surface:
    """Create the display surface with double buffering and vsync when available."""
    flags |= DOUBLEBUF
    try:
        return pygame.display.set_mode(size, flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode(size, flags)
    except pygame.error as err:
        try:
            return pygame.display.set_mode(size, flags)
        except pygame.error:
            raise err


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Animated warp starfield.")
    for name, kind in _OPTION_FLAGS.items():
        parser.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            type=kind,
            default=None,
            help=f"default: {getattr(DEFAULT_CFG, name)}",
        )
    parser.add_argument("--size", type=int, nargs=2, metavar=("W", "H"), default=WINDOWED_DEFAULT_SIZE)
    parser.add_argument(
        "--region",
        type=int,
        nargs=4,
        metavar=("X", "Y", "W", "H"),
        help="confine the starfield to this part of the window",
    )
    parser.add_argument("--dpr", type=float, default=1.0, help="device pixel ratio to emulate")
    parser.add_argument("--coarse-pointer", action="store_true")
    parser.add_argument("--paused", action="store_true", help="do not start animating")
    parser.add_argument("--fps", type=int, default=0, help="frame rate cap, 0 for vsync only")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--stats-dir", type=Path, help="record per-frame statistics here")
    return parser


def options_from_args(args: argparse.Namespace) -> dict[str, object]:
    options: dict[str, object] = {
        name: getattr(args, name)
        for name in _OPTION_FLAGS
        if getattr(args, name) is not None
    }
    if args.region is not None:
        options["target"] = "stage"
    options["autostart"] = not args.paused
    return options


def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, str(args.log_level).upper(), logging.INFO))

    pygame.init()
    pygame.display.set_caption(CAPTION)
    window = _set_display_mode_with_vsync(tuple(args.size), RESIZABLE)

    regions = {"stage": tuple(args.region)} if args.region is not None else None
    stage = PygameStage(
        window,
        device_pixel_ratio=args.dpr,
        coarse_pointer=args.coarse_pointer,
        regions=regions,
    )
    scheduler = PygameFrameScheduler()
    font = pygame.font.SysFont("consolas", 14)
    clock = pygame.time.Clock()
    stats_logger: FrameStatsLogger | None = None
    starfield: Starfield | None = None

    try:
        if args.stats_dir:
            stats_logger = FrameStatsLogger(args.stats_dir)
            stats_logger.write_meta({"options": options_from_args(args), "size": list(args.size)})
        starfield = Starfield(
            options_from_args(args),
            host=stage,
            surface=PygameSurface(),
            scheduler=scheduler,
            on_frame=stats_logger,
        )

        def draw_hud(surface: pygame.Surface) -> None:
            state = "running" if starfield.running else "paused"
            text = font.render(f"{state}  {clock.get_fps():.0f} fps", True, (234, 241, 255))
            surface.blit(text, (10, 10))

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        if starfield.running:
                            starfield.stop()
                        else:
                            starfield.start()
                    elif event.key == pygame.K_r:
                        starfield.resize()
                else:
                    stage.handle_event(event)

            scheduler.run_frame()
            stage.window.fill((0, 0, 0))
            stage.compose(draw_hud)
            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        if starfield is not None:
            starfield.destroy()
        if stats_logger is not None:
            stats_logger.close()
            logger.info("Frame statistics written to %s", stats_logger.run_dir)
        pygame.quit()
    return 0


def main() -> None:
    raise SystemExit(run())


__all__ = ["build_parser", "main", "options_from_args", "run"]
