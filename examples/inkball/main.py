"""Inkball - draw ink lines to steer coloured balls into matching holes.

Controls:
  Left-drag    Draw an ink line
  Right-drag   Erase the ink line under the pointer
  Space        Pause / Resume
  R            Restart the level (or the game, once won)
  Escape       Quit
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pygame

from inkball import (
    Button,
    ConfigError,
    Engine,
    KeyPress,
    MonotonicClock,
    PointerDown,
    PointerDrag,
    PointerUp,
    load_config,
)
from inkball.engine import TICK_MS
from inkball.types import FPS, HEIGHT, WIDTH
from ui.renderer import FrameRenderer, SpriteBank

logger = logging.getLogger("inkball.app")

HERE = Path(__file__).resolve().parent

MOUSE_BUTTONS = {1: Button.PRIMARY, 3: Button.SECONDARY}


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Inkball")
    p.add_argument(
        "config", nargs="?", default=str(HERE / "config.json"),
        help="Path to the game configuration (default: config.json beside this script)",
    )
    p.add_argument("--seed", type=int, default=None, help="Random seed (default: OS entropy)")
    p.add_argument("--sprites", type=Path, default=HERE / "sprites",
                   help="Directory of <name>.png sprites; flat colours are used when absent")
    p.add_argument("-v", "--verbose", action="store_true", help="Log gameplay events")
    return p.parse_args()


def forward_event(engine: Engine, event: pygame.event.Event) -> None:
    """Translate one pygame event into the engine's input feed."""
    if event.type == pygame.MOUSEBUTTONDOWN and event.button in MOUSE_BUTTONS:
        engine.push(PointerDown(*event.pos, MOUSE_BUTTONS[event.button]))
    elif event.type == pygame.MOUSEBUTTONUP and event.button in MOUSE_BUTTONS:
        engine.push(PointerUp(*event.pos, MOUSE_BUTTONS[event.button]))
    elif event.type == pygame.MOUSEMOTION:
        if event.buttons[0]:
            engine.push(PointerDrag(*event.pos, Button.PRIMARY))
        elif event.buttons[2]:
            engine.push(PointerDrag(*event.pos, Button.SECONDARY))
    elif event.type == pygame.KEYUP:
        if event.key == pygame.K_SPACE:
            engine.push(KeyPress(" "))
        elif event.key == pygame.K_r:
            engine.push(KeyPress("r"))


def main() -> None:
    args = parse_args()
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Inkball")
    clock = pygame.time.Clock()

    engine = Engine(config, MonotonicClock(), seed=args.seed)
    logger.info("seed %d", engine.seed)
    renderer = FrameRenderer(SpriteBank(args.sprites if args.sprites.is_dir() else None))
    frame = engine.frame()

    # Tick accumulator for fixed-rate engine ticks
    accumulator = 0.0

    running = True
    while running:
        accumulator += clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            else:
                forward_event(engine, event)

        while accumulator >= TICK_MS:
            frame = engine.step()
            accumulator -= TICK_MS

        renderer.draw(screen, frame)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
