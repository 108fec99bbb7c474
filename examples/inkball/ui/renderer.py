"""Draw inkball render commands onto a pygame surface."""
from __future__ import annotations

from pathlib import Path

import pygame

from inkball.render import Disk, Fill, Rect, RenderCommand, Sprite, Text

# Flat colours stand in for any sprite image that is not on disk.
BALL_COLORS = {
    0: (150, 150, 150),
    1: (240, 140, 30),
    2: (40, 90, 220),
    3: (40, 170, 70),
    4: (235, 200, 40),
}
TILE_COLOR = (205, 205, 205)
ENTRYPOINT_COLOR = (60, 60, 60)


def _fallback_color(name: str) -> tuple[int, int, int]:
    if name == "tile":
        return TILE_COLOR
    if name == "entrypoint":
        return ENTRYPOINT_COLOR
    digit = name[-1:]
    base = BALL_COLORS.get(int(digit), (255, 0, 255)) if digit.isdigit() else (255, 0, 255)
    if name.startswith("wall"):
        return tuple(c // 2 for c in base)  # type: ignore[return-value]
    return base


class SpriteBank:
    """Loads ``<name>.png`` from a directory on first use, drawing flat shapes when missing."""

    def __init__(self, directory: Path | None) -> None:
        self._directory = directory
        self._images: dict[str, pygame.Surface | None] = {}

    def image(self, name: str) -> pygame.Surface | None:
        if name not in self._images:
            surface = None
            if self._directory is not None:
                path = self._directory / f"{name}.png"
                if path.is_file():
                    surface = pygame.image.load(str(path)).convert_alpha()
            self._images[name] = surface
        return self._images[name]

    def draw(self, surface: pygame.Surface, cmd: Sprite) -> None:
        size = max(1, round(cmd.size))
        image = self.image(cmd.name)
        if image is not None:
            if image.get_width() != size:
                image = pygame.transform.smoothscale(image, (size, size))
            surface.blit(image, (cmd.x, cmd.y))
            return

        color = _fallback_color(cmd.name)
        rect = pygame.Rect(round(cmd.x), round(cmd.y), size, size)
        if cmd.name.startswith("ball"):
            pygame.draw.ellipse(surface, color, rect)
        elif cmd.name.startswith("hole"):
            pygame.draw.rect(surface, (20, 20, 20), rect)
            pygame.draw.ellipse(surface, color, rect.inflate(-size // 4, -size // 4), 4)
        elif cmd.name.startswith("brick"):
            pygame.draw.rect(surface, color, rect)
            pygame.draw.line(surface, (40, 40, 40), rect.midleft, rect.midright, 2)
            pygame.draw.rect(surface, (40, 40, 40), rect, 1)
        else:
            pygame.draw.rect(surface, color, rect)
            if cmd.name == "tile":
                pygame.draw.rect(surface, (185, 185, 185), rect, 1)


class FrameRenderer:
    def __init__(self, sprites: SpriteBank) -> None:
        self._sprites = sprites
        self._fonts: dict[int, pygame.font.Font] = {}

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.SysFont("arial", size)
        return self._fonts[size]

    def draw(self, surface: pygame.Surface, frame: list[RenderCommand]) -> None:
        for cmd in frame:
            if isinstance(cmd, Fill):
                surface.fill(cmd.color)
            elif isinstance(cmd, Sprite):
                self._sprites.draw(surface, cmd)
            elif isinstance(cmd, Disk):
                pygame.draw.circle(surface, cmd.color, (cmd.x, cmd.y), cmd.diameter / 2)
            elif isinstance(cmd, Rect):
                pygame.draw.rect(surface, cmd.color, pygame.Rect(cmd.x, cmd.y, cmd.width, cmd.height))
            elif isinstance(cmd, Text):
                text = self._font(cmd.size).render(cmd.text, True, cmd.color)
                rect = text.get_rect(**{cmd.anchor: (cmd.x, cmd.y)})
                surface.blit(text, rect)
