from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple

import pygame

logger = logging.getLogger(__name__)

DEFAULT_COLOR = 0x808080  # grey

RGB = Tuple[float, float, float]


def parse_color(value: Any) -> int:
    """
    Accepts 0xRRGGBB ints or hex strings ("0xff6b6b", "#FF6B6B", "ff6b6b").
    Anything else becomes grey.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value & 0xFFFFFF
    if isinstance(value, str):
        s = value.strip().lower()
        if s.startswith("0x"):
            s = s[2:]
        elif s.startswith("#"):
            s = s[1:]
        try:
            return int(s, 16) & 0xFFFFFF
        except ValueError:
            pass
    logger.warning("Could not parse colour %r, using grey", value)
    return DEFAULT_COLOR


def hex_to_rgb(color: int) -> RGB:
    return (
        ((color >> 16) & 255) / 255.0,
        ((color >> 8) & 255) / 255.0,
        (color & 255) / 255.0,
    )


class Palette:
    """Level-wide ordered colour list. Read-only once built, safe to share."""

    __slots__ = ("_colors",)

    def __init__(self, colors: Iterable[Any] = ()) -> None:
        self._colors: Tuple[int, ...] = tuple(parse_color(c) for c in colors)

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self):
        return iter(self._colors)

    def hex(self, index: Optional[int]) -> Optional[int]:
        if index is None or index < 0 or index >= len(self._colors):
            return None
        return self._colors[index]

    def rgb(self, index: Optional[int]) -> Optional[RGB]:
        """(r, g, b) floats in [0, 1], or None when the index doesn't hit the palette."""
        c = self.hex(index)
        return None if c is None else hex_to_rgb(c)

    def color(self, index: Optional[int]) -> Optional[pygame.Color]:
        c = self.hex(index)
        if c is None:
            return None
        return pygame.Color((c >> 16) & 255, (c >> 8) & 255, c & 255)

    def __repr__(self) -> str:
        return "Palette([%s])" % ", ".join("0x%06x" % c for c in self._colors)
