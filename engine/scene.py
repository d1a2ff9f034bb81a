from __future__ import annotations
from typing import Protocol
import pygame


class Scene(Protocol):
    """Lightweight scene protocol with no inheritance burden."""
    request_quit: bool

    def update(self, dt: float) -> None: ...
    def draw(self, surface: pygame.Surface) -> None: ...
    def handle_event(self, e: pygame.event.Event) -> bool: ...
