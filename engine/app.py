from __future__ import annotations

import logging

import pygame

from engine.settings import AppCfg
from engine.scene import Scene

logger = logging.getLogger(__name__)


class GameApp:
    """
    Minimal app shell that delegates input/update/draw to one scene.
    It keeps global concerns (window init, fps, resize).
    """

    def __init__(self, cfg: AppCfg, scene_factory):
        self.cfg = cfg
        pygame.init()
        pygame.display.set_caption(cfg.window.title)

        self._flags = pygame.RESIZABLE | pygame.DOUBLEBUF
        self.screen = pygame.display.set_mode(
            (int(cfg.window.width), int(cfg.window.height)),
            flags=self._flags,
        )

        self.clock = pygame.time.Clock()
        self.running = True
        self.scene: Scene = scene_factory(self.screen)

    # ------------------------------------------------------------------ #
    # Main loop
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        logger.info("Starting preview at %d fps", self.cfg.fps)
        while self.running and not self.scene.request_quit:
            dt = self.clock.tick(self.cfg.fps) / 1000.0

            for e in pygame.event.get():
                if e.type == pygame.QUIT:
                    self.running = False
                    break

                if e.type == pygame.VIDEORESIZE:
                    self._resize_to(e.w, e.h)

                if self.scene.handle_event(e):
                    continue

                if e.type == pygame.KEYDOWN:
                    if (e.key == pygame.K_q) and (pygame.key.get_mods() & pygame.KMOD_CTRL):
                        self.running = False
                        continue

            self.scene.update(dt)
            self.scene.draw(self.screen)
            pygame.display.flip()

        pygame.quit()

    def _resize_to(self, w: int, h: int) -> None:
        w = max(1, int(w))
        h = max(1, int(h))
        self.screen = pygame.display.set_mode((w, h), flags=self._flags)
