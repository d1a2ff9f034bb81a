# game/scenes/preview.py
from __future__ import annotations
import math
from typing import Optional, Tuple
import pygame

from engine.anim.group import AnimatorGroup
from engine.anim.pose import DEFAULT_POSE, Pose
from engine.level import PlatformSpec, platforms_from_level
from engine.settings import AppCfg


def project_platform(
    platform: PlatformSpec,
    pose: Optional[Pose],
    origin: Tuple[float, float],
    pixels_per_unit: float,
) -> Tuple[Tuple[float, float], Tuple[float, float], float]:
    """
    Top-down projection onto the x/z plane.
    Returns (screen centre, (width_px, depth_px), angle in degrees).
    """
    pose = pose or DEFAULT_POSE
    wx = platform.position.x + pose.translate.x
    wz = platform.position.z + pose.translate.z
    center = (origin[0] + wx * pixels_per_unit, origin[1] + wz * pixels_per_unit)
    size = (
        abs(platform.size.x * pose.scale.x) * pixels_per_unit,
        abs(platform.size.z * pose.scale.z) * pixels_per_unit,
    )
    # Screen y points down, so a positive yaw turns clockwise on screen
    angle = math.degrees(pose.rotate.y)
    return center, size, angle


class PreviewScene:
    """
    Top-down preview of a level's platforms.
      - SPACE pauses/resumes
      - R resets every animator to its start pose
      - ESC quits
    """

    def __init__(self, cfg: AppCfg, level: dict, screen: pygame.Surface):
        self.cfg = cfg
        self.screen = screen
        self.platforms = platforms_from_level(level, cfg.anim)
        self.group = AnimatorGroup()
        for p in self.platforms:
            if p.animator is not None:
                self.group.add(p.animator)
        self.paused = False
        self.request_quit = False
        self._font: pygame.font.Font | None = None

    # --- loop ---
    def handle_event(self, e: pygame.event.Event) -> bool:
        if e.type != pygame.KEYDOWN:
            return False
        if e.key == pygame.K_SPACE:
            self.paused = not self.paused
            return True
        if e.key == pygame.K_r:
            self.group.reset()
            return True
        if e.key == pygame.K_ESCAPE:
            self.request_quit = True
            return True
        return False

    def update(self, dt: float) -> None:
        if not self.paused:
            self.group.update(dt)

    def draw(self, surface: pygame.Surface) -> None:
        surface.fill(self.cfg.window.bg_rgb)
        w, h = surface.get_size()
        origin = (w / 2, h / 2)
        ppu = self.cfg.anim.pixels_per_unit

        for p in self.platforms:
            pose = p.animator.current_interpolated_pose() if p.animator else None
            center, (pw, ph), angle = project_platform(p, pose, origin, ppu)
            if pw < 1 or ph < 1:
                continue
            tile = pygame.Surface((int(pw), int(ph)), pygame.SRCALPHA)
            tile.fill(self._platform_color(p))
            tile = pygame.transform.rotate(tile, -angle)
            surface.blit(tile, tile.get_rect(center=(int(center[0]), int(center[1]))))

        self._draw_hud(surface)

    # --- helpers ---
    @staticmethod
    def _platform_color(p: PlatformSpec) -> pygame.Color:
        if p.animator is not None:
            live = p.animator.palette.color(p.animator.color_index)
            if live is not None:
                return live
        c = p.color
        return pygame.Color((c >> 16) & 255, (c >> 8) & 255, c & 255)

    def _draw_hud(self, surface: pygame.Surface) -> None:
        if self._font is None:
            self._font = pygame.font.Font(None, 22)
        first = next(iter(self.group), None)
        beat = first.current_beat() if first is not None else 0.0
        text = f"beat {beat:6.2f}   moving {len(self.group)}/{len(self.platforms)}"
        if self.paused:
            text += "   [paused]"
        label = self._font.render(text, True, (200, 202, 210))
        surface.blit(label, (10, 10))
