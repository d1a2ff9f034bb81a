from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from engine.anim.easing import DEFAULT_EASING

DEFAULTS_PATH = "game/config/defaults.yaml"


@dataclass
class WindowCfg:
    width: int = 1280
    height: int = 720
    title: str = "BEATFORM"
    bg_rgb: tuple[int, int, int] = (14, 15, 18)


@dataclass
class AnimCfg:
    default_bpm: float = 120.0
    default_easing: str = DEFAULT_EASING
    carry_remainder: bool = False       # Keep overshoot time across transition boundaries
    pixels_per_unit: float = 24.0       # Preview only: world units -> screen px


@dataclass
class AppCfg:
    fps: int = 60
    log_level: str = "INFO"
    level_path: str = "game/levels/demo.yaml"
    window: WindowCfg = field(default_factory=WindowCfg)
    anim: AnimCfg = field(default_factory=AnimCfg)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def load_settings(path: str = DEFAULTS_PATH) -> AppCfg:
    """Read settings YAML. A missing file (or missing keys) falls back to dataclass defaults."""
    data = {}
    p = Path(path)
    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings must be a mapping")

    return AppCfg(
        fps=int(_get(data, "fps", 60)),
        log_level=str(_get(data, "log_level", "INFO")).upper(),
        level_path=str(_get(data, "level_path", "game/levels/demo.yaml")),
        window=WindowCfg(
            width=int(_get(data, "window.width", 1280)),
            height=int(_get(data, "window.height", 720)),
            title=str(_get(data, "window.title", "BEATFORM")),
            bg_rgb=tuple(_get(data, "window.bg_rgb", (14, 15, 18))),
        ),
        anim=AnimCfg(
            default_bpm=float(_get(data, "anim.default_bpm", 120.0)),
            default_easing=str(_get(data, "anim.default_easing", DEFAULT_EASING)),
            carry_remainder=bool(_get(data, "anim.carry_remainder", False)),
            pixels_per_unit=float(_get(data, "anim.pixels_per_unit", 24.0)),
        ),
    )
