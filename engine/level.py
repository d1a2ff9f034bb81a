from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from engine.anim.animator import ConfigurationError, TransformAnimator
from engine.anim.palette import Palette, parse_color
from engine.anim.pose import Vector3, merge_vector
from engine.settings import AnimCfg

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM_COLOR = 0x808080


@dataclass(eq=False)
class PlatformSpec:
    position: Vector3
    size: Vector3
    color: int                                  # 0xRRGGBB, used when no palette colour is live
    animator: Optional[TransformAnimator] = None

    @property
    def is_moving(self) -> bool:
        return self.animator is not None


def load_level_file(path: str) -> Dict[str, Any]:
    """Read a level file. JSON is valid YAML, so both formats go through yaml.safe_load."""
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: level must be a mapping")
    return data


def get_bpm(level: Dict[str, Any], default: float = 120.0) -> float:
    # Missing, null or 0 fall back to the default; TransformAnimator itself rejects bpm <= 0
    bpm = level.get("bpm")
    return bpm if bpm else default


def get_color_palette(level: Dict[str, Any]) -> Palette:
    raw = level.get("colorPalette")
    if not isinstance(raw, list):
        return Palette()
    return Palette(raw)


def _platform_from_data(data: Dict[str, Any], bpm: float, palette: Palette, cfg: AnimCfg) -> PlatformSpec:
    position = merge_vector(Vector3(), data.get("position"))
    size = merge_vector(Vector3(1.0, 1.0, 1.0), data.get("size"))
    color = parse_color(data["color"]) if "color" in data else DEFAULT_PLATFORM_COLOR

    animator = None
    if data.get("type") == "moving":
        states = data.get("states") or {}
        if not isinstance(states, dict):
            raise ConfigurationError(f"'states' must be a mapping, got {type(states).__name__}")
        animator = TransformAnimator(
            bpm=bpm,
            start_state=states.get("startState"),
            transitions=states.get("transitions"),
            color_palette=palette,
            default_easing=cfg.default_easing,
            carry_remainder=cfg.carry_remainder,
        )
    return PlatformSpec(position=position, size=size, color=color, animator=animator)


def platforms_from_level(level: Dict[str, Any], cfg: Optional[AnimCfg] = None) -> List[PlatformSpec]:
    """
    Build platform records from an already-parsed level mapping:
        bpm: <number>
        colorPalette: ["0xff6b6b", ...]
        platforms: [{position, size, color, type?, states?}, ...]
    Moving platforms share the level's bpm and palette.
    """
    cfg = cfg or AnimCfg()
    raw = level.get("platforms")
    if not isinstance(raw, list):
        logger.warning("Level data has no platforms list")
        return []

    bpm = get_bpm(level, cfg.default_bpm)
    palette = get_color_palette(level)

    out: List[PlatformSpec] = []
    for idx, data in enumerate(raw):
        if not isinstance(data, dict):
            raise ConfigurationError(f"platform {idx}: expected a mapping, got {type(data).__name__}")
        try:
            out.append(_platform_from_data(data, bpm, palette, cfg))
        except ConfigurationError as e:
            logger.error("Bad moving platform %d: %s", idx, e)
            err = ConfigurationError(f"platform {idx}: {e}")
            err.index = e.index
            raise err from e
    return out
