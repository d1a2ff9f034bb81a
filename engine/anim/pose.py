from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

TRANSFORM_TYPES = ("translate", "scale", "rotate")


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Pose:
    """Fully resolved transform snapshot. Rotation is in radians."""
    translate: Vector3 = Vector3()
    scale: Vector3 = Vector3(1.0, 1.0, 1.0)
    rotate: Vector3 = Vector3()
    color_index: Optional[int] = None   # index into the level palette; None = no colour control


DEFAULT_POSE = Pose()


def _finite(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _axis(override: Mapping[str, Any], key: str, fallback: float) -> float:
    v = override.get(key)
    if not _finite(v):
        return fallback
    return float(v)


def merge_vector(base: Vector3, override: Any) -> Vector3:
    """Overlay a partial {x?, y?, z?} record on `base`. Missing axes keep base values."""
    if not isinstance(override, Mapping):
        return base
    return Vector3(
        x=_axis(override, "x", base.x),
        y=_axis(override, "y", base.y),
        z=_axis(override, "z", base.z),
    )


def _color_index(raw: Any, fallback: Optional[int]) -> Optional[int]:
    if raw is None:
        return None
    if not _finite(raw):
        logger.warning("Ignoring colorIndex %r, keeping %s", raw, fallback)
        return fallback
    return int(raw)


def merge_pose(base: Pose, override: Any) -> Pose:
    """
    Resolve a partial pose record against a known baseline.

    `override` is the raw config shape: {translate?, scale?, rotate?, colorIndex?}.
    Each transform type is merged independently. `colorIndex` replaces the
    baseline only when the key is present; an explicit null clears it.
    """
    if not isinstance(override, Mapping):
        return base
    color = base.color_index
    if "colorIndex" in override:
        color = _color_index(override["colorIndex"], base.color_index)
    return Pose(
        translate=merge_vector(base.translate, override.get("translate")),
        scale=merge_vector(base.scale, override.get("scale")),
        rotate=merge_vector(base.rotate, override.get("rotate")),
        color_index=color,
    )


def lerp_vector(a: Vector3, b: Vector3, t: float) -> Vector3:
    # Unclamped: overshoot easings push t outside [0, 1]
    return Vector3(
        a.x + (b.x - a.x) * t,
        a.y + (b.y - a.y) * t,
        a.z + (b.z - a.z) * t,
    )
