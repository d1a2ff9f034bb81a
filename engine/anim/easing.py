from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence

logger = logging.getLogger(__name__)

DEFAULT_EASING = "easeOutQuart"

_NEWTON_ITERATIONS = 8


class EasingCurve:
    """Cubic bezier timing curve through (0,0), (x1,y1), (x2,y2), (1,1).

    Bezier curves are parametric, so y can't be read straight off x. We solve
    X(u) = t for the curve parameter u with Newton-Raphson, then return Y(u).

    Example:
        ease = EasingCurve(0.42, 0.0, 0.58, 1.0)
        ease(0.25)          # same as ease.evaluate(0.25)
    """

    __slots__ = ("x1", "y1", "x2", "y2", "_ax", "_bx", "_cx", "_ay", "_by", "_cy")

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        x1, y1, x2, y2 = float(x1), float(y1), float(x2), float(y2)
        if not (0.0 <= x1 <= 1.0) or not (0.0 <= x2 <= 1.0):
            logger.warning("Bezier x values must lie in [0, 1], got x1=%s x2=%s; clamping", x1, x2)
            x1 = max(0.0, min(1.0, x1))
            x2 = max(0.0, min(1.0, x2))

        self.x1, self.y1, self.x2, self.y2 = x1, y1, x2, y2

        # Power-basis coefficients: B(u) = ((a*u + b)*u + c)*u
        self._cx = 3.0 * x1
        self._bx = 3.0 * (x2 - x1) - self._cx
        self._ax = 1.0 - self._cx - self._bx

        self._cy = 3.0 * y1
        self._by = 3.0 * (y2 - y1) - self._cy
        self._ay = 1.0 - self._cy - self._by

    # --- Curve math -------------------------------------------------------
    def _sample_x(self, u: float) -> float:
        return ((self._ax * u + self._bx) * u + self._cx) * u

    def _sample_y(self, u: float) -> float:
        return ((self._ay * u + self._by) * u + self._cy) * u

    def _slope_x(self, u: float) -> float:
        return (3.0 * self._ax * u + 2.0 * self._bx) * u + self._cx

    def _solve_u(self, t: float) -> float:
        u = t
        for _ in range(_NEWTON_ITERATIONS):
            slope = self._slope_x(u)
            if slope == 0.0:
                break
            u -= (self._sample_x(u) - t) / slope
        return u

    # --- Public -----------------------------------------------------------
    def evaluate(self, t: float) -> float:
        if t == 0:
            return 0.0
        if t == 1:
            return 1.0
        return self._sample_y(self._solve_u(t))

    __call__ = evaluate

    @property
    def control_points(self) -> tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EasingCurve):
            return NotImplemented
        return self.control_points == other.control_points

    def __hash__(self) -> int:
        return hash(self.control_points)

    def __repr__(self) -> str:
        return "EasingCurve(%g, %g, %g, %g)" % self.control_points


# Published CSS / Penner approximations
EASINGS: Dict[str, EasingCurve] = {
    "linear":         EasingCurve(0.0, 0.0, 1.0, 1.0),
    "easeIn":         EasingCurve(0.42, 0.0, 1.0, 1.0),
    "easeOut":        EasingCurve(0.0, 0.0, 0.58, 1.0),
    "easeInOut":      EasingCurve(0.42, 0.0, 0.58, 1.0),
    "easeInQuad":     EasingCurve(0.55, 0.085, 0.68, 0.53),
    "easeOutQuad":    EasingCurve(0.25, 0.46, 0.45, 0.94),
    "easeInOutQuad":  EasingCurve(0.455, 0.03, 0.515, 0.955),
    "easeInCubic":    EasingCurve(0.55, 0.055, 0.675, 0.19),
    "easeOutCubic":   EasingCurve(0.215, 0.61, 0.355, 1.0),
    "easeInOutCubic": EasingCurve(0.645, 0.045, 0.355, 1.0),
    "easeInQuart":    EasingCurve(0.895, 0.03, 0.685, 0.22),
    "easeOutQuart":   EasingCurve(0.165, 0.84, 0.44, 1.0),
    "easeInOutQuart": EasingCurve(0.77, 0.0, 0.175, 1.0),
    "easeInBack":     EasingCurve(0.6, -0.28, 0.735, 0.045),
    "easeOutBack":    EasingCurve(0.175, 0.885, 0.32, 1.275),
    "easeInOutBack":  EasingCurve(0.68, -0.55, 0.265, 1.55),
}


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _default_curve(default: str) -> EasingCurve:
    return EASINGS.get(default) or EASINGS[DEFAULT_EASING]


def get_easing(spec: Any, default: str = DEFAULT_EASING) -> EasingCurve:
    """Resolve a catalog name or [x1, y1, x2, y2] list to a curve.

    Never raises: anything unrecognised falls back to `default`.
    """
    if not spec:
        return _default_curve(default)

    if isinstance(spec, str):
        curve = EASINGS.get(spec)
        if curve is None:
            logger.warning("Unknown easing %r, using %s", spec, default)
            return _default_curve(default)
        return curve

    if isinstance(spec, Sequence) and len(spec) == 4 and all(_is_number(v) for v in spec):
        return EasingCurve(*spec)

    logger.warning("Invalid easing format %r, using %s", spec, default)
    return _default_curve(default)


@dataclass(frozen=True)
class EasingSet:
    translate: EasingCurve
    scale: EasingCurve
    rotate: EasingCurve

    def for_type(self, kind: str) -> EasingCurve:
        return getattr(self, kind)


def resolve_easing_set(spec: Any, default: str = DEFAULT_EASING) -> EasingSet:
    """
    Turn the three accepted easing shapes into concrete per-type curves:
      - "easeInOut"                         -> same curve for all types
      - [x1, y1, x2, y2]                    -> same custom curve for all types
      - {translate: .., scale: .., rotate: ..} -> per-type, missing keys use default
    """
    if isinstance(spec, Mapping):
        return EasingSet(
            translate=get_easing(spec.get("translate"), default),
            scale=get_easing(spec.get("scale"), default),
            rotate=get_easing(spec.get("rotate"), default),
        )
    curve = get_easing(spec, default)
    return EasingSet(translate=curve, scale=curve, rotate=curve)
