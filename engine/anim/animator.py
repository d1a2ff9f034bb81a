from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from engine.anim.easing import DEFAULT_EASING, EasingSet, resolve_easing_set
from engine.anim.palette import RGB, Palette
from engine.anim.pose import DEFAULT_POSE, TRANSFORM_TYPES, Pose, lerp_vector, merge_pose

DEFAULT_BPM = 120.0


class ConfigurationError(ValueError):
    """Structural problem in an animation config. `index` is the offending transition, if any."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        self.index = index
        if index is not None:
            message = f"transition {index}: {message}"
        super().__init__(message)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


@dataclass(frozen=True)
class Transition:
    duration: float     # seconds
    easing: EasingSet
    target: Pose
    beats: float = 1.0


@dataclass(frozen=True)
class AnimatorState:
    index: int
    progress: float
    current_pose: Pose
    color_index: Optional[int]
    elapsed: float


def _parse_transition(
    index: int,
    spec: Any,
    baseline: Pose,
    seconds_per_beat: float,
    default_easing: str,
) -> Transition:
    if not isinstance(spec, Mapping):
        raise ConfigurationError(f"expected a mapping, got {type(spec).__name__}", index)

    beats = spec.get("beats")
    if beats is None:
        beats = 1.0
    if not _is_number(beats):
        raise ConfigurationError(f"'beats' must be a finite number, got {beats!r}", index)
    if beats <= 0:
        raise ConfigurationError(f"'beats' must be > 0, got {beats!r}", index)

    return Transition(
        duration=float(beats) * seconds_per_beat,
        easing=resolve_easing_set(spec.get("easing"), default_easing),
        target=merge_pose(baseline, spec.get("transforms")),
        beats=float(beats),
    )


def parse_transitions(
    specs: Sequence[Any],
    start_pose: Pose,
    seconds_per_beat: float,
    default_easing: str = DEFAULT_EASING,
) -> Tuple[Transition, ...]:
    """
    Fold the raw transition list into resolved transitions.

    The accumulator is the running baseline pose. Each target is merged onto
    the previous target (not the start pose), so overrides are cumulative.
    The baseline's colour index carries forward until a transition sets a new one.
    """
    out = []
    baseline = start_pose
    for i, spec in enumerate(specs):
        tr = _parse_transition(i, spec, baseline, seconds_per_beat, default_easing)
        out.append(tr)
        baseline = tr.target
    return tuple(out)


class TransformAnimator:
    """
    Beat-synchronized, looping pose animator for one moving object.

    Build once from config, then per frame:
        anim.advance(dt)
        pose = anim.current_interpolated_pose()

    With no transitions the animator is inert and always reports its start pose.
    """

    def __init__(
        self,
        bpm: Optional[float] = DEFAULT_BPM,
        start_state: Optional[Mapping[str, Any]] = None,
        transitions: Optional[Sequence[Any]] = None,
        color_palette: Optional[Iterable[Any]] = None,
        *,
        default_easing: str = DEFAULT_EASING,
        carry_remainder: bool = False,
    ) -> None:
        if bpm is None:
            bpm = DEFAULT_BPM
        if not _is_number(bpm) or bpm <= 0:
            raise ConfigurationError(f"bpm must be a positive finite number, got {bpm!r}")
        if transitions is None:
            transitions = []
        if not isinstance(transitions, (list, tuple)):
            raise ConfigurationError(f"'transitions' must be a list, got {type(transitions).__name__}")

        self.bpm = float(bpm)
        self.seconds_per_beat = 60.0 / self.bpm
        if isinstance(color_palette, Palette):
            self.palette = color_palette
        else:
            self.palette = Palette(color_palette or ())
        self.carry_remainder = bool(carry_remainder)

        self.start_pose: Pose = merge_pose(DEFAULT_POSE, start_state)
        self.transitions: Tuple[Transition, ...] = parse_transitions(
            transitions, self.start_pose, self.seconds_per_beat, default_easing
        )

        self.reset()

    # --- Constructors -----------------------------------------------------
    @classmethod
    def from_config(
        cls,
        cfg: Mapping[str, Any],
        *,
        bpm: Optional[float] = None,
        color_palette: Optional[Iterable[Any]] = None,
        default_easing: str = DEFAULT_EASING,
        carry_remainder: bool = False,
    ) -> "TransformAnimator":
        """Build from {bpm?, colorPalette?, startState?, transitions?}. Keyword args win."""
        if not isinstance(cfg, Mapping):
            raise ConfigurationError(f"animation config must be a mapping, got {type(cfg).__name__}")
        return cls(
            bpm=bpm if bpm is not None else cfg.get("bpm"),
            start_state=cfg.get("startState"),
            transitions=cfg.get("transitions"),
            color_palette=color_palette if color_palette is not None else cfg.get("colorPalette"),
            default_easing=default_easing,
            carry_remainder=carry_remainder,
        )

    # --- State ------------------------------------------------------------
    @property
    def is_inert(self) -> bool:
        return not self.transitions

    @property
    def cycle_duration(self) -> float:
        return sum(tr.duration for tr in self.transitions)

    def reset(self) -> None:
        self.index = 0
        self.progress = 0.0
        self.current_pose = self.start_pose
        self.color_index = self.start_pose.color_index
        self.elapsed = 0.0

    def state(self) -> AnimatorState:
        return AnimatorState(
            index=self.index,
            progress=self.progress,
            current_pose=self.current_pose,
            color_index=self.color_index,
            elapsed=self.elapsed,
        )

    # --- Loop -------------------------------------------------------------
    def advance(self, dt: float) -> None:
        if not self.transitions or not math.isfinite(dt):
            return

        self.elapsed += dt
        self.progress += dt / self.transitions[self.index].duration
        if self.progress < 1.0:
            return

        if not self.carry_remainder:
            # Overshoot past the boundary is dropped
            self.progress = 0.0
            self._next_transition()
            return

        leftover = (self.progress - 1.0) * self.transitions[self.index].duration
        cycle = self.cycle_duration
        if leftover >= 2 * cycle:
            # Whole cycles land on the same transition; walk one of them so every colour step still fires
            leftover = cycle + math.fmod(leftover, cycle)

        while True:
            self._next_transition()
            duration = self.transitions[self.index].duration
            if leftover < duration:
                self.progress = leftover / duration
                return
            leftover -= duration

    def _next_transition(self) -> None:
        completed = self.transitions[self.index]
        self.index += 1
        if self.index >= len(self.transitions):
            self.index = 0
            self.current_pose = self.start_pose
        else:
            self.current_pose = completed.target

        # Colour is a step at the boundary, never interpolated
        color = self.transitions[self.index].target.color_index
        if color is not None:
            self.color_index = color

    def current_interpolated_pose(self) -> Pose:
        if not self.transitions:
            return self.start_pose

        tr = self.transitions[self.index]
        parts = {}
        for kind in TRANSFORM_TYPES:
            eased = tr.easing.for_type(kind)(self.progress)
            parts[kind] = lerp_vector(getattr(self.current_pose, kind), getattr(tr.target, kind), eased)
        return Pose(color_index=self.color_index, **parts)

    # --- Diagnostics ------------------------------------------------------
    def current_color(self) -> Optional[RGB]:
        return self.palette.rgb(self.color_index)

    def current_beat(self) -> float:
        return self.elapsed / self.seconds_per_beat

    def __repr__(self) -> str:
        return (
            f"TransformAnimator(bpm={self.bpm:g}, transitions={len(self.transitions)}, "
            f"index={self.index}, progress={self.progress:.3f})"
        )
