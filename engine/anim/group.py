from __future__ import annotations

from typing import List

from engine.anim.animator import TransformAnimator
from engine.anim.pose import Pose


class AnimatorGroup:
    """Advances a set of independent animators once per frame."""

    def __init__(self):
        self._animators: list[TransformAnimator] = []

    def add(self, animator: TransformAnimator) -> TransformAnimator:
        self._animators.append(animator)
        return animator

    def update(self, dt: float) -> None:
        for anim in self._animators:
            anim.advance(dt)

    def reset(self) -> None:
        for anim in self._animators:
            anim.reset()

    def poses(self) -> List[Pose]:
        return [anim.current_interpolated_pose() for anim in self._animators]

    def clear(self) -> None:
        self._animators.clear()

    def __len__(self) -> int:
        return len(self._animators)

    def __iter__(self):
        return iter(self._animators)
