"""Fixed-step linear animator for rig objects."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from claw_machine.engine import Engine
    from claw_machine.rig import RigObject
    from claw_machine.timers import Timer

EXTENSION_AXIS = "h"
DEFAULT_INTERVAL_MS = 100
DEFAULT_MAX_STEP = 10.0


@dataclass(eq=False)
class Motion:
    """A running animation. Lives on ``RigObject.motion`` until it ends."""

    attr: str
    target: float
    interval_ms: int
    on_complete: Callable[[], None] | None = None
    timer: Timer | None = field(default=None, repr=False)
    ticks: int = 0


def carried_axis(attr: str) -> str:
    """Axis of a carried object that follows motion along ``attr``.

    Arm extension is drawn vertically, so it moves carried objects along y.
    """
    return "y" if attr == EXTENSION_AXIS else attr


class Animator:
    """Moves one attribute of a rig object toward a target, one bounded step per tick.

    At most one motion runs per object. Asking a moving object to move
    again finishes the running motion instead of starting a second one.
    """

    def __init__(
        self,
        engine: Engine,
        max_step: float = DEFAULT_MAX_STEP,
        on_extend: Callable[[RigObject], None] | None = None,
    ) -> None:
        if max_step <= 0:
            raise ValueError("max_step must be positive")
        self._engine = engine
        self._max_step = max_step
        self._on_extend = on_extend

    @property
    def max_step(self) -> float:
        return self._max_step

    def move(
        self,
        obj: RigObject,
        attr: str,
        target: float | None = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        on_complete: Callable[[], None] | None = None,
    ) -> Motion | None:
        """Start moving ``obj.attr`` toward ``target`` (``obj.home[attr]`` if None).

        Returns the new Motion, or None if the call finished a motion that
        was already running.
        """
        if obj.motion is not None:
            self.finish(obj)
            return None
        goal = obj.home[attr] if target is None else target
        motion = Motion(attr=attr, target=goal, interval_ms=interval_ms, on_complete=on_complete)
        obj.motion = motion
        motion.timer = self._engine.call_every(
            interval_ms, lambda: self._tick(obj, motion), name=f"{obj.name}.{attr}",
        )
        return motion

    def _tick(self, obj: RigObject, motion: Motion) -> None:
        if obj.motion is not motion:
            return
        motion.ticks += 1
        current = getattr(obj, motion.attr)
        remaining = abs(motion.target - current)
        if remaining > 0:
            if remaining <= self._max_step:
                delta = motion.target - current
                setattr(obj, motion.attr, motion.target)
            else:
                delta = self._max_step if motion.target > current else -self._max_step
                setattr(obj, motion.attr, current + delta)
            if motion.attr == EXTENSION_AXIS and self._on_extend is not None:
                self._on_extend(obj)
            axis = carried_axis(motion.attr)
            for other in obj.carried():
                setattr(other, axis, getattr(other, axis) + delta)
        if getattr(obj, motion.attr) == motion.target:
            self._end(obj, motion, complete=True)

    def _end(self, obj: RigObject, motion: Motion, complete: bool) -> None:
        if motion.timer is not None:
            motion.timer.cancel()
        obj.motion = None
        if complete and motion.on_complete is not None:
            motion.on_complete()

    def finish(self, obj: RigObject) -> bool:
        """Stop ``obj`` where it is and run the pending continuation.

        Returns False if nothing was moving.
        """
        motion = obj.motion
        if motion is None:
            return False
        self._end(obj, motion, complete=True)
        return True

    def cancel(self, obj: RigObject) -> bool:
        """Stop ``obj`` where it is, dropping the pending continuation."""
        motion = obj.motion
        if motion is None:
            return False
        self._end(obj, motion, complete=False)
        return True
