"""ClawMachine - the phase controller that drives the rig through a turn."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from claw_machine import signals
from claw_machine.animator import Animator
from claw_machine.collision import claw_hitbox, resolve_target
from claw_machine.config import (
    GameOptions,
    GameplaySettings,
    MachineGeometry,
    PrizeDef,
    Timing,
    parse_prizes,
)
from claw_machine.engine import Engine
from claw_machine.layout import PrizeLayout
from claw_machine.phases import BUSY_PHASES, CONTINUATIONS, INPUTS, RESTARTABLE, Phase
from claw_machine.rig import Prize, PrizeState, Rig
from claw_machine.timers import Timer
from claw_machine.types import (
    HORIZONTAL,
    PRESS,
    RELEASE,
    VERTICAL,
    ClawBusyError,
    ControlEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class Control:
    """One of the two machine buttons. Locked buttons ignore presses."""

    name: str
    locked: bool = True


class ClawMachine:
    """Runs claw turns on an Engine.

    A turn: press horizontal (rail travels), release (or arrive), press
    vertical (joint travels), release, then the machine grabs, lifts,
    returns and drops on its own. Each automatic phase hands over to the
    next through ``CONTINUATIONS``; inputs are looked up in ``INPUTS``.
    """

    def __init__(
        self,
        engine: Engine | None = None,
        geometry: MachineGeometry | None = None,
        timing: Timing | None = None,
    ) -> None:
        self.engine = engine if engine is not None else Engine()
        self.geometry = geometry if geometry is not None else MachineGeometry()
        self.timing = timing if timing is not None else Timing()
        self.rig = Rig(self.geometry)
        self.animator = Animator(
            self.engine, max_step=self.geometry.max_step, on_extend=self.rig.resize_shadow,
        )
        self.layout = PrizeLayout(self.geometry, self.engine.random)
        self.settings = GameplaySettings()
        self.controls = {HORIZONTAL: Control(HORIZONTAL), VERTICAL: Control(VERTICAL)}
        self.collected: list[Prize] = []
        self.collection_indicator = False
        self.show_overlay = False

        self._phase = Phase.STOPPED
        self._busy = False
        self._target: Prize | None = None
        self._slip_timer: Timer | None = None
        self._overlay_timer: Timer | None = None

    # --- Queries ---

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def target(self) -> Prize | None:
        return self._target

    @property
    def prizes(self) -> list[Prize]:
        return self.layout.prizes

    def subscribe(self, signal_name: str, handler: Callable[[str, dict[str, Any]], None]) -> None:
        self.engine.bus.subscribe(signal_name, handler)

    def prize_under_claw(self) -> Prize | None:
        """The prize a grab would pick right now, without side effects."""
        return resolve_target(self.layout, claw_hitbox(self.rig.joint, self.geometry))

    # --- Host operations ---

    def start(self, options: GameOptions | Mapping[str, Any] | None = None) -> None:
        """Load options and prizes, home the rig, then wait for input."""
        if self._phase not in RESTARTABLE:
            raise ClawBusyError(f"cannot start while {self._phase.value}")
        if not isinstance(options, GameOptions):
            options = GameOptions.from_dict(options)
        self.settings = GameplaySettings.from_options(options)
        logger.info(
            "starting: strength=%s drop=%s max_tries=%s prizes=%d",
            options.claw_strength, options.drop_chance, options.max_tries, len(options.prizes),
        )
        if self._overlay_timer is not None:
            self._overlay_timer.cancel()
            self._overlay_timer = None
        self.collected = []
        self.collection_indicator = False
        self.show_overlay = False
        self.rig.detach()
        self._target = None
        self.layout.populate(options.prizes)
        self._enter(Phase.HOMING)

    def reshuffle(self, new_prizes: Iterable[PrizeDef | Mapping[str, Any]] | None = None) -> list[Prize]:
        """Replace prizes that are not in play. Returns the newly placed ones."""
        supply = None if new_prizes is None else parse_prizes(new_prizes)
        placed = self.layout.reshuffle(supply)
        self.engine.bus.publish(signals.SHUFFLED, total=len(self.layout), placed=len(placed))
        return placed

    def handle_input(self, event: ControlEvent) -> bool:
        """Apply a control event. Returns True if it changed anything."""
        if self._busy:
            logger.debug("ignoring %s %s while %s", event.control, event.action, self._phase.value)
            return False
        handler = INPUTS.get((self._phase, event.control, event.action))
        if handler is None:
            return False
        return getattr(self, handler)()

    def press(self, control: str) -> bool:
        return self.handle_input(ControlEvent(control, PRESS))

    def release(self, control: str) -> bool:
        return self.handle_input(ControlEvent(control, RELEASE))

    def collect(self, prize: Prize | str) -> bool:
        """Take a delivered prize out of the machine."""
        if isinstance(prize, str):
            prize = next(
                (p for p in self.layout
                 if p.id == prize and p.state is PrizeState.SELECTED),
                None,
            )
        if prize is None or prize.state is not PrizeState.SELECTED:
            return False
        g = self.geometry
        prize.state = PrizeState.COLLECTED
        prize.x = g.width / 2 - prize.w / 2
        prize.y = g.height / 2 - prize.h / 2
        prize.z = 7
        prize.angle = 0
        prize.origin = None
        self.layout.remove(prize)
        self.collected.append(prize)
        self.show_overlay = True
        logger.info("collected %s (%d so far)", prize.id, len(self.collected))
        self.engine.bus.publish(
            signals.PRIZE_COLLECTED, prize=prize.payload_dict(), collected=len(self.collected),
        )
        if self._overlay_timer is not None:
            self._overlay_timer.cancel()
        self._overlay_timer = self.engine.call_later(
            self.timing.overlay, self._hide_overlay, name="overlay",
        )
        return True

    def _hide_overlay(self) -> None:
        self._overlay_timer = None
        self.show_overlay = False
        self.collection_indicator = any(p.state is PrizeState.SELECTED for p in self.layout)

    # --- Phase plumbing ---

    def _enter(self, phase: Phase) -> None:
        previous = self._phase
        self._phase = phase
        self._busy = phase in BUSY_PHASES
        logger.debug("phase %s -> %s", previous.value, phase.value)
        entry = getattr(self, f"_on_{phase.value}", None)
        if entry is not None:
            entry(previous)

    def _advance_from(self, phase: Phase) -> None:
        # Stale continuations (the phase already moved on) are dropped.
        if self._phase is phase:
            self._enter(CONTINUATIONS[phase])

    def _then(self, phase: Phase) -> Callable[[], None]:
        return lambda: self._advance_from(phase)

    # --- Phase entries ---

    def _on_homing(self, previous: Phase) -> None:
        g, t = self.geometry, self.timing
        for control in self.controls.values():
            control.locked = True
        self.animator.move(
            self.rig.joint, "y", g.joint_home_y, interval_ms=t.homing_interval,
            on_complete=lambda: self.animator.move(
                self.rig.rail, "x", g.buffer_x, interval_ms=t.homing_interval,
                on_complete=self._homed,
            ),
        )

    def _homed(self) -> None:
        joint, rail = self.rig.joint, self.rig.rail
        joint.set_home(x=joint.x, y=joint.y)
        rail.set_home(x=rail.x)
        self._advance_from(Phase.HOMING)

    def _on_idle(self, previous: Phase) -> None:
        self.controls[HORIZONTAL].locked = False
        self.controls[VERTICAL].locked = True
        self.rig.claw_open = False
        if previous is Phase.HOMING:
            self.engine.bus.publish(signals.READY, prizes=len(self.layout))
        elif previous is Phase.DROPPING:
            self.engine.bus.publish(
                signals.TURN_FINISHED,
                tries_used=self.settings.tries_used,
                tries_remaining=self.settings.tries_remaining,
                missed=self.rig.missed,
            )

    def _on_moving_horizontal(self, previous: Phase) -> None:
        self.animator.move(
            self.rig.rail, "x", self.geometry.rail_far_x,
            interval_ms=self.timing.move_interval,
            on_complete=self._then(Phase.MOVING_HORIZONTAL),
        )

    def _on_awaiting_vertical(self, previous: Phase) -> None:
        self.controls[HORIZONTAL].locked = True
        self.controls[VERTICAL].locked = False

    def _on_moving_vertical_down(self, previous: Phase) -> None:
        self.animator.move(
            self.rig.joint, "y", self.geometry.buffer_y, interval_ms=self.timing.move_interval,
        )

    def _on_grabbing(self, previous: Phase) -> None:
        self.controls[VERTICAL].locked = True
        claw = claw_hitbox(self.rig.joint, self.geometry)
        target = resolve_target(self.layout, claw)
        if target is not None:
            target.aim(claw.x, claw.y)
            target.state = PrizeState.TARGETED
            logger.debug("claw over %s (slot %d)", target.id, target.slot)
        self._target = target
        self.engine.call_later(self.timing.settle_delay, self._extend_arm, name="settle")

    def _extend_arm(self) -> None:
        self.rig.claw_open = True
        self.animator.move(
            self.rig.arm, "h", self.geometry.max_arm_length,
            interval_ms=self.timing.move_interval,
            on_complete=lambda: self.engine.call_later(
                self.timing.grab_delay, self._close_claw, name="grab",
            ),
        )

    def _close_claw(self) -> None:
        self.rig.claw_open = False
        self._grab()
        self._advance_from(Phase.GRABBING)

    def _roll(self) -> float:
        return self.engine.random.random() * 100

    def _grab(self) -> None:
        target = self._target
        if target is None:
            self.rig.missed = True
            logger.info("grab missed: nothing under the claw")
            self.engine.bus.publish(signals.GRAB_MISSED, prize=None)
            return

        roll = self._roll()
        success = roll < self.settings.claw_strength
        logger.debug(
            "grab roll=%.1f strength=%s success=%s", roll, self.settings.claw_strength, success,
        )
        if not success:
            self.rig.missed = True
            target.state = PrizeState.RESTING
            self._target = None
            logger.info("grab missed: weak grip on %s", target.id)
            self.engine.bus.publish(signals.GRAB_MISSED, prize=target.payload_dict())
            return

        self.rig.attach(target)
        target.tilt_toward_claw()
        target.state = PrizeState.GRABBED
        self.engine.bus.publish(signals.PRIZE_GRABBED, prize=target.payload_dict())

        if self._roll() < self.settings.drop_chance:
            lo, hi = self.timing.slip_window
            delay = lo + self.engine.random.random() * (hi - lo)
            logger.debug("%s will slip after %.0fms", target.id, delay)
            self._slip_timer = self.engine.call_later(
                delay, lambda: self._slip(target), name="slip",
            )

    def _slip(self, prize: Prize) -> None:
        self._slip_timer = None
        if prize.state is not PrizeState.GRABBED or self.rig.carrying is not prize:
            logger.debug("slip of %s skipped: no longer held", prize.id)
            return
        self.rig.detach()
        prize.state = PrizeState.DROPPED
        prize.z = 1
        self.animator.move(
            prize, "y", self.geometry.slip_rest_y, interval_ms=self.timing.slip_fall_interval,
        )
        self._target = None
        logger.info("%s slipped out of the claw", prize.id)
        self.engine.bus.publish(signals.PRIZE_SLIPPED, prize=prize.payload_dict())

    def _on_moving_vertical_up(self, previous: Phase) -> None:
        self.animator.move(
            self.rig.arm, "h", interval_ms=self.timing.move_interval,
            on_complete=self._then(Phase.MOVING_VERTICAL_UP),
        )

    def _on_moving_horizontal_return(self, previous: Phase) -> None:
        self.animator.move(
            self.rig.rail, "x", interval_ms=self.timing.move_interval,
            on_complete=self._then(Phase.MOVING_HORIZONTAL_RETURN),
        )

    def _on_moving_vertical_return_home(self, previous: Phase) -> None:
        self.animator.move(
            self.rig.joint, "y", interval_ms=self.timing.move_interval,
            on_complete=self._then(Phase.MOVING_VERTICAL_RETURN_HOME),
        )

    def _on_dropping(self, previous: Phase) -> None:
        self.rig.claw_open = True
        if self._slip_timer is not None:
            self._slip_timer.cancel()
            self._slip_timer = None
        prize = self.rig.detach()
        if prize is not None:
            prize.state = PrizeState.RELEASED
            prize.z = 3
            self.animator.move(
                prize, "y", self.geometry.height - prize.h - self.geometry.shelf_margin,
                interval_ms=self.timing.deliver_interval,
            )
        self.engine.call_later(self.timing.drop_settle, self._settle, name="drop")

    def _settle(self) -> None:
        self.rig.claw_open = False
        prize = self._target
        self._target = None
        if prize is not None and prize.state is PrizeState.RELEASED:
            prize.state = PrizeState.SELECTED
            self.collection_indicator = True
            logger.info("delivered %s", prize.id)
            self.engine.bus.publish(signals.PRIZE_DELIVERED, prize=prize.payload_dict())
        self._advance_from(Phase.DROPPING)

    # --- Input handlers ---

    def _press_horizontal(self) -> bool:
        if self.controls[HORIZONTAL].locked:
            return False
        s = self.settings
        if s.exhausted:
            logger.info("no tries left (%d/%d)", s.tries_used, s.max_tries)
            self.engine.bus.publish(
                signals.NO_TRIES_LEFT, tries_used=s.tries_used, max_tries=s.max_tries,
            )
            return False
        s.tries_used += 1
        logger.info("try %d/%s", s.tries_used, s.max_tries or "unlimited")
        self.engine.bus.publish(
            signals.TRY_USED,
            tries_used=s.tries_used,
            max_tries=s.max_tries,
            tries_remaining=s.tries_remaining,
        )
        self.rig.missed = False
        self._enter(Phase.MOVING_HORIZONTAL)
        return True

    def _release_horizontal(self) -> bool:
        if not self.animator.finish(self.rig.rail):
            self._advance_from(Phase.MOVING_HORIZONTAL)
        return True

    def _press_vertical(self) -> bool:
        if self.controls[VERTICAL].locked:
            return False
        self._enter(Phase.MOVING_VERTICAL_DOWN)
        return True

    def _release_vertical(self) -> bool:
        self.animator.cancel(self.rig.joint)
        self._enter(Phase.GRABBING)
        return True
