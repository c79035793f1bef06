"""Phases of a claw turn and the tables that connect them."""
from __future__ import annotations

from enum import Enum

from claw_machine.types import HORIZONTAL, PRESS, RELEASE, VERTICAL


class Phase(Enum):
    STOPPED = "stopped"
    HOMING = "homing"
    IDLE = "idle"
    MOVING_HORIZONTAL = "moving_horizontal"
    AWAITING_VERTICAL = "awaiting_vertical"
    MOVING_VERTICAL_DOWN = "moving_vertical_down"
    GRABBING = "grabbing"
    MOVING_VERTICAL_UP = "moving_vertical_up"
    MOVING_HORIZONTAL_RETURN = "moving_horizontal_return"
    MOVING_VERTICAL_RETURN_HOME = "moving_vertical_return_home"
    DROPPING = "dropping"


# (phase, control, action) -> name of the ClawMachine handler.
# Anything not listed is ignored.
INPUTS: dict[tuple[Phase, str, str], str] = {
    (Phase.IDLE, HORIZONTAL, PRESS): "_press_horizontal",
    (Phase.MOVING_HORIZONTAL, HORIZONTAL, RELEASE): "_release_horizontal",
    (Phase.AWAITING_VERTICAL, VERTICAL, PRESS): "_press_vertical",
    (Phase.MOVING_VERTICAL_DOWN, VERTICAL, RELEASE): "_release_vertical",
}

# Automatic phases and the phase that follows once their work completes.
CONTINUATIONS: dict[Phase, Phase] = {
    Phase.HOMING: Phase.IDLE,
    Phase.MOVING_HORIZONTAL: Phase.AWAITING_VERTICAL,
    Phase.GRABBING: Phase.MOVING_VERTICAL_UP,
    Phase.MOVING_VERTICAL_UP: Phase.MOVING_HORIZONTAL_RETURN,
    Phase.MOVING_HORIZONTAL_RETURN: Phase.MOVING_VERTICAL_RETURN_HOME,
    Phase.MOVING_VERTICAL_RETURN_HOME: Phase.DROPPING,
    Phase.DROPPING: Phase.IDLE,
}

# Phases that refuse all input.
BUSY_PHASES = frozenset({
    Phase.HOMING,
    Phase.GRABBING,
    Phase.MOVING_VERTICAL_UP,
    Phase.MOVING_HORIZONTAL_RETURN,
    Phase.MOVING_VERTICAL_RETURN_HOME,
    Phase.DROPPING,
})

# Phases in which start() may be called.
RESTARTABLE = frozenset({Phase.STOPPED, Phase.IDLE})
