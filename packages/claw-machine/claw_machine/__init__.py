"""claw-machine - Timer-driven claw machine game core."""
from __future__ import annotations

from claw_machine import signals
from claw_machine.animator import Animator, Motion
from claw_machine.collision import Box, claw_hitbox, overlaps, resolve_target
from claw_machine.config import (
    RARITIES,
    GameOptions,
    GameplaySettings,
    MachineGeometry,
    PrizeDef,
    Timing,
)
from claw_machine.engine import Engine
from claw_machine.layout import SKIP_SLOT, SLOT_COUNT, USABLE_SLOTS, PrizeLayout
from claw_machine.machine import ClawMachine
from claw_machine.phases import Phase
from claw_machine.rig import Prize, PrizeState, Rig, RigObject
from claw_machine.signals import SignalBus
from claw_machine.themes import THEMES, Theme, random_theme
from claw_machine.types import (
    HORIZONTAL,
    PRESS,
    RELEASE,
    VERTICAL,
    ClawBusyError,
    ClawError,
    ConfigError,
    ControlEvent,
)

__all__ = [
    "Animator",
    "Box",
    "ClawBusyError",
    "ClawError",
    "ClawMachine",
    "ConfigError",
    "ControlEvent",
    "Engine",
    "GameOptions",
    "GameplaySettings",
    "HORIZONTAL",
    "MachineGeometry",
    "Motion",
    "PRESS",
    "Phase",
    "Prize",
    "PrizeDef",
    "PrizeLayout",
    "PrizeState",
    "RARITIES",
    "RELEASE",
    "Rig",
    "RigObject",
    "SKIP_SLOT",
    "SLOT_COUNT",
    "SignalBus",
    "THEMES",
    "Theme",
    "Timing",
    "USABLE_SLOTS",
    "VERTICAL",
    "claw_hitbox",
    "overlaps",
    "random_theme",
    "resolve_target",
    "signals",
]
