"""Shared types, control events and exceptions for the claw machine."""

from __future__ import annotations

from dataclasses import dataclass

HORIZONTAL = "horizontal"
VERTICAL = "vertical"
CONTROLS = (HORIZONTAL, VERTICAL)

PRESS = "press"
RELEASE = "release"
ACTIONS = (PRESS, RELEASE)


@dataclass(frozen=True, slots=True)
class ControlEvent:
    """A press or release of one of the two machine controls."""

    control: str
    action: str

    def __post_init__(self) -> None:
        if self.control not in CONTROLS:
            raise ValueError(f"Unknown control {self.control!r}")
        if self.action not in ACTIONS:
            raise ValueError(f"Unknown action {self.action!r}")


class ClawError(Exception):
    """Base class for claw machine errors."""


class ConfigError(ClawError, ValueError):
    """Raised when game options are invalid. No state is changed."""


class ClawBusyError(ClawError):
    """Raised when an operation needs the machine idle but a turn is running."""
