"""Rig objects: positioned rectangles, the claw rig and the prizes it carries."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from claw_machine.collision import Box
from claw_machine.config import MachineGeometry, PrizeDef

if TYPE_CHECKING:
    from claw_machine.animator import Motion

_HOME_KEYS = ("x", "y", "w", "h")


@dataclass(eq=False)
class RigObject:
    """A positioned, sized, z-ordered rectangle in machine space.

    ``followers`` move in lockstep with this object for good (the rail
    carries the arm joint). ``payload`` is a borrowed reference to the
    prize currently being carried, cleared on detach. ``home`` is
    snapshotted at construction.
    """

    name: str = ""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    z: int = 0
    angle: float = 0.0
    home: dict[str, float] = field(default_factory=dict)
    followers: list[RigObject] = field(default_factory=list)
    payload: RigObject | None = None
    motion: Motion | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        snapshot = {key: getattr(self, key) for key in _HOME_KEYS}
        snapshot.update(self.home)
        self.home = snapshot

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.w, self.h)

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2

    @property
    def moving(self) -> bool:
        return self.motion is not None

    def set_home(self, **values: float) -> None:
        self.home.update(values)

    def carried(self) -> list[RigObject]:
        """Objects that receive this object's motion deltas."""
        if self.payload is None:
            return list(self.followers)
        return [*self.followers, self.payload]


class PrizeState(Enum):
    RESTING = "resting"
    TARGETED = "targeted"
    GRABBED = "grabbed"
    DROPPED = "dropped"
    RELEASED = "released"
    SELECTED = "selected"
    COLLECTED = "collected"


# States that survive a reshuffle.
IMMUNE_STATES = frozenset(
    {PrizeState.TARGETED, PrizeState.GRABBED, PrizeState.RELEASED, PrizeState.SELECTED}
)
# States in which a prize lies in the bed and can be picked up.
BED_STATES = frozenset({PrizeState.RESTING, PrizeState.DROPPED})


def normalize_angle(degrees: float) -> int:
    """Map an angle in degrees to the [-180, 180] display convention."""
    adjusted = round(degrees) % 360
    return -adjusted if adjusted < 180 else 360 - adjusted


@dataclass(eq=False)
class Prize(RigObject):
    definition: PrizeDef | None = None
    kind: str = "custom"
    slot: int = -1
    state: PrizeState = PrizeState.RESTING
    claw_pos: tuple[float, float] | None = None
    origin: tuple[float, float] | None = None

    @property
    def id(self) -> str:
        return self.definition.id if self.definition is not None else self.kind

    @property
    def in_bed(self) -> bool:
        return self.state in BED_STATES

    @property
    def immune(self) -> bool:
        return self.state in IMMUNE_STATES

    def aim(self, claw_x: float, claw_y: float) -> None:
        """Record where the claw will close on this prize."""
        self.claw_pos = (claw_x, claw_y)
        self.origin = (claw_x - self.x, claw_y - self.y)

    def tilt_toward_claw(self) -> float:
        """Rotate so the prize hangs from the claw contact point."""
        if self.claw_pos is None:
            return self.angle
        cx, cy = self.center
        rad = math.atan2(cy - self.claw_pos[1], cx - self.claw_pos[0])
        self.angle = normalize_angle(round(math.degrees(rad)) - 90)
        return self.angle

    def payload_dict(self) -> dict[str, Any]:
        if self.definition is not None:
            return self.definition.to_dict()
        return {"id": self.kind, "name": self.kind, "rarity": "common"}


class Rig:
    """Horizontal rail, vertical arm joint and telescoping arm.

    The three always share one payload: either the grabbed prize or
    nothing.
    """

    def __init__(self, geometry: MachineGeometry) -> None:
        self.geometry = geometry
        self.joint = RigObject(name="joint", w=geometry.joint_size[0], h=geometry.joint_size[1])
        self.rail = RigObject(
            name="rail",
            w=geometry.rail_size[0],
            h=geometry.rail_size[1],
            followers=[self.joint],
        )
        self.arm = RigObject(name="arm", w=geometry.joint_size[0], h=geometry.arm_rest_length)
        self.claw_open = False
        self.missed = False
        self.shadow_scale = 0.5
        self.resize_shadow(self.arm)

    @property
    def parts(self) -> tuple[RigObject, RigObject, RigObject]:
        return self.rail, self.joint, self.arm

    @property
    def carrying(self) -> Prize | None:
        payload = self.arm.payload
        return payload if isinstance(payload, Prize) else None

    @property
    def busy(self) -> bool:
        return any(part.moving for part in self.parts)

    def attach(self, prize: Prize) -> None:
        for part in self.parts:
            part.payload = prize

    def detach(self) -> Prize | None:
        prize = self.carrying
        for part in self.parts:
            part.payload = None
        return prize

    def resize_shadow(self, obj: RigObject) -> None:
        self.shadow_scale = 0.5 + obj.h / self.geometry.max_arm_length / 2
