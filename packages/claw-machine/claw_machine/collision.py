"""Claw hitbox and prize target resolution."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from claw_machine.config import MachineGeometry
    from claw_machine.rig import Prize, RigObject


@dataclass(frozen=True, slots=True)
class Box:
    x: float
    y: float
    w: float
    h: float


def overlaps(a: Box, b: Box) -> bool:
    """True if b's reference point lies strictly inside a. Edges do not count."""
    return a.x < b.x < a.x + a.w and a.y < b.y < a.y + a.h


def claw_hitbox(joint: RigObject, geometry: MachineGeometry) -> Box:
    """Where the claw lands if the arm extends fully from the joint's position."""
    return Box(
        x=joint.x + geometry.claw_offset,
        y=joint.y + geometry.max_arm_length + geometry.buffer_y + geometry.claw_offset,
        w=geometry.claw_size[0],
        h=geometry.claw_size[1],
    )


def candidates(prizes: Iterable[Prize], claw: Box) -> list[Prize]:
    return [p for p in prizes if p.in_bed and overlaps(p.box, claw)]


def resolve_target(prizes: Iterable[Prize], claw: Box) -> Prize | None:
    """Pick the overlapping bed prize with the highest slot index."""
    hits = candidates(prizes, claw)
    if not hits:
        return None
    return max(hits, key=lambda p: p.slot)
