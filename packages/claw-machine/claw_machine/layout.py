"""Prize layout: a 4x3 slot grid in the machine bed with one slot left empty."""
from __future__ import annotations

import logging
import random
from typing import Iterable, Iterator, Sequence

from claw_machine.config import MachineGeometry, PrizeDef
from claw_machine.rig import Prize

logger = logging.getLogger(__name__)

COLUMNS = 4
ROWS = 3
SLOT_COUNT = COLUMNS * ROWS
SKIP_SLOT = 8
USABLE_SLOTS = SLOT_COUNT - 1
JITTER_X = 6
JITTER_Y = 2

# kind -> ((w, h) before toy_scale, glyph)
CATALOG: dict[str, tuple[tuple[int, int], str]] = {
    "bear": ((20, 27), "\U0001F43B"),
    "bunny": ((20, 29), "\U0001F430"),
    "golem": ((20, 27), "\U0001F5FF"),
    "cucumber": ((16, 28), "\U0001F952"),
    "penguin": ((24, 22), "\U0001F427"),
    "robot": ((20, 30), "\U0001F916"),
}


def usable_slots() -> list[int]:
    return [i for i in range(SLOT_COUNT) if i != SKIP_SLOT]


def catalog_prize(kind: str) -> PrizeDef:
    _, glyph = CATALOG[kind]
    return PrizeDef(id=kind, name=kind.title(), emoji=glyph)


class PrizeLayout:
    """Places prizes into free slots and reshuffles the ones not in play.

    The supply is either a caller-provided prize list or, when empty, the
    built-in catalog with two of each kind.
    """

    def __init__(
        self,
        geometry: MachineGeometry,
        rng: random.Random,
        supply: Sequence[PrizeDef] = (),
    ) -> None:
        self._geometry = geometry
        self._rng = rng
        self._supply: list[PrizeDef] = list(supply)
        self._prizes: list[Prize] = []

    def __iter__(self) -> Iterator[Prize]:
        return iter(self._prizes)

    def __len__(self) -> int:
        return len(self._prizes)

    @property
    def prizes(self) -> list[Prize]:
        return list(self._prizes)

    @property
    def supply(self) -> list[PrizeDef]:
        return list(self._supply)

    def occupied_slots(self) -> set[int]:
        return {p.slot for p in self._prizes}

    def at_slot(self, slot: int) -> Prize | None:
        for prize in self._prizes:
            if prize.slot == slot:
                return prize
        return None

    def find(self, prize_id: str) -> Prize | None:
        for prize in self._prizes:
            if prize.id == prize_id:
                return prize
        return None

    def remove(self, prize: Prize) -> None:
        self._prizes = [p for p in self._prizes if p is not prize]

    # --- Placement ---

    def slot_position(self, slot: int, w: float, h: float) -> tuple[float, float]:
        """Jittered top-left corner for a prize of size (w, h) in ``slot``."""
        g = self._geometry
        col, row = slot % COLUMNS, slot // COLUMNS
        col_pitch = (g.width - g.corner_buffer * 3) / COLUMNS
        row_pitch = (g.bed_height - g.corner_buffer * 2) / ROWS
        x = g.corner_buffer + col * col_pitch + w / 2 + self._rng.randint(-JITTER_X, JITTER_X)
        y = (
            g.bed_top + g.corner_buffer + row * row_pitch - h / 2
            + self._rng.randint(-JITTER_Y, JITTER_Y)
        )
        return x, y

    def _place(self, slot: int, definition: PrizeDef, kind: str, size: tuple[float, float]) -> Prize:
        w, h = size
        x, y = self.slot_position(slot, w, h)
        prize = Prize(
            name=definition.name,
            x=x,
            y=y,
            w=w,
            h=h,
            definition=definition,
            kind=kind,
            slot=slot,
        )
        self._prizes.append(prize)
        return prize

    def _fill(self) -> list[Prize]:
        occupied = self.occupied_slots()
        free = [i for i in usable_slots() if i not in occupied]
        placed: list[Prize] = []
        if self._supply:
            shown = self._rng.sample(self._supply, len(self._supply))[:USABLE_SLOTS]
            for n, slot in enumerate(free):
                definition = shown[n % len(shown)]
                placed.append(
                    self._place(slot, definition, "custom", self._geometry.custom_prize_size)
                )
        else:
            kinds = [*CATALOG, *CATALOG]
            self._rng.shuffle(kinds)
            scale = self._geometry.toy_scale
            for slot in free:
                kind = kinds[slot]
                (w, h), _ = CATALOG[kind]
                placed.append(self._place(slot, catalog_prize(kind), kind, (w * scale, h * scale)))
        return placed

    def populate(self, supply: Iterable[PrizeDef] | None = None) -> list[Prize]:
        """Discard every prize and fill all usable slots from scratch."""
        if supply is not None:
            self._supply = list(supply)
        self._prizes = []
        placed = self._fill()
        logger.debug("populated %d prizes", len(placed))
        return placed

    def reshuffle(self, supply: Iterable[PrizeDef] | None = None) -> list[Prize]:
        """Evict prizes not in play, then refill the empty slots.

        Prizes being grabbed, carried, delivered or awaiting collection stay
        put. Returns the newly placed prizes.
        """
        survivors = [p for p in self._prizes if p.immune]
        evicted = len(self._prizes) - len(survivors)
        self._prizes = survivors
        if supply is not None:
            self._supply = list(supply)
        placed = self._fill()
        logger.info(
            "shuffled: evicted %d, kept %d, placed %d", evicted, len(survivors), len(placed)
        )
        return placed
