"""Glow rarities rolled onto won prizes, and the bonuses they pay out."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

NO_GLOW = "none"


@dataclass(frozen=True)
class GlowTier:
    rarity: str
    name: str
    chance: float
    gold_bonus: int
    xp_bonus: int
    color: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "chance": self.chance,
            "name": self.name,
            "goldBonus": self.gold_bonus,
            "xpBonus": self.xp_bonus,
            "color": self.color,
        }


# Roll order matters: chances accumulate top to bottom.
GLOW_TIERS: tuple[GlowTier, ...] = (
    GlowTier(NO_GLOW, "No Glow", 50, 0, 0, None),
    GlowTier("common", "Common Glow", 25, 50, 10, "#888888"),
    GlowTier("uncommon", "Uncommon Glow", 12, 150, 25, "#2ecc71"),
    GlowTier("rare", "Rare Glow", 7, 300, 50, "#3498db"),
    GlowTier("epic", "Epic Glow", 4, 600, 100, "#9b59b6"),
    GlowTier("legendary", "Legendary Glow", 1.5, 1500, 250, "#f1c40f"),
    GlowTier("mythic", "Mythic Glow", 0.5, 5000, 500, "#e74c3c"),
)
GLOW_RARITIES: dict[str, GlowTier] = {tier.rarity: tier for tier in GLOW_TIERS}


def glow_table() -> dict[str, dict[str, Any]]:
    return {tier.rarity: tier.to_dict() for tier in GLOW_TIERS}


def roll_glow(rng: random.Random) -> str:
    """Cumulative roll over the glow table. Falls back to no glow."""
    roll = rng.random() * 100
    cumulative = 0.0
    for tier in GLOW_TIERS:
        cumulative += tier.chance
        if roll < cumulative:
            return tier.rarity
    return NO_GLOW


def glow_bonus(rarity: Any) -> tuple[int, int]:
    """(gold, xp) paid for a prize with this glow. Unknown glows pay nothing."""
    tier = GLOW_RARITIES.get(rarity) if isinstance(rarity, str) else None
    if tier is None:
        return 0, 0
    return tier.gold_bonus, tier.xp_bonus
