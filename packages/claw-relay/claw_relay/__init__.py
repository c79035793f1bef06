"""claw-relay - Session, try and prize relay for the claw machine."""
from __future__ import annotations

from claw_relay.app import create_app
from claw_relay.bot import BotClient, HttpBotClient
from claw_relay.cache import TimedValue
from claw_relay.config import RelayConfig
from claw_relay.glow import GLOW_RARITIES, GLOW_TIERS, GlowTier, glow_bonus, roll_glow
from claw_relay.store import MemoryStore, Session

__all__ = [
    "BotClient",
    "GLOW_RARITIES",
    "GLOW_TIERS",
    "GlowTier",
    "HttpBotClient",
    "MemoryStore",
    "RelayConfig",
    "Session",
    "TimedValue",
    "create_app",
    "glow_bonus",
    "roll_glow",
]
