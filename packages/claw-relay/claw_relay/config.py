"""Relay server configuration read from the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

logger = logging.getLogger(__name__)

WEBHOOK_SUFFIX = "/claw-webhook"


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    """Integer from ``env[name]``. Missing, unparsable or zero means default."""
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not an integer", name, raw)
        return default
    return value or default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not a number", name, raw)
        return default


@dataclass(frozen=True)
class RelayConfig:
    """Immutable relay settings.

    Attributes:
        host: Interface to bind.
        port: TCP port to listen on.
        bot_webhook_url: Bot endpoint receiving prize webhooks. Empty disables
            webhooks and bot lookups.
        webhook_secret: Shared secret sent as ``X-Webhook-Secret``.
        max_tries: Tries per user per UTC day.
        claw_strength: Default grab success percentage.
        drop_chance: Default slip percentage.
        cache_ttl: Seconds bot settings and items stay cached.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    bot_webhook_url: str = ""
    webhook_secret: str = "your-secret-key"
    max_tries: int = 5
    claw_strength: int = 70
    drop_chance: int = 20
    cache_ttl: float = 30.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        env = os.environ if environ is None else environ
        return cls(
            port=_env_int(env, "PORT", 3000),
            bot_webhook_url=env.get("BOT_WEBHOOK_URL", ""),
            webhook_secret=env.get("WEBHOOK_SECRET") or "your-secret-key",
            max_tries=_env_int(env, "MAX_TRIES", 5),
            claw_strength=_env_int(env, "CLAW_STRENGTH", 70),
            drop_chance=_env_int(env, "DROP_CHANCE", 20),
            cache_ttl=_env_float(env, "CACHE_TTL", 30.0),
        )

    @property
    def bot_base_url(self) -> str:
        return self.bot_webhook_url.replace(WEBHOOK_SUFFIX, "")

    def gameplay(self) -> dict[str, Any]:
        return {
            "maxTries": self.max_tries,
            "clawStrength": self.claw_strength,
            "dropChance": self.drop_chance,
        }

    def default_settings(self) -> dict[str, Any]:
        """Settings served when the bot has none to give."""
        return {
            "gameplay": self.gameplay(),
            "prizes": {
                "selectedCategories": ["all"],
                "selectedRarities": [
                    "common", "uncommon", "rare", "epic", "legendary", "mythic",
                ],
            },
            "costs": {"playCost": 100, "currency": "gold"},
        }
