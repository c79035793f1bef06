"""FastAPI relay between the claw machine page and the inventory bot.

Tracks play sessions and daily tries in memory, rolls prize glows, and
forwards won prizes to the bot as webhooks.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from claw_relay.bot import BotClient, HttpBotClient
from claw_relay.cache import TimedValue
from claw_relay.config import RelayConfig
from claw_relay.glow import GLOW_RARITIES, glow_bonus, glow_table, roll_glow
from claw_relay.store import MemoryStore

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════
#                  REQUEST BODIES
# ═══════════════════════════════════════════════════════

class _Body(BaseModel):
    # Identifiers may arrive as numbers from some bot clients.
    model_config = ConfigDict(coerce_numbers_to_str=True)


class SessionRequest(_Body):
    sessionId: str | None = None
    userId: str | None = None
    channelId: str | None = None
    guildId: str | None = None


class UseTryRequest(_Body):
    userId: str | None = None


class PrizeRequest(_Body):
    sessionId: str | None = None
    prize: dict[str, Any] | None = None
    userId: str | None = None
    silent: bool | None = None


class EndSessionRequest(_Body):
    sessionId: str | None = None
    userId: str | None = None
    prizes: list[dict[str, Any]] | None = None


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": message})


# ═══════════════════════════════════════════════════════
#                       APP
# ═══════════════════════════════════════════════════════

def create_app(
    config: RelayConfig | None = None,
    bot: BotClient | None = None,
    store: MemoryStore | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Build the relay app.

    Args:
        config: Relay settings. Defaults to ``RelayConfig.from_env()``.
        bot: Bot client. Defaults to an HTTP client for the configured URL.
        store: Session and try storage. Defaults to a fresh in-memory store.
        rng: Random source for glow rolls.
        clock: Wall clock in seconds, used for timestamps, uptime and caching.
    """
    config = config if config is not None else RelayConfig.from_env()
    if bot is None:
        bot = HttpBotClient(
            config.bot_webhook_url, config.webhook_secret,
            base_url=config.bot_base_url, clock=clock,
        )
    store = store if store is not None else MemoryStore()
    rng = rng if rng is not None else random.Random()
    started = clock()
    settings_cache = TimedValue(config.cache_ttl, clock)
    items_cache = TimedValue(config.cache_ttl, clock)

    def now_ms() -> int:
        return int(clock() * 1000)

    def tries_payload(used: int) -> dict[str, Any]:
        return {
            "triesUsed": used,
            "triesRemaining": max(0, config.max_tries - used),
            "maxTries": config.max_tries,
        }

    def cached_from_bot(cache: TimedValue, endpoint: str) -> Any | None:
        value = cache.get()
        if value is not None:
            return value
        value = bot.fetch(endpoint)
        if value is not None:
            cache.set(value)
            logger.info("fetched %s from bot", endpoint)
        return value

    app = FastAPI(title="Claw Relay", description="Claw machine session relay")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.store = store
    app.state.bot = bot

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "uptime": clock() - started}

    @app.get("/api/games/claw-settings")
    def claw_settings() -> Any:
        settings = cached_from_bot(settings_cache, "/claw-settings")
        return settings if settings is not None else config.default_settings()

    @app.get("/api/items")
    def items() -> Any:
        found = cached_from_bot(items_cache, "/claw-items")
        return found if found is not None else {"items": {}}

    @app.post("/api/refresh-cache")
    def refresh_cache() -> dict[str, Any]:
        settings_cache.clear()
        items_cache.clear()
        logger.info("cache cleared")
        return {"success": True, "message": "Cache cleared"}

    @app.post("/api/claw-machine/session")
    def start_session(body: SessionRequest) -> Any:
        if not body.sessionId:
            return _bad_request("Missing sessionId")
        used = store.tries_used(body.userId)
        store.start_session(
            body.sessionId,
            user_id=body.userId,
            channel_id=body.channelId,
            guild_id=body.guildId,
            start_time=now_ms(),
        )
        payload = tries_payload(used)
        logger.info(
            "session %s started for user %s (%d/%d tries left)",
            body.sessionId, body.userId, payload["triesRemaining"], config.max_tries,
        )
        return {"success": True, **payload, "glowRarities": glow_table()}

    @app.get("/api/claw-machine/session/{session_id}")
    def get_session(session_id: str) -> dict[str, Any]:
        session = store.session(session_id)
        if session is None:
            return {"success": False, "error": "Session not found"}
        return {"success": True, "session": session.to_dict()}

    @app.post("/api/claw-machine/use-try")
    def use_try(body: UseTryRequest) -> Any:
        if not body.userId:
            return _bad_request("Missing userId")
        payload = tries_payload(store.use_try(body.userId))
        logger.info(
            "user %s used a try: %d/%d", body.userId, payload["triesUsed"], config.max_tries,
        )
        return {"success": True, **payload, "canPlay": payload["triesRemaining"] > 0}

    @app.get("/api/claw-machine/roll-glow")
    def roll() -> dict[str, Any]:
        rarity = roll_glow(rng)
        return {"success": True, "glow": {"rarity": rarity, **GLOW_RARITIES[rarity].to_dict()}}

    @app.get("/api/claw-machine/tries/{user_id}")
    def tries(user_id: str) -> dict[str, Any]:
        return {"success": True, **tries_payload(store.tries_used(user_id))}

    @app.post("/api/claw-machine/prize")
    def prize_won(body: PrizeRequest) -> Any:
        if not body.sessionId or body.prize is None:
            return _bad_request("Missing sessionId or prize")
        prize = body.prize
        logger.info(
            "prize won: %s (%s) by user %s", prize.get("name"), prize.get("rarity"), body.userId,
        )
        session = store.ensure_session(body.sessionId, body.userId)
        session.prizes.append({**prize, "wonAt": now_ms()})

        gold, xp = glow_bonus(prize.get("glow"))
        sent = bot.send_webhook("prize_won", {
            "userId": body.userId,
            "sessionId": body.sessionId,
            "prize": prize,
            "goldBonus": gold,
            "xpBonus": xp,
            "silent": body.silent,
        })
        return {"success": True, "addedToInventory": sent, "goldBonus": gold, "xpBonus": xp}

    @app.post("/api/claw-machine/end-session")
    def end_session(body: EndSessionRequest) -> dict[str, Any]:
        prizes = body.prizes or []
        logger.info("session %s ended with %d prizes", body.sessionId, len(prizes))
        session = store.session(body.sessionId) if body.sessionId else None
        if body.userId and prizes:
            bot.send_webhook("session_ended", {
                "userId": body.userId,
                "sessionId": body.sessionId,
                "prizes": prizes,
                "channelId": session.channel_id if session else None,
                "guildId": session.guild_id if session else None,
            })
        if body.sessionId:
            store.end_session(body.sessionId)
        return {"success": True}

    @app.get("/api/claw-machine/prizes/{session_id}")
    def session_prizes(session_id: str) -> dict[str, Any]:
        session = store.session(session_id)
        return {"success": True, "prizes": list(session.prizes) if session else []}

    return app
