"""HTTP tests for the relay app, with a fake bot and a settable clock."""
import random

import pytest
from fastapi.testclient import TestClient

from claw_relay import MemoryStore, RelayConfig, create_app


class FakeBot:
    """BotClient that records webhooks and serves canned documents."""

    def __init__(self, accept=True):
        self.accept = accept
        self.webhooks = []
        self.documents = {}
        self.fetches = []

    def send_webhook(self, event, data):
        self.webhooks.append((event, data))
        return self.accept

    def fetch(self, endpoint):
        self.fetches.append(endpoint)
        return self.documents.get(endpoint)


class Clock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class Days:
    def __init__(self, day="2026-03-01"):
        self.day = day

    def __call__(self):
        return self.day


class World:
    """Everything a test may need to poke at."""

    def __init__(self, max_tries=3):
        self.bot = FakeBot()
        self.clock = Clock()
        self.days = Days()
        self.store = MemoryStore(today=self.days)
        self.config = RelayConfig(max_tries=max_tries, cache_ttl=30)
        app = create_app(
            self.config, bot=self.bot, store=self.store,
            rng=random.Random(5), clock=self.clock,
        )
        self.client = TestClient(app)


@pytest.fixture
def world():
    return World()


class TestHealth:
    def test_reports_uptime(self, world):
        world.clock.now += 42
        body = world.client.get("/health").json()
        assert body == {"status": "ok", "uptime": 42}


class TestSettings:
    """Bot settings and items, cached for the TTL."""

    def test_falls_back_to_defaults(self, world):
        body = world.client.get("/api/games/claw-settings").json()
        assert body["gameplay"] == {"maxTries": 3, "clawStrength": 70, "dropChance": 20}
        assert body["costs"] == {"playCost": 100, "currency": "gold"}

    def test_bot_settings_are_cached(self, world):
        world.bot.documents["/claw-settings"] = {"gameplay": {"maxTries": 9}}

        first = world.client.get("/api/games/claw-settings").json()
        world.bot.documents["/claw-settings"] = {"gameplay": {"maxTries": 1}}
        second = world.client.get("/api/games/claw-settings").json()

        assert first == second == {"gameplay": {"maxTries": 9}}
        assert world.bot.fetches == ["/claw-settings"]

    def test_cache_expires(self, world):
        world.bot.documents["/claw-settings"] = {"v": 1}
        world.client.get("/api/games/claw-settings")
        world.bot.documents["/claw-settings"] = {"v": 2}

        world.clock.now += 30
        assert world.client.get("/api/games/claw-settings").json() == {"v": 2}

    def test_refresh_clears_cache(self, world):
        world.bot.documents["/claw-items"] = {"items": {"a": 1}}
        world.client.get("/api/items")
        world.bot.documents["/claw-items"] = {"items": {"b": 2}}

        assert world.client.post("/api/refresh-cache").json()["success"]
        assert world.client.get("/api/items").json() == {"items": {"b": 2}}

    def test_items_fallback(self, world):
        assert world.client.get("/api/items").json() == {"items": {}}


class TestSessions:
    def test_start_session(self, world):
        resp = world.client.post(
            "/api/claw-machine/session",
            json={"sessionId": "s1", "userId": "u1", "channelId": "c1", "guildId": "g1"},
        )
        body = resp.json()
        assert resp.status_code == 200
        assert body["success"]
        assert (body["triesUsed"], body["triesRemaining"], body["maxTries"]) == (0, 3, 3)
        assert body["glowRarities"]["legendary"]["goldBonus"] == 1500

        session = world.client.get("/api/claw-machine/session/s1").json()["session"]
        assert session == {
            "userId": "u1", "channelId": "c1", "guildId": "g1",
            "prizes": [], "startTime": 1_000_000,
        }

    def test_missing_session_id(self, world):
        resp = world.client.post("/api/claw-machine/session", json={"userId": "u1"})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Missing sessionId"}

    def test_unknown_session(self, world):
        body = world.client.get("/api/claw-machine/session/nope").json()
        assert body == {"success": False, "error": "Session not found"}

    def test_numeric_user_id_is_accepted(self, world):
        resp = world.client.post(
            "/api/claw-machine/session", json={"sessionId": "s1", "userId": 1234},
        )
        assert resp.status_code == 200
        assert world.store.session("s1").user_id == "1234"


class TestTries:
    """Daily try accounting."""

    def test_use_try_counts_down(self, world):
        for expected_remaining in (2, 1, 0):
            body = world.client.post("/api/claw-machine/use-try", json={"userId": "u1"}).json()
            assert body["triesRemaining"] == expected_remaining
        assert body["canPlay"] is False
        assert body["triesUsed"] == 3

    def test_remaining_never_negative(self, world):
        for _ in range(5):
            body = world.client.post("/api/claw-machine/use-try", json={"userId": "u1"}).json()
        assert body["triesUsed"] == 5
        assert body["triesRemaining"] == 0

    def test_missing_user_id(self, world):
        resp = world.client.post("/api/claw-machine/use-try", json={})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing userId"

    def test_tries_lookup_and_daily_reset(self, world):
        world.client.post("/api/claw-machine/use-try", json={"userId": "u1"})
        assert world.client.get("/api/claw-machine/tries/u1").json()["triesUsed"] == 1

        world.days.day = "2026-03-02"

        body = world.client.get("/api/claw-machine/tries/u1").json()
        assert body == {"success": True, "triesUsed": 0, "triesRemaining": 3, "maxTries": 3}

    def test_session_reports_tries_already_used(self, world):
        world.client.post("/api/claw-machine/use-try", json={"userId": "u1"})
        body = world.client.post(
            "/api/claw-machine/session", json={"sessionId": "s1", "userId": "u1"},
        ).json()
        assert body["triesUsed"] == 1
        assert body["triesRemaining"] == 2


class TestGlow:
    def test_roll_glow(self, world):
        body = world.client.get("/api/claw-machine/roll-glow").json()
        glow = body["glow"]
        assert body["success"]
        assert set(glow) == {"rarity", "chance", "name", "goldBonus", "xpBonus", "color"}
        assert glow["rarity"] in {
            "none", "common", "uncommon", "rare", "epic", "legendary", "mythic",
        }


class TestPrizes:
    """Prize registration, webhooks and session end."""

    def test_prize_is_stored_and_forwarded(self, world):
        world.client.post("/api/claw-machine/session", json={"sessionId": "s1", "userId": "u1"})
        prize = {"id": "duck", "name": "Duck", "rarity": "rare", "glow": "epic"}

        body = world.client.post(
            "/api/claw-machine/prize",
            json={"sessionId": "s1", "userId": "u1", "prize": prize, "silent": True},
        ).json()

        assert body == {"success": True, "addedToInventory": True, "goldBonus": 600, "xpBonus": 100}
        assert world.bot.webhooks == [("prize_won", {
            "userId": "u1", "sessionId": "s1", "prize": prize,
            "goldBonus": 600, "xpBonus": 100, "silent": True,
        })]
        stored = world.client.get("/api/claw-machine/prizes/s1").json()["prizes"]
        assert stored == [{**prize, "wonAt": 1_000_000}]

    def test_prize_without_glow_has_no_bonus(self, world):
        body = world.client.post(
            "/api/claw-machine/prize",
            json={"sessionId": "s1", "prize": {"id": "duck", "glow": "none"}},
        ).json()
        assert (body["goldBonus"], body["xpBonus"]) == (0, 0)

    def test_prize_creates_missing_session(self, world):
        world.client.post(
            "/api/claw-machine/prize",
            json={"sessionId": "late", "userId": "u9", "prize": {"id": "duck"}},
        )
        assert world.store.session("late").user_id == "u9"
        assert len(world.store.session("late").prizes) == 1

    def test_failed_webhook_is_reported(self, world):
        world.bot.accept = False
        body = world.client.post(
            "/api/claw-machine/prize", json={"sessionId": "s1", "prize": {"id": "duck"}},
        ).json()
        assert body["success"]
        assert body["addedToInventory"] is False

    @pytest.mark.parametrize("payload", [
        {"prize": {"id": "duck"}},
        {"sessionId": "s1"},
    ])
    def test_missing_fields(self, world, payload):
        resp = world.client.post("/api/claw-machine/prize", json=payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing sessionId or prize"
        assert world.bot.webhooks == []

    def test_unknown_session_has_no_prizes(self, world):
        assert world.client.get("/api/claw-machine/prizes/nope").json() == {
            "success": True, "prizes": [],
        }


class TestEndSession:
    def test_summary_sent_when_prizes_won(self, world):
        world.client.post(
            "/api/claw-machine/session",
            json={"sessionId": "s1", "userId": "u1", "channelId": "c1", "guildId": "g1"},
        )
        prizes = [{"id": "duck"}]

        body = world.client.post(
            "/api/claw-machine/end-session",
            json={"sessionId": "s1", "userId": "u1", "prizes": prizes},
        ).json()

        assert body == {"success": True}
        assert world.bot.webhooks == [("session_ended", {
            "userId": "u1", "sessionId": "s1", "prizes": prizes,
            "channelId": "c1", "guildId": "g1",
        })]
        assert world.store.session("s1") is None

    def test_no_summary_without_prizes(self, world):
        world.client.post("/api/claw-machine/session", json={"sessionId": "s1", "userId": "u1"})
        world.client.post(
            "/api/claw-machine/end-session", json={"sessionId": "s1", "userId": "u1", "prizes": []},
        )
        assert world.bot.webhooks == []
        assert world.store.session("s1") is None

    def test_unknown_session_still_succeeds(self, world):
        body = world.client.post(
            "/api/claw-machine/end-session",
            json={"sessionId": "ghost", "userId": "u1", "prizes": [{"id": "a"}]},
        ).json()
        assert body == {"success": True}
        assert world.bot.webhooks[0][1]["channelId"] is None
