"""Tests for RelayConfig."""
from claw_relay.config import RelayConfig


class TestFromEnv:
    def test_defaults(self):
        config = RelayConfig.from_env({})
        assert config.port == 3000
        assert config.bot_webhook_url == ""
        assert config.webhook_secret == "your-secret-key"
        assert (config.max_tries, config.claw_strength, config.drop_chance) == (5, 70, 20)
        assert config.cache_ttl == 30.0

    def test_overrides(self):
        config = RelayConfig.from_env({
            "PORT": "8080",
            "BOT_WEBHOOK_URL": "http://bot.local/claw-webhook",
            "WEBHOOK_SECRET": "s3cret",
            "MAX_TRIES": "3",
            "CLAW_STRENGTH": "40",
            "DROP_CHANCE": "10",
            "CACHE_TTL": "2.5",
        })
        assert config.port == 8080
        assert config.webhook_secret == "s3cret"
        assert (config.max_tries, config.claw_strength, config.drop_chance) == (3, 40, 10)
        assert config.cache_ttl == 2.5

    def test_zero_and_garbage_fall_back(self):
        config = RelayConfig.from_env({"MAX_TRIES": "0", "CLAW_STRENGTH": "strong"})
        assert config.max_tries == 5
        assert config.claw_strength == 70


def test_bot_base_url_strips_webhook_path():
    config = RelayConfig(bot_webhook_url="https://tunnel.example/claw-webhook")
    assert config.bot_base_url == "https://tunnel.example"


def test_default_settings_shape():
    settings = RelayConfig(max_tries=2).default_settings()
    assert settings["gameplay"] == {"maxTries": 2, "clawStrength": 70, "dropChance": 20}
    assert settings["prizes"]["selectedCategories"] == ["all"]
    assert settings["costs"] == {"playCost": 100, "currency": "gold"}
