"""Tests for HttpBotClient, with urlopen replaced."""
import io
import json
import urllib.error
import urllib.request

import pytest

from claw_relay.bot import BotClient, HttpBotClient


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


@pytest.fixture
def requests(monkeypatch):
    """Record outgoing requests; answer with whatever ``requests.reply`` holds."""
    sent = []

    def fake_urlopen(req, timeout=None):
        sent.append(req)
        reply = fake_urlopen.reply
        if isinstance(reply, Exception):
            raise reply
        return FakeResponse(json.dumps(reply).encode("utf-8"))

    fake_urlopen.reply = {}
    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return sent, fake_urlopen


def _client():
    return HttpBotClient(
        "http://bot.local/claw-webhook", "s3cret",
        base_url="http://bot.local", clock=lambda: 12.5,
    )


class TestSendWebhook:
    def test_posts_event_envelope(self, requests):
        sent, _ = requests
        assert _client().send_webhook("prize_won", {"userId": "u1"})

        req = sent[0]
        assert req.full_url == "http://bot.local/claw-webhook"
        assert req.get_method() == "POST"
        assert req.get_header("X-webhook-secret") == "s3cret"
        assert json.loads(req.data) == {
            "event": "prize_won", "data": {"userId": "u1"}, "timestamp": 12500,
        }

    def test_http_error_is_reported_as_false(self, requests):
        _, urlopen = requests
        urlopen.reply = urllib.error.HTTPError(
            "http://bot.local/claw-webhook", 500, "boom", hdrs=None, fp=None,
        )
        assert not _client().send_webhook("prize_won", {})

    def test_unreachable_bot_is_reported_as_false(self, requests):
        _, urlopen = requests
        urlopen.reply = urllib.error.URLError("connection refused")
        assert not _client().send_webhook("prize_won", {})

    def test_unconfigured_client_skips(self, requests):
        sent, _ = requests
        client = HttpBotClient("", "s3cret")
        assert not client.send_webhook("prize_won", {})
        assert client.fetch("/claw-items") is None
        assert sent == []


class TestFetch:
    def test_gets_json_from_base_url(self, requests):
        sent, urlopen = requests
        urlopen.reply = {"items": {"a": 1}}

        assert _client().fetch("/claw-items") == {"items": {"a": 1}}
        assert sent[0].full_url == "http://bot.local/claw-items"
        assert sent[0].get_header("X-webhook-secret") == "s3cret"

    def test_failure_returns_none(self, requests):
        _, urlopen = requests
        urlopen.reply = urllib.error.URLError("timed out")
        assert _client().fetch("/claw-settings") is None


def test_satisfies_protocol():
    assert isinstance(_client(), BotClient)
