"""Client for the bot that owns player inventories.

The bot receives prize webhooks and serves machine settings and the item
catalog. Every call is best effort: failures are logged and reported as
False or None, never raised.
"""
from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Webhook-Secret"


@runtime_checkable
class BotClient(Protocol):
    """What the relay needs from the bot."""

    def send_webhook(self, event: str, data: dict[str, Any]) -> bool:
        """Deliver an event. True if the bot accepted it."""
        ...

    def fetch(self, endpoint: str) -> Any | None:
        """GET a JSON document from the bot, or None if unavailable."""
        ...


class HttpBotClient:
    """BotClient over HTTP using stdlib urllib.

    Webhooks are POSTed to ``webhook_url``; lookups go to the same host
    with the ``/claw-webhook`` suffix removed.
    """

    def __init__(
        self,
        webhook_url: str,
        secret: str,
        base_url: str | None = None,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._webhook_url = webhook_url
        self._secret = secret
        self._base_url = (base_url if base_url is not None else webhook_url).rstrip("/")
        self._timeout = timeout
        self._clock = clock

    @property
    def configured(self) -> bool:
        return bool(self._webhook_url)

    def send_webhook(self, event: str, data: dict[str, Any]) -> bool:
        if not self.configured:
            logger.warning("no bot webhook URL configured, skipping %s", event)
            return False

        payload = json.dumps({
            "event": event,
            "data": data,
            "timestamp": int(self._clock() * 1000),
        }).encode("utf-8")
        req = urllib.request.Request(
            self._webhook_url,
            data=payload,
            headers={"Content-Type": "application/json", SECRET_HEADER: self._secret},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as exc:
            logger.error("webhook %s rejected: HTTP %s", event, exc.code)
            return False
        except (urllib.error.URLError, OSError) as exc:
            logger.error("webhook %s failed: %s", event, exc)
            return False
        logger.info("webhook sent: %s", event)
        return True

    def fetch(self, endpoint: str) -> Any | None:
        if not self.configured:
            return None
        req = urllib.request.Request(
            f"{self._base_url}{endpoint}",
            headers={SECRET_HEADER: self._secret},
            method="GET",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except (urllib.error.URLError, OSError, ValueError) as exc:
            logger.warning("could not fetch %s from bot: %s", endpoint, exc)
            return None
