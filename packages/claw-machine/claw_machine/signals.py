"""Lifecycle notifications published by the claw machine.

Every signal has a fixed set of payload fields (see ``PAYLOADS``). The bus
rejects unknown signal names and payloads with missing or extra fields at
publish time, so a handler can index its ``data`` without guarding.
"""
from __future__ import annotations

from typing import Any, Callable

TRY_USED = "try_used"
NO_TRIES_LEFT = "no_tries_left"
PRIZE_SLIPPED = "prize_slipped"
PRIZE_COLLECTED = "prize_collected"
PRIZE_GRABBED = "prize_grabbed"
GRAB_MISSED = "grab_missed"
PRIZE_DELIVERED = "prize_delivered"
TURN_FINISHED = "turn_finished"
SHUFFLED = "shuffled"
READY = "ready"

# signal -> payload fields
PAYLOADS: dict[str, frozenset[str]] = {
    TRY_USED: frozenset({"tries_used", "max_tries", "tries_remaining"}),
    NO_TRIES_LEFT: frozenset({"tries_used", "max_tries"}),
    PRIZE_SLIPPED: frozenset({"prize"}),
    PRIZE_COLLECTED: frozenset({"prize", "collected"}),
    PRIZE_GRABBED: frozenset({"prize"}),
    GRAB_MISSED: frozenset({"prize"}),
    PRIZE_DELIVERED: frozenset({"prize"}),
    TURN_FINISHED: frozenset({"tries_used", "tries_remaining", "missed"}),
    SHUFFLED: frozenset({"total", "placed"}),
    READY: frozenset({"prizes"}),
}

_Handler = Callable[[str, dict[str, Any]], None]


def _check_name(signal_name: str) -> None:
    if signal_name not in PAYLOADS:
        raise ValueError(f"Unknown signal {signal_name!r}")


class SignalBus:
    """Queued pub/sub for machine signals. Handlers run on ``flush()``."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: _Handler) -> None:
        _check_name(signal_name)
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is not None and handler in handlers:
            handlers.remove(handler)

    def publish(self, signal_name: str, **data: Any) -> None:
        _check_name(signal_name)
        expected = PAYLOADS[signal_name]
        if data.keys() != expected:
            missing = sorted(expected - data.keys())
            extra = sorted(data.keys() - expected)
            raise ValueError(
                f"Bad payload for {signal_name!r}: missing {missing}, unexpected {extra}"
            )
        self._queue.append((signal_name, data))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def flush(self) -> None:
        # Handlers may publish; those signals wait for the next flush.
        snapshot, self._queue = self._queue, []
        for signal_name, data in snapshot:
            for handler in list(self._subscribers.get(signal_name, ())):
                handler(signal_name, data)

    def clear(self) -> None:
        self._queue.clear()
