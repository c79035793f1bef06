"""Engine - virtual-time host loop: clock, timers, randomness and signals."""

import logging
import os
import random
import time
from typing import Callable

from claw_machine.clock import Clock
from claw_machine.signals import SignalBus
from claw_machine.timers import Timer, TimerQueue

logger = logging.getLogger(__name__)


class Engine:
    """Single-threaded host for the machine.

    Time only moves when the engine is stepped. Every step advances the
    clock by one tick, fires due timers in due order, then flushes the
    signal bus.
    """

    def __init__(self, tick_ms: int = 10, seed: int | None = None) -> None:
        self._clock = Clock(tick_ms)
        self._timers = TimerQueue()
        self._bus = SignalBus()
        self._stop_requested: bool = False
        self._backlog_ms: float = 0.0

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def bus(self) -> SignalBus:
        return self._bus

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def now(self) -> int:
        return self._clock.now_ms

    # --- Timers ---

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> Timer:
        return self._timers.call_at(self.now + max(0, int(round(delay_ms))), callback, name)

    def call_every(self, interval_ms: int, callback: Callable[[], None], name: str = "") -> Timer:
        return self._timers.call_every(self.now, interval_ms, callback, name)

    def pending_timers(self) -> int:
        return len(self._timers)

    # --- Stepping ---

    def request_stop(self) -> None:
        self._stop_requested = True

    def step(self) -> None:
        now = self._clock.advance()
        self._timers.fire_due(now)
        self._bus.flush()

    def run(self, n: int) -> None:
        self._stop_requested = False
        for _ in range(n):
            self.step()
            if self._stop_requested:
                break

    def run_for(self, ms: int) -> None:
        self.run(max(0, -(-ms // self._clock.tick_ms)))

    def advance(self, elapsed_ms: float) -> int:
        """Step once per whole tick of wall time that has passed.

        The part of ``elapsed_ms`` shorter than a tick carries over to the
        next call. Returns the number of steps run.
        """
        self._backlog_ms += max(0.0, elapsed_ms)
        tick_ms = self._clock.tick_ms
        steps = 0
        while self._backlog_ms >= tick_ms:
            self.step()
            self._backlog_ms -= tick_ms
            steps += 1
        return steps

    def run_until(self, predicate: Callable[[], bool], max_ms: int = 60_000) -> bool:
        """Step until ``predicate()`` holds. Returns False if ``max_ms`` runs out."""
        self._bus.flush()
        deadline = self.now + max_ms
        while not predicate():
            if self.now >= deadline:
                return False
            self.step()
        return True

    def run_forever(self) -> None:
        """Step in real time until ``request_stop()`` is called."""
        self._stop_requested = False
        dt = self._clock.tick_ms / 1000.0
        logger.debug("engine running in real time, tick=%dms", self._clock.tick_ms)
        while not self._stop_requested:
            start = time.monotonic()
            self.step()
            elapsed = time.monotonic() - start
            sleep_time = dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)
