"""Single-value cache that goes stale after a fixed time."""
from __future__ import annotations

import time
from typing import Any, Callable


class TimedValue:
    """Holds one value for ``ttl`` seconds of ``clock`` time."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._value: Any = None
        self._stored_at = 0.0

    @property
    def fresh(self) -> bool:
        return self._value is not None and self._clock() - self._stored_at < self._ttl

    def get(self) -> Any:
        """The cached value, or None if empty or stale."""
        return self._value if self.fresh else None

    def set(self, value: Any) -> None:
        self._value = value
        self._stored_at = self._clock()

    def clear(self) -> None:
        self._value = None
        self._stored_at = 0.0
