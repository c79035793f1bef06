"""One-shot and periodic timers ordered on a millisecond heap."""
from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable


@dataclass(eq=False)
class Timer:
    """A scheduled callback.

    ``interval`` is 0 for one-shot timers. Periodic timers re-arm before
    their callback runs, so a callback may cancel its own timer.
    """

    name: str
    due: int
    callback: Callable[[], None] = field(repr=False)
    interval: int = 0
    cancelled: bool = False

    @property
    def periodic(self) -> bool:
        return self.interval > 0

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, Timer]] = []
        self._counter = 0

    def __len__(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def _push(self, timer: Timer) -> None:
        self._counter += 1
        heapq.heappush(self._heap, (timer.due, self._counter, timer))

    def call_at(self, due: int, callback: Callable[[], None], name: str = "") -> Timer:
        timer = Timer(name=name, due=due, callback=callback)
        self._push(timer)
        return timer

    def call_every(
        self, now: int, interval: int, callback: Callable[[], None], name: str = "",
    ) -> Timer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = Timer(name=name, due=now + interval, callback=callback, interval=interval)
        self._push(timer)
        return timer

    def next_due(self) -> int | None:
        """Due time of the earliest live timer, or None if nothing is pending."""
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)
        if not self._heap:
            return None
        return self._heap[0][0]

    def fire_due(self, now: int) -> int:
        """Run every timer due at or before ``now``. Returns the number fired.

        Timers scheduled by callbacks with a due time <= now fire in the
        same call.
        """
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            if timer.periodic:
                timer.due += timer.interval
                self._push(timer)
            timer.callback()
            fired += 1
        return fired
