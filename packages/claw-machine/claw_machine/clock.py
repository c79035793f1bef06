"""Millisecond tick clock for the timer host."""


class Clock:
    def __init__(self, tick_ms: int) -> None:
        if tick_ms <= 0:
            raise ValueError("tick_ms must be positive")
        self._tick_ms = tick_ms
        self._tick_number = 0

    @property
    def tick_ms(self) -> int:
        return self._tick_ms

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def now_ms(self) -> int:
        return self._tick_number * self._tick_ms

    def advance(self) -> int:
        self._tick_number += 1
        return self.now_ms
