"""In-memory play sessions and per-day try counters.

Nothing here survives a restart.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable


def utc_today() -> str:
    """Today's date as YYYY-MM-DD in UTC."""
    return datetime.now(timezone.utc).date().isoformat()


@dataclass
class Session:
    """One player's visit to the machine and the prizes won in it."""

    user_id: str | None = None
    channel_id: str | None = None
    guild_id: str | None = None
    prizes: list[dict[str, Any]] = field(default_factory=list)
    start_time: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"userId": self.user_id, "prizes": list(self.prizes)}
        if self.channel_id is not None:
            out["channelId"] = self.channel_id
        if self.guild_id is not None:
            out["guildId"] = self.guild_id
        if self.start_time is not None:
            out["startTime"] = self.start_time
        return out


class MemoryStore:
    """Sessions keyed by session id, tries keyed by (day, user id).

    ``today`` returns the current day key; the counters reset when it
    changes.
    """

    def __init__(self, today: Callable[[], str] = utc_today) -> None:
        self._today = today
        self._sessions: dict[str, Session] = {}
        self._tries: dict[tuple[str, str | None], int] = {}

    # --- Sessions ---

    def start_session(
        self,
        session_id: str,
        user_id: str | None = None,
        channel_id: str | None = None,
        guild_id: str | None = None,
        start_time: int | None = None,
    ) -> Session:
        """Create (or replace) a session."""
        session = Session(
            user_id=user_id, channel_id=channel_id, guild_id=guild_id, start_time=start_time,
        )
        self._sessions[session_id] = session
        return session

    def session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def ensure_session(self, session_id: str, user_id: str | None = None) -> Session:
        """The session with this id, created bare if it does not exist."""
        session = self._sessions.get(session_id)
        if session is None:
            session = Session(user_id=user_id)
            self._sessions[session_id] = session
        return session

    def end_session(self, session_id: str) -> Session | None:
        return self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

    # --- Daily tries ---

    def tries_used(self, user_id: str | None) -> int:
        return self._tries.get((self._today(), user_id), 0)

    def use_try(self, user_id: str | None) -> int:
        """Count one try for today. Returns the new total."""
        key = (self._today(), user_id)
        self._tries[key] = self._tries.get(key, 0) + 1
        return self._tries[key]
