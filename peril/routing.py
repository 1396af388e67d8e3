"""Routing keys, exchange names and the messages that travel on them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping

ARMY_MOVES_PREFIX = "army_moves"
WAR_RECOGNITIONS_PREFIX = "war"
PAUSE_KEY = "pause"
GAME_LOG_SLUG = "game_logs"

EXCHANGE_PERIL_DIRECT = "peril_direct"
EXCHANGE_PERIL_TOPIC = "peril_topic"

_FRACTION = re.compile(r"\.(\d+)")


def format_rfc3339(moment: datetime, *, fractional: bool = False) -> str:
    """Format a datetime as RFC 3339, using ``Z`` for UTC."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    timespec = "microseconds" if fractional and moment.microsecond else "seconds"
    text = moment.isoformat(timespec=timespec)
    if fractional and moment.microsecond:
        head, _, tail = text.partition(".")
        digits, offset = tail[:6].rstrip("0"), tail[6:]
        text = f"{head}.{digits}{offset}"
    if moment.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, accepting ``Z`` and any fraction length."""
    text = text.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class PlayingState:
    """Whether the game is paused."""

    is_paused: bool

    def to_dict(self) -> dict[str, Any]:
        return {"IsPaused": self.is_paused}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlayingState":
        return cls(is_paused=bool(data.get("IsPaused", False)))


@dataclass(frozen=True)
class GameLog:
    """A line of game history sent by a player."""

    current_time: datetime
    message: str
    username: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "CurrentTime": format_rfc3339(self.current_time, fractional=True),
            "Message": self.message,
            "Username": self.username,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameLog":
        raw_time = data["CurrentTime"]
        current_time = raw_time if isinstance(raw_time, datetime) else parse_rfc3339(raw_time)
        return cls(
            current_time=current_time,
            message=data.get("Message", ""),
            username=data.get("Username", ""),
        )