"""Writing game logs to disk."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Union

from peril.gamestate import GameError
from peril.routing import GameLog, format_rfc3339

LOGS_FILE = "game.log"
WRITE_TO_DISK_SLEEP = 1.0

logger = logging.getLogger(__name__)


def format_log_line(gamelog: GameLog) -> str:
    return f"{format_rfc3339(gamelog.current_time)} {gamelog.username}: {gamelog.message}\n"


def write_log(
    gamelog: GameLog,
    path: Union[str, Path] = LOGS_FILE,
    delay: float = WRITE_TO_DISK_SLEEP,
) -> None:
    """Append a game log line to the logs file after a simulated disk delay."""
    logger.info("received game log...")
    time.sleep(delay)
    try:
        handle = open(path, "a", encoding="utf-8")
    except OSError as err:
        raise GameError(f"could not open logs file: {err}") from err
    with handle:
        try:
            handle.write(format_log_line(gamelog))
        except OSError as err:
            raise GameError(f"could not write to logs file: {err}") from err