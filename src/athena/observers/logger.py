# src/athena/observers/logger.py
from __future__ import annotations
import logging
from .events import BaseEvent, JobFailed, JobPolled, JobTimedOut

# anything not listed logs at INFO
_LEVELS = {
    JobPolled: logging.DEBUG,
    JobFailed: logging.ERROR,
    JobTimedOut: logging.ERROR,
}


class LoggerObserver:
    """Writes job events into the run log, one line per event."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        level = _LEVELS.get(type(event), logging.INFO)
        fields = " ".join(
            f"{k}={v}" for k, v in event.dict().items() if k not in ("ts", "endpoint")
        )
        self.logger.log(level, "[EVENT] %s %s: %s", type(event).__name__, event.endpoint, fields)
