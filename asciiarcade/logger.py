"""A small levelled logger with a debug switch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum


class LoggerMode(IntEnum):
    """Whether debug messages are emitted."""

    DEBUG = 0
    INFO = 1


@dataclass(frozen=True)
class Logger:
    """Writes prefixed messages to the standard logging system."""

    mode: LoggerMode
    name: str = "asciiarcade"

    @property
    def _log(self) -> logging.Logger:
        return logging.getLogger(self.name)

    def debug(self, msg: str) -> None:
        """Log ``msg`` only when the logger is in debug mode."""
        if self.mode is LoggerMode.DEBUG:
            self._log.debug("DEBUG %s", msg)

    def info(self, msg: str) -> None:
        """Log an informational message."""
        self._log.info("INFO %s", msg)

    def error(self, msg: str, err: BaseException | None = None) -> None:
        """Log an error message."""
        self._log.error("ERROR %s", msg)