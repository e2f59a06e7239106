"""Console log formatting with ANSI colors."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
NAME_COLOR = "\033[2m"
RESET = "\033[0m"


def color_enabled(stream: TextIO | None = None) -> bool:
    """True unless ``NO_COLOR`` is set or ``stream`` is not a terminal."""
    if os.environ.get("NO_COLOR") is not None:
        return False
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ColoredFormatter(logging.Formatter):
    """Colors the level name by severity and dims the logger name.

    Pass ``use_color`` to force colors on or off; by default they follow
    ``color_enabled`` for ``stream``. The original record is never mutated,
    so other handlers still see plain text.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: TextIO | None = None,
        use_color: bool | None = None,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self._stream = stream
        self._use_color = use_color

    @property
    def uses_color(self) -> bool:
        if self._use_color is not None:
            return self._use_color
        return color_enabled(self._stream)

    def format(self, record: logging.LogRecord) -> str:
        if not self.uses_color:
            return super().format(record)

        colored = logging.makeLogRecord(record.__dict__)
        color = LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{RESET}"
        colored.name = f"{NAME_COLOR}{record.name}{RESET}"
        return super().format(colored)
