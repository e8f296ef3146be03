from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TextIO

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 2000


class ErrorLog:
    def __init__(self, path: Path, *, max_lines: int = DEFAULT_MAX_LINES) -> None:
        self.path = path
        self.max_lines = max_lines
        self._handle: TextIO | None = None
        self._line_count = 0

    def __enter__(self) -> ErrorLog:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def log(self, message: str) -> None:
        LOGGER.error("%s", message)
        try:
            handle = self._open()
            if self._line_count > self.max_lines:
                handle.seek(0)
                handle.truncate()
                self._line_count = 0
            handle.write(f"{_timestamp()}: {message}\n")
            handle.flush()
            self._line_count += 1 + message.count("\n")
        except OSError as exc:
            LOGGER.warning("Could not write to error log %s: %s", self.path, exc)

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.close()
        except OSError as exc:
            LOGGER.warning("Could not close error log %s: %s", self.path, exc)
        self._handle = None

    def _open(self) -> TextIO:
        if self._handle is not None:
            return self._handle

        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle = self.path.open("a+", encoding="utf-8", errors="replace")
        handle.seek(0)
        self._line_count = sum(1 for _ in handle)
        self._handle = handle
        return handle


def _timestamp() -> str:
    return datetime.now().astimezone().isoformat()
