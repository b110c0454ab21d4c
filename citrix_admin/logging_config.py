"""
Logging for the admin scripts.

One LogSession per script run: Rich console output plus a nightly rotated
file in the configured log directory. The session owns its handlers and its
start time, so nothing lives in module state between runs.
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings

FILE_FORMAT = (
    "%(asctime)s - %(levelname)s - "
    "%(filename)s:%(lineno)d in %(funcName)s() - "
    "%(message)s"
)


class LogSession:
    """Explicit logging context for a single script run."""

    def __init__(self, settings: Settings, script_name: str, console: Optional[Console] = None):
        self._settings = settings
        self.script_name = script_name
        self._console = console or Console(width=120)
        self._handlers: List[logging.Handler] = []
        self.started_at: Optional[datetime] = None
        self._previous_level: Optional[int] = None

    @property
    def log_file(self) -> Path:
        return self._settings.log_file_for(self.script_name)

    @property
    def is_open(self) -> bool:
        return bool(self._handlers)

    def open(self) -> "LogSession":
        if self.is_open:
            return self

        self._settings.log_path.mkdir(parents=True, exist_ok=True)

        rich_handler = RichHandler(
            console=self._console,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
        rich_handler.setLevel(self._settings.log_level)

        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=self.log_file,
            when="midnight",
            interval=1,
            backupCount=self._settings.log_retention_days,
            encoding="utf-8",
        )
        file_handler.setLevel(self._settings.log_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

        root_logger = logging.getLogger()
        self._previous_level = root_logger.level
        root_logger.setLevel(self._settings.log_level)
        for handler in (rich_handler, file_handler):
            root_logger.addHandler(handler)
            self._handlers.append(handler)

        self.started_at = datetime.now()
        logging.info(
            f"[bold green]{self.script_name} started[/] - "
            f"File: [cyan]{self.log_file}[/], "
            f"Level: [yellow]{self._settings.log_level}[/]"
        )
        return self

    def elapsed_seconds(self) -> float:
        if not self.started_at:
            return 0.0
        return (datetime.now() - self.started_at).total_seconds()

    def close(self) -> None:
        if not self.is_open:
            return

        logging.info(f"{self.script_name} finished in {self.elapsed_seconds():.1f}s")

        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        if self._previous_level is not None:
            root_logger.setLevel(self._previous_level)
            self._previous_level = None

    def __enter__(self) -> "LogSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None and not isinstance(exc, (KeyboardInterrupt, SystemExit)):
            logging.error(f"{self.script_name} aborted: {exc}", exc_info=(exc_type, exc, tb))
        self.close()
