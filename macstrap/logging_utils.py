from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .results import ExecutionResult, FailureLog, Outcome

DEFAULT_LOG_PATH = "~/bootstrap.log"

_COLORS = {
    logging.DEBUG: "\033[0;90m",
    logging.INFO: "\033[0;34m",
    logging.WARNING: "\033[0;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}
_RESET = "\033[0m"


class ConsoleFormatter(logging.Formatter):
    """``LEVEL: message`` lines, coloured when writing to a terminal."""

    def __init__(self, color: bool = False) -> None:
        super().__init__(fmt="%(levelname)s: %(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self.color:
            return line
        prefix = f"{record.levelname}:"
        color = _COLORS.get(record.levelno, "")
        return line.replace(prefix, f"{color}{prefix}{_RESET}", 1)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every info/fail line of a run is appended to ``log_path`` (never truncated,
    so repeated runs accumulate) and echoed to the console.

    Notes:
    - If the requested log file cannot be opened we fall back to a file in
      the current working directory and report the path actually used.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_macstrap_configured", False):
        return getattr(logger, "_macstrap_log_path", log_path)

    requested = os.path.expanduser(log_path)
    chosen_path = requested
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(requested) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(requested, mode="a", encoding="utf-8")
    except OSError:
        # Fall back to a writable location.
        chosen_path = str(Path.cwd() / "macstrap.log")
        file_handler = logging.FileHandler(chosen_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        stream = getattr(console, "stream", sys.stderr)
        console.setFormatter(ConsoleFormatter(color=bool(getattr(stream, "isatty", lambda: False)())))
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_macstrap_configured", True)
    setattr(logger, "_macstrap_log_path", chosen_path)
    setattr(logger, "_macstrap_handlers", handlers)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", requested, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Remove handlers installed by configure_logging()."""

    logger = logging.getLogger()
    for h in getattr(logger, "_macstrap_handlers", []):
        logger.removeHandler(h)
        h.close()
    for attr in ("_macstrap_configured", "_macstrap_log_path", "_macstrap_handlers"):
        if hasattr(logger, attr):
            delattr(logger, attr)


class RunLogger:
    """Run-scoped info/fail reporting.

    ``fail()`` both logs at ERROR and records the failure in the FailureLog
    handed in by the runner. Neither method raises: logging problems are
    handled by the ``logging`` module itself.
    """

    def __init__(self, failures: FailureLog, logger: Optional[logging.Logger] = None) -> None:
        self.failures = failures
        self._logger = logger or logging.getLogger("macstrap.run")

    def info(self, message: str, *args: object) -> None:
        self._logger.info(message, *args)

    def fail(self, message: str, *args: object, result: Optional[ExecutionResult] = None) -> None:
        self._logger.error(message, *args)
        if result is None:
            try:
                text = message % args if args else message
            except (TypeError, ValueError):
                text = message
            result = ExecutionResult(step="run", category="run", outcome=Outcome.FAILED, reason=text)
        self.failures.append(result)
