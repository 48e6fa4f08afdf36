from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

DEFAULT_LOG_PATH = "~/.cache/kanata-setup/setup.log"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_COLORS = {
    logging.DEBUG: "\033[1;90m",
    logging.INFO: "\033[1;34m",
    SUCCESS: "\033[1;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[1;31m",
    logging.CRITICAL: "\033[1;31m",
}
_RESET = "\033[0m"


def log_success(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(SUCCESS, msg, *args)


class ConsoleFormatter(logging.Formatter):
    """Render `LEVEL: message` lines, colored when the stream is a terminal."""

    def __init__(self, color: bool) -> None:
        super().__init__(fmt="%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        label = f"{record.levelname}:"
        if self.color:
            label = f"{_COLORS.get(record.levelno, '')}{label}{_RESET}"
        return f"{label} {super().format(record)}"


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def _console_handlers() -> list[logging.Handler]:
    # Errors go to stderr, everything else to stdout.
    out = logging.StreamHandler(sys.stdout)
    out.setFormatter(ConsoleFormatter(color=sys.stdout.isatty()))
    out.addFilter(_BelowError())

    err = logging.StreamHandler(sys.stderr)
    err.setFormatter(ConsoleFormatter(color=sys.stderr.isatty()))
    err.setLevel(logging.ERROR)
    return [out, err]


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every run is recorded to a log file in the user's cache directory.

    Notes:
    - If the requested location is not writable we fall back to a local
      file in the working directory, while continuing to *report* the
      intended path in the logs.
    - The file always records DEBUG so captured command output is kept;
      `level` only applies to the console.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_kanata_setup_configured", False):
        return getattr(logger, "_kanata_setup_log_path", log_path)

    requested = os.path.expanduser(log_path)
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        Path(os.path.dirname(requested) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(requested)
        chosen_path = requested
    except OSError:
        # Fall back to a writable location.
        chosen_path = str(Path.cwd() / "kanata-setup.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        for h in _console_handlers():
            if h.level < level:
                h.setLevel(level)
            handlers.append(h)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_kanata_setup_configured", True)
    setattr(logger, "_kanata_setup_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", requested, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Drop handlers installed by configure_logging()."""

    logger = logging.getLogger()
    if not getattr(logger, "_kanata_setup_configured", False):
        return
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler) or isinstance(h.formatter, ConsoleFormatter):
            logger.removeHandler(h)
            h.close()
    setattr(logger, "_kanata_setup_configured", False)
    setattr(logger, "_kanata_setup_log_path", None)

