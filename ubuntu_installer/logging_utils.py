from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = os.path.join(tempfile.gettempdir(), "ubuntu-installer.log")

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_RESET = "\x1b[0m"
_ORANGE = "\x1b[38;5;214m"
_BLUE = "\x1b[38;5;87m"
_LEVEL_STYLE = {
    logging.DEBUG: ("\x1b[38;5;31m", "DEBUG"),
    logging.INFO: ("\x1b[38;5;83m", "INFO"),
    SUCCESS: ("\x1b[38;5;83m", "SUCCESS"),
    logging.WARNING: ("\x1b[38;5;220m", "WARNING"),
    logging.ERROR: ("\x1b[38;5;1m", "ERROR"),
    logging.CRITICAL: ("\x1b[38;5;1m", "ERROR"),
}


class ConsoleFormatter(logging.Formatter):
    """`[HH:MM:SS] [LEVEL]: message` lines, coloured when the stream is a tty."""

    def __init__(self, color: bool = True) -> None:
        super().__init__(datefmt="%H:%M:%S")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        color, tag = _LEVEL_STYLE.get(record.levelno, ("\x1b[38;5;31m", record.levelname))
        ts = self.formatTime(record, self.datefmt)
        msg = record.getMessage()
        if record.exc_info and record.levelno >= logging.ERROR:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"
        if not self.color:
            return f"[{ts}] [{tag}]: {msg}"
        return f"{_ORANGE}[{ts}] {color}[{tag}]:{_RESET} {_BLUE}{msg}{_RESET}"


def format_question(text: str, color: bool = True) -> str:
    """Render an interactive prompt in the same shape as the console log lines."""

    ts = time.strftime("%H:%M:%S")
    if not color:
        return f"[{ts}] [QUESTION]: {text}"
    return f"{_ORANGE}[{ts}] \x1b[38;5;128m[QUESTION]:{_RESET} {_BLUE}{text}{_RESET}"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Everything goes to the log file at DEBUG level; the console gets the
    requested level in the installer's coloured format.

    Notes:
    - If the requested log file cannot be opened, a file in the current
      working directory is used instead.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_ubuntu_installer_configured", False):
        return getattr(logger, "_ubuntu_installer_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        # Fall back to a writable location.
        chosen_path = str(Path.cwd() / "ubuntu-installer.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        isatty = getattr(console.stream, "isatty", None)
        console.setFormatter(ConsoleFormatter(color=bool(isatty and isatty())))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_ubuntu_installer_configured", True)
    setattr(logger, "_ubuntu_installer_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
