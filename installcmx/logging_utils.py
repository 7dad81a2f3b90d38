from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default

# Level names accepted in [InstallCMX] TraceInfoLevel.
TRACE_LEVELS = {
    "verbose": logging.DEBUG,
    "information": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}


def trace_level_from_name(name: str) -> Optional[int]:
    return TRACE_LEVELS.get(name.strip().lower())


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.WARNING,
    also_console: bool = False,
) -> str:
    """Configure logging.

    The log normally sits next to the ini file in the working directory.

    Notes:
    - If the requested location is not writable we fall back to a file in
      the current working directory, and report the path actually used.
    - Calling this again only adjusts the level; handlers are installed once.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_installcmx_configured", False):
        return getattr(logger, "_installcmx_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    except OSError:
        fallback = str(Path.cwd() / Path(PATHS.log_default).name)
        file_handler = logging.FileHandler(fallback, mode="w", encoding="utf-8")
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_installcmx_configured", True)
    setattr(logger, "_installcmx_handlers", handlers)
    setattr(logger, "_installcmx_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Remove the handlers installed by configure_logging()."""

    logger = logging.getLogger()
    if not getattr(logger, "_installcmx_configured", False):
        return
    for h in getattr(logger, "_installcmx_handlers", []):
        logger.removeHandler(h)
        h.close()
    setattr(logger, "_installcmx_handlers", [])
    setattr(logger, "_installcmx_configured", False)
