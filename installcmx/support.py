"""Installer session: the settings store plus logging, for one run.

The installer opens ``InstallCMX.ini`` once at start, configures logging from
its ``[InstallCMX]`` section and writes the file back when the run ends. The
session guarantees that final write on every exit path.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from . import __version__
from .ini_format import IniFileError
from .ini_store import IniStore, open_store
from .lib.env import PATHS
from .logging_utils import configure_logging, reset_logging, trace_level_from_name

logger = logging.getLogger(__name__)


SETTINGS_SECTION = "InstallCMX"
COPYRIGHT = "(c) Hans Rottier"


@dataclass(frozen=True)
class Session:
    store: IniStore
    log_path: str
    log_level: int
    console: bool


def version_banner() -> str:
    return f"CMX multiplatform installer version {__version__} - {COPYRIGHT}"


def ensure_ini_exists(path: str) -> None:
    # An empty file is enough: every setting is created on first read.
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.touch(exist_ok=True)
    except OSError as e:
        raise IniFileError(f"Failed to create {path}: {e}") from e


def configure_logging_from_store(store: IniStore, log_path: str) -> Session:
    console = store.get_string(SETTINGS_SECTION, "NormalMessageToConsole", "false").strip().lower() == "true"
    level_name = store.get_string(SETTINGS_SECTION, "TraceInfoLevel", "Warning")

    level = trace_level_from_name(level_name)
    actual = configure_logging(
        log_path=log_path,
        level=logging.WARNING if level is None else level,
        also_console=console,
    )

    if level is None:
        logger.error("Invalid TraceInfoLevel %r in %s", level_name, store.path)
        logger.error("Setting level to Warning (default).")
        level = logging.WARNING

    logger.info("According to ini file %s => %s", level_name, logging.getLevelName(level))
    return Session(store=store, log_path=actual, log_level=level, console=console)


@contextmanager
def installer_session(
    ini_path: str = PATHS.ini_default,
    log_path: str = PATHS.log_default,
    *,
    lazy: bool = False,
) -> Iterator[Session]:
    """Open the settings store for one installer run.

    On exit, normal or not, the store is flushed and re-read, then the log
    handlers are released.
    """

    ensure_ini_exists(ini_path)
    store = open_store(ini_path, lazy=lazy)
    try:
        session = configure_logging_from_store(store, log_path)
        logger.info(version_banner())
        yield session
    finally:
        try:
            store.close()
            store.refresh()
        finally:
            reset_logging()
