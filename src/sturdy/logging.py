"""Logging setup for the STURDY command line.

Console output goes through Rich on stderr so stdout stays free for deck
text and outlines. A "flight recorder" keeps recent DEBUG records in memory
and only writes them to disk when something goes wrong (or on request), so
a failed `sturdy deck check` leaves a full trace behind without making
normal runs noisy.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from importlib.metadata import version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import yaml
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "sturdy"
CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from other packages with their top-level package name.

    A record from ``yaml.reader`` gets ``record.prefix == "[yaml]"``; records
    from ``sturdy.*`` get an empty prefix. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.split('.')[0]}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the Rich console handler.

    Args:
        level: Minimum level shown; forced to DEBUG when *debug_mode* is set.
        debug_mode: Show timestamps, logger names and source locations.
        color: Emit colour; mirrors click-extra's ``--color/--no-color``.

    Returns:
        RichHandler: Handler writing to stderr, ready for the root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    handler.setFormatter(
        logging.Formatter(fmt=DEBUG_CONSOLE_FORMAT if debug_mode else CONSOLE_FORMAT)
    )
    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the in-memory flight recorder.

    Records are buffered (up to *capacity*) and written to *path* once a
    record at *flush_level* or above arrives, or when the handler closes if
    *flush_on_close* is set.

    Args:
        path: File the buffer is written to; truncated on open.
        capacity: Number of records kept in memory.
        flush_level: Level that triggers a write.
        flush_on_close: Also write the buffer on shutdown.

    Returns:
        MemoryHandler: Buffering handler targeting a UTF-8 file handler.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
) -> None:
    """Log a one-line startup summary at INFO and environment details at DEBUG.

    Args:
        logger: Logger to write to.
        app_version: STURDY version.
        level: Effective console level.
        handlers: Handlers installed on the root logger.
        log_path: Flight-recorder file, if any.
        flight_recorder: Whether the flight recorder is on.
        flight_capacity: Flight-recorder buffer size, if on.
        force_flush_fr: Whether the buffer is written on exit.
        logger_levels: Per-logger level overrides.
    """
    logger.info(
        "STURDY %s - console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("PyYAML: %s", yaml.__version__)
    logger.debug("Click: %s", version("click"))
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            str(log_path) if log_path else "<none>",
            flight_capacity,
            force_flush_fr,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
        or "<none>",
    )
