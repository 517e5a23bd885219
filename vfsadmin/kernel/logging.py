"""Centralized logging configuration for vfsadmin using Loguru.

Provides consistent logging across the package with support for:
- Multiple output formats (console, JSON, structured, rich)
- Environment-based defaults
- Correlation IDs for request tracing
- Idempotent configuration

Examples
--------
Basic usage:

>>> from vfsadmin.kernel.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("File written", path="docs/readme.md")

Configure logging globally::

    from vfsadmin.kernel.logging import configure_logging
    configure_logging(level="DEBUG", format="json")
"""

from __future__ import annotations

import contextvars
import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger
from rich.logging import RichHandler

if TYPE_CHECKING:
    import loguru

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []

# Correlation ID context variable for request tracing
correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="-")


def _inject_correlation_id(record: loguru.Record) -> None:
    record["extra"]["cid"] = correlation_id.get()


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
    backtrace: bool = True,
    diagnose: bool = False,
) -> None:
    """Configure global logging for vfsadmin.

    This function is idempotent - calling it multiple times with the same
    configuration will not duplicate handlers or change settings.

    Parameters
    ----------
    level : LogLevel, default="INFO"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": Simple console output (no colors, basic format)
        - "json": JSON lines for log aggregation
        - "structured": Structured format with colors (Loguru native)
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file path to write JSON logs to (in addition to console)
    use_color : bool, default=True
        Use ANSI color codes in structured format (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    force_reconfigure : bool, default=False
        Force reconfiguration even if already configured with same settings
    backtrace : bool, default=True
        Enable extended backtraces
    diagnose : bool, default=False
        Show variable values in tracebacks (leaks data, keep off in production)

    Examples
    --------
    Development setup::

        configure_logging(level="DEBUG", format="rich")

    Testing setup::

        configure_logging(level="WARNING", format="console")
    """
    global _CURRENT_CONFIG

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
        "backtrace": backtrace,
        "diagnose": diagnose,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    # Remove only our previously added handlers (not external ones)
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()

    logger.configure(patcher=_inject_correlation_id)

    if format == "rich":
        rich_handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=include_timestamp,
            show_level=True,
            show_path=True,
        )
        handler_id = logger.add(
            sink=rich_handler,
            level=level,
            format="{message}",
            backtrace=backtrace,
            diagnose=diagnose,
        )
        _HANDLER_IDS.append(handler_id)

    elif format == "json":
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            serialize=True,
            backtrace=backtrace,
            diagnose=diagnose,
        )
        _HANDLER_IDS.append(handler_id)

    elif format == "structured":
        timestamp_fmt = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> " if include_timestamp else ""
        colorize = use_color and sys.stderr.isatty()
        color_level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        structured_format = (
            f"{timestamp_fmt}[{color_level}]"
            "<cyan>{name}:{function}:{line}</cyan> cid={extra[cid]} | <level>{message}</level>"
        )
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format=structured_format,
            colorize=colorize,
            backtrace=backtrace,
            diagnose=diagnose,
        )
        _HANDLER_IDS.append(handler_id)

    else:  # console
        timestamp_fmt = "{time:YYYY-MM-DD HH:mm:ss} " if include_timestamp else ""
        console_format = f"{timestamp_fmt}{{level: <8}} | {{name}} | {{message}}"
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format=console_format,
            colorize=False,
            backtrace=backtrace,
            diagnose=diagnose,
        )
        _HANDLER_IDS.append(handler_id)

    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        # File output always uses JSON for easier parsing
        handler_id = logger.add(
            sink=output_path,
            level=level,
            serialize=True,
            rotation="10 MB",
            retention="1 week",
            backtrace=backtrace,
            diagnose=diagnose,
        )
        _HANDLER_IDS.append(handler_id)

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=256)
def get_logger(name: str) -> loguru.Logger:
    """Get a logger bound with the given module name (cached).

    If :func:`configure_logging` hasn't been called yet, logging is
    initialized from ``VFSADMIN_LOG_LEVEL`` / ``VFSADMIN_LOG_FORMAT``.

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__`` of the calling module

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> logger.debug("Resolved path", path="docs")
    """
    _ensure_configured()
    return logger.bind(module=name)


def set_correlation_id(cid: str) -> contextvars.Token[str]:
    """Set the correlation ID for the current context.

    Returns the token so callers can restore the previous value.
    """
    return correlation_id.set(cid)


def get_correlation_id() -> str:
    """Get the current correlation ID, or ``"-"`` if not set."""
    return correlation_id.get()


def reset_correlation_id(token: contextvars.Token[str]) -> None:
    correlation_id.reset(token)


def _ensure_configured() -> None:
    """Ensure logging has at least basic configuration (lazy initialization)."""
    if _CURRENT_CONFIG is None:
        level = os.getenv("VFSADMIN_LOG_LEVEL", "INFO").upper()
        format_type = os.getenv("VFSADMIN_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]


__all__ = [
    "LogFormat",
    "LogLevel",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
    "set_correlation_id",
]
