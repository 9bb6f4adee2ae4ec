"""Logging utilities for the Newton-Krylov package.

Every module obtains its logger through :func:`get_logger`. Loggers live
under the ``newtonkrylov`` namespace, write to their own handler and do not
propagate, so solver diagnostics never leak into an application's root
logger unless asked for.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "newtonkrylov"

_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Settings applied to loggers created from now on
_settings: dict = {"level": logging.WARNING, "format": _DEFAULT_FORMAT, "stream": None}

_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _make_handler() -> logging.Handler:
    # stream resolved lazily so that pytest's capture of sys.stderr is honoured
    stream = _settings["stream"] if _settings["stream"] is not None else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setLevel(_settings["level"])
    handler.setFormatter(logging.Formatter(_settings["format"]))
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger for the given module name.

    Args:
        name: Logger name, typically ``__name__``. Names outside the package
            namespace are prefixed with ``newtonkrylov.``. If None, returns
            the package logger.

    Returns:
        Configured logger instance, cached per name.

    Example:
        >>> from newtonkrylov.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Krylov solve finished")
    """
    if name is None or name == PACKAGE_LOGGER:
        logger_name = PACKAGE_LOGGER
    elif name.startswith(PACKAGE_LOGGER + "."):
        logger_name = name
    else:
        logger_name = f"{PACKAGE_LOGGER}.{name}"

    logger = _loggers.get(logger_name)
    if logger is not None:
        return logger

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_settings["level"])
        logger.addHandler(_make_handler())
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every package logger, existing and future.

    Args:
        level: Logging level (``logging.DEBUG``, ...) or its name
            (``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"``, ``"CRITICAL"``).
    """
    level = _coerce_level(level)
    _settings["level"] = level
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Route every package logger to a single stream.

    Existing handlers are replaced; loggers created later pick up the same
    settings. Typically called once at application startup, for instance
    with ``level=logging.DEBUG`` to trace Krylov solves and secant updates.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format. Defaults to
            ``"[%(levelname)s] %(name)s: %(message)s"``.
        stream: Output stream (default: ``sys.stderr``).
    """
    _settings["level"] = _coerce_level(level)
    _settings["format"] = format_string or _DEFAULT_FORMAT
    _settings["stream"] = stream

    for logger in _loggers.values():
        logger.setLevel(_settings["level"])
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_make_handler())


__all__ = ["get_logger", "set_log_level", "configure_logging", "PACKAGE_LOGGER"]
