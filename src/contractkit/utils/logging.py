"""
Structured logging for contractkit.

Thin layer over the standard library ``logging`` module. All loggers live
under the ``contractkit`` namespace and accept structured context through
``extra={...}``; the formatter renders those fields after the message.

Example:
    >>> from contractkit.utils.logging import get_logger, configure_logging
    >>> configure_logging("DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Deployment submitted", extra={"tx_hash": "0xabc"})
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import ContextDecorator
from typing import Any, Dict, Optional, Union

ROOT_LOGGER_NAME = "contractkit"

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.addHandler(logging.NullHandler())


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Render ``extra`` fields as ``key=value`` pairs or a JSON object."""

    def __init__(self, json_format: bool = False) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        fields = _extra_fields(record)
        if self.json_format:
            payload = {
                "time": self.formatTime(record),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                **fields,
            }
            if record.exc_info:
                payload["exception"] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        line = super().format(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        return line


class _ContextFilter(logging.Filter):
    """Inject LogContext fields into every record passing through."""

    def __init__(self, fields: Dict[str, Any]) -> None:
        super().__init__()
        self.fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the contractkit namespace.

    Args:
        name: Module name (``__name__``); names outside the namespace are nested

    Returns:
        Logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return _root
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    json_format: bool = False,
    stream: Any = None,
) -> logging.Logger:
    """
    Attach a stream handler with the structured formatter.

    Calling this again replaces the handler installed by a previous call.

    Args:
        level: Log level name or number
        json_format: Emit one JSON object per line
        stream: Target stream (default: stderr)

    Returns:
        The contractkit root logger
    """
    for handler in list(_root.handlers):
        if getattr(handler, "_contractkit_handler", False):
            _root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter(json_format=json_format))
    handler._contractkit_handler = True  # type: ignore[attr-defined]
    _root.addHandler(handler)
    set_level(level)
    return _root


def set_level(level: Union[int, str]) -> None:
    """Set the level of the contractkit root logger."""
    if isinstance(level, str):
        level = level.upper()
    _root.setLevel(level)


def enable_debug() -> None:
    """Shortcut for ``configure_logging("DEBUG")``."""
    configure_logging(logging.DEBUG)


def disable_logging() -> None:
    """Silence every contractkit logger until configure_logging is called again."""
    _root.setLevel(logging.CRITICAL + 1)


class LogContext(ContextDecorator):
    """
    Bind structured fields to every record logged inside the block.

    Example:
        >>> with LogContext(tx_hash="0xabc"):
        ...     get_logger(__name__).info("Polling")  # carries tx_hash
    """

    def __init__(self, logger: Optional[logging.Logger] = None, **fields: Any) -> None:
        self._logger = logger or _root
        self._filter = _ContextFilter(fields)

    def __enter__(self) -> LogContext:
        for handler in self._logger.handlers:
            handler.addFilter(self._filter)
        return self

    def __exit__(self, *exc: Any) -> None:
        for handler in self._logger.handlers:
            handler.removeFilter(self._filter)
