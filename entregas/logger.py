"""
Structured JSON Logging.

Every service and repository receives a ``StructuredLogger`` through its
constructor.  Each record becomes one JSON line on stdout and in a
rotating file, so a user's role-resolution trail can be followed with
``grep '"user_id": "<uid>"'``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO, Union

JsonScalar = Union[str, int, float, bool, None]

_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.makeLogRecord({})).keys()
) | {"message", "asctime", "taskName"}


def _json_scalar(value: object) -> JsonScalar:
    """Keep JSON-native scalars as they are; stringify everything else."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    ``timestamp`` (UTC, ISO-8601), ``level``, ``logger_name`` and
    ``message`` are always present.  Fields passed through ``extra=`` are
    grouped under ``extra``; a traceback, if any, under ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        context = {
            key: _json_scalar(value)
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS
        }
        if context:
            entry["extra"] = context

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


def _attach_handlers(
    target: logging.Logger,
    level: int,
    stream: TextIO,
    log_file: str,
    max_bytes: int,
    backup_count: int,
) -> None:
    formatter = JSONFormatter()

    console = logging.StreamHandler(stream)
    console.setLevel(level)
    console.setFormatter(formatter)
    target.addHandler(console)

    try:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            filename=str(path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except OSError as exc:
        target.warning(
            "Could not open log file '%s' (%s); logging to console only.",
            log_file,
            exc,
        )
        return
    rotating.setLevel(level)
    rotating.setFormatter(formatter)
    target.addHandler(rotating)


class StructuredLogger:
    """Injectable wrapper around a named ``logging.Logger``.

    Handlers are attached the first time a name is used; later instances
    with the same name share them.  Unset arguments fall back to
    ``AppConfig`` (``LOG_LEVEL``, ``LOG_FILE``, ``LOG_MAX_BYTES``,
    ``LOG_BACKUP_COUNT``).

    Usage::

        log = StructuredLogger(name="resolver")
        log.info("Role resolved: %s", role, extra={"user_id": uid})
    """

    def __init__(
        self,
        name: str = "entregas",
        level: Optional[int] = None,
        stream: Optional[TextIO] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        # Imported here: config logs through plain ``logging`` at import.
        from entregas.config import get_config
        cfg = get_config()

        resolved_level = level if level is not None else logging.getLevelName(cfg.LOG_LEVEL)
        if not isinstance(resolved_level, int):
            resolved_level = logging.INFO

        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(resolved_level)

        if not self._logger.handlers:
            _attach_handlers(
                self._logger,
                resolved_level,
                stream or sys.stdout,
                log_file or cfg.LOG_FILE,
                max_bytes if max_bytes is not None else cfg.LOG_MAX_BYTES,
                backup_count if backup_count is not None else cfg.LOG_BACKUP_COUNT,
            )

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.exception(msg, *args, **kwargs)


def get_logger(name: str = "entregas") -> StructuredLogger:
    """Return a ``StructuredLogger`` named *name*."""
    return StructuredLogger(name=name)
