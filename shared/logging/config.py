"""Process-wide logging setup: JSON to stderr, secrets scrubbed, noisy libraries muted."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from shared.redaction import sanitize_text

from .structured import JsonFormatter

__all__ = ["QUIET_LOGGERS", "RedactingFilter", "setup_logging"]

# discord.py reports every reconnect and rate-limit bucket at INFO.
QUIET_LOGGERS: tuple[str, ...] = ("discord.gateway", "discord.client", "discord.http")


class RedactingFilter(logging.Filter):
    """Mask tokens and webhook urls before a record reaches any handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = sanitize_text(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _json_handler(static: Mapping[str, str]) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(static=static))
    handler.addFilter(RedactingFilter())
    return handler


def _install_root_handler(root: logging.Logger, static: Mapping[str, str]) -> None:
    # Reuse stream handlers from basicConfig so lines are not printed twice.
    streams = [h for h in root.handlers if isinstance(h, logging.StreamHandler)]
    if not streams:
        root.addHandler(_json_handler(static))
        return
    for handler in streams:
        handler.setFormatter(JsonFormatter(static=static))
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())


def setup_logging(
    *,
    level: str | int = logging.INFO,
    static_fields: Mapping[str, str] | None = None,
    access_logger_name: str = "aiohttp.access",
    access_static_fields: Mapping[str, str] | None = None,
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> logging.Logger:
    """Switch the process to JSON logging and return the HTTP access logger.

    ``level`` accepts a name such as ``"debug"`` or a number; unknown names
    mean ``INFO``. Loggers listed in ``quiet`` never go below ``WARNING``.
    The access logger does not propagate, so request lines are emitted once
    with ``access_static_fields`` merged over ``static_fields``.
    """

    resolved = _resolve_level(level)
    base_static = dict(static_fields or {})

    root = logging.getLogger()
    root.setLevel(resolved)
    _install_root_handler(root, base_static)

    for name in quiet:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))

    access_static = {**base_static, **dict(access_static_fields or {})}
    access_static.setdefault("logger", access_logger_name)

    access_logger = logging.getLogger(access_logger_name)
    access_logger.propagate = False
    access_logger.handlers.clear()
    access_logger.addHandler(_json_handler(access_static))
    access_logger.setLevel(logging.INFO)
    return access_logger
