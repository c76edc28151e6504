"""JSON log records tagged with the trace id of the current command or request."""

from __future__ import annotations

import contextvars
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

# Each discord.py event and each aiohttp request runs in its own task, and
# tasks copy the context, so concurrent invocations never share a trace id.
_current_trace: contextvars.ContextVar[str] = contextvars.ContextVar("corgo_trace", default="")

# Attributes every LogRecord carries; only caller-supplied extras are emitted.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def set_trace_id(value: str | None = None) -> str:
    """Bind ``value`` (or a fresh uuid4) as the trace id and return it."""

    trace = value or uuid.uuid4().hex
    _current_trace.set(trace)
    return trace


def get_trace_id() -> str:
    return _current_trace.get()


def _timestamp(record: logging.LogRecord) -> str:
    moment = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z"


def _is_scalar(value: object) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


class JsonFormatter(logging.Formatter):
    """One JSON object per line: core fields, then ``static``, then scalar extras."""

    def __init__(self, static: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._static = dict(static or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "trace": getattr(record, "trace", "") or get_trace_id(),
            **self._static,
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS
            and key not in payload
            and not key.startswith("_")
            and _is_scalar(value)
        }
        payload.update(extras)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
