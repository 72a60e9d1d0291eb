"""JSON log lines for goldsync, one trace id per sync invocation.

Every event is rendered as a single JSON object. Events emitted inside
:func:`log_context` carry that invocation's trace id, provider and range.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, TextIO
from uuid import uuid4

from loguru import logger

_INVOCATION: ContextVar[dict[str, Any]] = ContextVar("goldsync_invocation", default={})

_TOP_LEVEL_FIELDS = ("trace_id", "provider", "error_code")


def _attach_invocation(record: dict[str, Any]) -> None:
    extra = record["extra"]
    for key, value in _INVOCATION.get().items():
        extra.setdefault(key, value)


def _render(record: dict[str, Any]) -> str:
    extra = dict(record["extra"])
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
    }
    for key in _TOP_LEVEL_FIELDS:
        payload[key] = extra.pop(key, None)
    if "from_date" in extra or "to_date" in extra:
        payload["range"] = {"from": extra.pop("from_date", None), "to": extra.pop("to_date", None)}
    if extra:
        payload["context"] = extra
    exception = record["exception"]
    if exception is not None and exception.type is not None:
        payload["exception"] = f"{exception.type.__name__}: {exception.value}"
    return json.dumps(payload, ensure_ascii=False, default=str)


class JsonLineSink:
    """Writes each event as one JSON line to a stream or an appended file.

    Without ``stream`` or ``path`` events go to whatever ``sys.stderr`` is at
    write time, so redirected test and CLI streams are honoured.
    """

    def __init__(self, stream: TextIO | None = None, path: str | Path | None = None):
        self.stream = stream
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        line = _render(message.record) + "\n"
        if self.path is not None:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line)
            return
        stream = self.stream or sys.stderr
        stream.write(line)
        stream.flush()


def configure_logging(
    level: str = "INFO",
    *,
    stream: TextIO | None = None,
    file_path: str | Path | None = None,
    console: bool = True,
) -> None:
    """Replace every loguru handler with goldsync's JSON sinks."""

    handlers: list[dict[str, Any]] = []
    if console:
        handlers.append({"sink": JsonLineSink(stream), "level": level.upper()})
    if file_path:
        handlers.append({"sink": JsonLineSink(path=file_path), "level": level.upper()})
    logger.configure(handlers=handlers, patcher=_attach_invocation)


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Tag every event emitted inside the block with ``fields`` and a trace id."""

    active = trace_id or uuid4().hex
    token = _INVOCATION.set({**_INVOCATION.get(), **fields, "trace_id": active})
    try:
        yield active
    finally:
        _INVOCATION.reset(token)


configure_logging()


__all__ = ["JsonLineSink", "configure_logging", "log_context", "logger"]
