"""
ledger_vm.logging
-----------------

Structured logging for the ledger host:
- JSON or concise colored text formats
- Context-local fields via `contextvars` (trace_id, caller, method, ...)
- Safe JSON serialization (bytes → 0x-hex)
- Helpers to bind/unbind context fields and open a trace scope per call

Usage
-----
    from ledger_vm import logging as llog

    llog.configure(json=False, level="INFO")  # once at process start (CLI)
    log = llog.get_logger(__name__)

    with llog.trace_scope(caller="0x01..", method="transfer"):
        log.debug("dispatch")

Library modules only call `get_logger`; handlers are installed by processes.
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from ledger_vm.config import load_config

_CALL_FIELDS: ContextVar[Dict[str, Any]] = ContextVar("ledger_vm_log_fields", default={})

DEFAULT_CONTEXT_KEYS = (
    "trace_id",
    "caller",
    "method",
)

# LogRecord attributes that are never treated as structured extras.
_RESERVED = frozenset(
    (
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    )
)


# ----------------------------
# Context
# ----------------------------


def context() -> Dict[str, Any]:
    """Snapshot of the fields bound to the current call (a copy)."""
    return dict(_CALL_FIELDS.get())


def bind(**fields: Any) -> None:
    """Attach fields to every record logged from this context."""
    cur = dict(_CALL_FIELDS.get())
    cur.update({k: _jsonable(v) for k, v in fields.items()})
    _CALL_FIELDS.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_CALL_FIELDS.get())
    for k in keys:
        cur.pop(k, None)
    _CALL_FIELDS.set(cur)


def clear_context() -> None:
    _CALL_FIELDS.set({})


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None, **fields: Any) -> Iterator[str]:
    """
    Ensure a trace_id (plus any extra fields) for the duration of the scope.
    Restores the prior context on exit.
    """
    prev = dict(_CALL_FIELDS.get())
    tid = trace_id or short_uuid()
    try:
        bind(trace_id=tid, **fields)
        yield tid
    finally:
        _CALL_FIELDS.set(prev)


# ----------------------------
# Formatters
# ----------------------------


def _jsonable(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return str(v)


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in record.__dict__.items():
        if k.startswith("_") or k in _RESERVED:
            continue
        out[k] = _jsonable(v)
    return out


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, default=str, separators=(",", ":"))


_GREY = "\x1b[90m"
_RESET = "\x1b[0m"
_LEVEL_COLOR = {
    logging.DEBUG: _GREY,
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}


def _supports_color(stream: Any) -> bool:
    try:
        return stream.isatty() and os.environ.get("NO_COLOR") is None
    except (AttributeError, ValueError):
        return False


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | INFO  | ledger_vm.runtime.engine | trace_id=abc123 method=transfer | reverted
    """

    def __init__(self, stream: Any = None):
        super().__init__()
        self._color = _supports_color(stream) if stream is not None else False

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        ctx_str = " ".join(f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items() if k not in ctx)

        lvl = f"{record.levelname:<5}"
        if self._color:
            lvl = f"{_LEVEL_COLOR.get(record.levelno, '')}{lvl}{_RESET}"

        line = f"{_utcnow_iso()} | {lvl} | {record.name}"
        if ctx_str:
            line += f" | {ctx_str}"
        if extras:
            line += f" {extras}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Public setup API
# ----------------------------


_LEVEL_TO_INT = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _level_number(level: str | int) -> int:
    return level if isinstance(level, int) else _LEVEL_TO_INT.get(level.upper(), logging.INFO)


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: io.TextIOBase = sys.stderr,
) -> None:
    """
    Configure the root logger with a single console handler.

    If `json` is None the format follows LEDGER_VM_LOG_FORMAT when set, else
    JSON for non-TTY streams and text for interactive terminals.
    """
    if json is None:
        fmt = load_config().log_format
        json = (fmt == "json") if fmt is not None else not _supports_color(stream)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter() if json else TextFormatter(stream))

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(_level_number(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "ledger_vm")


__all__ = [
    "context",
    "bind",
    "unbind",
    "clear_context",
    "trace_scope",
    "short_uuid",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
]
