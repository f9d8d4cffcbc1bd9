"""
Structured logging for the payout kernel.

Every record under the ``payout_kernel`` logger namespace is rendered as a
single JSON object per line.  A record carries, in order of precedence:

    1. base fields: ts, level, logger, message
    2. invocation-scoped fields from ``LogContext`` (correlation_id,
       action, sender, trace_id)
    3. whatever the caller passed through ``extra={...}``
    4. ``exc_*`` fields when logged with ``exc_info``; kernel exceptions
       contribute their ``code`` and structured attributes

Context lives in a single ``ContextVar`` holding an immutable mapping, so
concurrent invocations never see each other's fields.
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

LOGGER_NAMESPACE = "payout_kernel"

_EMPTY: Mapping[str, str] = MappingProxyType({})
_context: ContextVar[Mapping[str, str]] = ContextVar("payout_log_context", default=_EMPTY)


class LogContext:
    """Invocation-scoped log fields, merged into every record."""

    FIELDS: tuple[str, ...] = ("correlation_id", "action", "sender", "trace_id")

    @classmethod
    def _check(cls, names: Iterable[str]) -> None:
        unknown = sorted(set(names) - set(cls.FIELDS))
        if unknown:
            raise TypeError(f"Unknown log context fields: {unknown}")

    @classmethod
    def _merged(cls, values: Mapping[str, str | None]) -> Mapping[str, str]:
        merged = dict(_context.get())
        merged.update({k: v for k, v in values.items() if v is not None})
        return MappingProxyType(merged)

    @classmethod
    def set(
        cls,
        *,
        correlation_id: str | None = None,
        action: str | None = None,
        sender: str | None = None,
        trace_id: str | None = None,
    ) -> None:
        """Add fields to the current context; ``None`` leaves a field as is."""
        _context.set(cls._merged({
            "correlation_id": correlation_id,
            "action": action,
            "sender": sender,
            "trace_id": trace_id,
        }))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    def bind(cls, **fields: str | None):
        """Scope fields to a ``with`` block; the prior context is restored on exit.

        Unknown field names raise ``TypeError`` immediately, not on entry.
        """
        cls._check(fields)
        return cls._scoped(fields)

    @classmethod
    @contextmanager
    def _scoped(cls, fields: Mapping[str, str | None]) -> Iterator[type[LogContext]]:
        token = _context.set(cls._merged(fields))
        try:
            yield cls
        finally:
            _context.reset(token)


# Attribute names every LogRecord has; anything else came from ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.makeLogRecord({}).__dict__
) | {"message", "asctime", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(str(item) for item in obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """Renders a LogRecord as one line of JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record))
        return json.dumps(payload, default=_json_default)

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # structured attributes set by PayoutKernelError subclasses
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


def get_logger(name: str) -> logging.Logger:
    """Logger named ``payout_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_configure_lock = threading.Lock()
_configured = False


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the namespace root; later calls do nothing."""
    global _configured
    with _configure_lock:
        if _configured:
            return
        _configured = True

        if handler is None:
            handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(StructuredFormatter())

        root = logging.getLogger(LOGGER_NAMESPACE)
        root.setLevel(level)
        root.addHandler(handler)
        root.propagate = False


def reset_logging() -> None:
    """Undo ``configure_logging``. Test use only."""
    global _configured
    with _configure_lock:
        _configured = False
        root = logging.getLogger(LOGGER_NAMESPACE)
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.setLevel(logging.WARNING)
        root.propagate = True
