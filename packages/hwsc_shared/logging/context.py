"""Per-request structured logging context.

Values bound here are attached to every record emitted on the same thread or
task until the surrounding ``log_context`` block exits. Each gRPC worker
thread starts empty.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_FIELDS: ContextVar[Mapping[str, str]] = ContextVar("hwsc_log_fields", default={})


def _stringify(values: Mapping[str, object]) -> dict[str, str]:
    return {str(key): str(value) for key, value in values.items() if value is not None}


def get_context() -> dict[str, str]:
    return dict(_FIELDS.get())


def bind_context(**values: object) -> None:
    """Merge ``values`` into the current context; ``None`` values are skipped."""
    merged = {**_FIELDS.get(), **_stringify(values)}
    _FIELDS.set(merged)


def clear_context() -> None:
    _FIELDS.set({})


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    token = _FIELDS.set({**_FIELDS.get(), **_stringify(values)})
    try:
        yield
    finally:
        _FIELDS.reset(token)
