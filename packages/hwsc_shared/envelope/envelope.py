"""Typed result envelope returned by every in-process service call."""

from __future__ import annotations

from typing import Generic, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from packages.hwsc_shared.errors import ErrorCategory, ErrorDetail, most_severe_category

from .meta import EnvelopeMeta

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Call metadata plus either a payload or the errors that replaced it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    metadata: EnvelopeMeta
    payload: T | None = None
    errors: list[ErrorDetail] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def value(self) -> T | None:
        """Payload when the call succeeded, else ``None``."""
        return self.payload if self.ok else None

    def severest(self) -> ErrorCategory | None:
        """Category of the most severe attached error, if any."""
        return most_severe_category(self.errors)

    def messages(self, category: ErrorCategory) -> list[str]:
        return [error.message for error in self.errors if error.category == category]


def success(*, meta: EnvelopeMeta, payload: T) -> Envelope[T]:
    return Envelope[T](metadata=meta, payload=payload)


def failure(*, meta: EnvelopeMeta, errors: Iterable[ErrorDetail]) -> Envelope[T]:
    """Build an error envelope; at least one error is expected."""
    return Envelope[T](metadata=meta, errors=list(errors))
