"""Transport-agnostic error taxonomy for HWSC services.

Services return ``ErrorDetail`` values inside envelopes. Adapters choose one
transport status from the most severe category present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping


class ErrorCategory(str, Enum):
    UNSPECIFIED = "unspecified"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


# Most severe first.
SEVERITY_ORDER: tuple[ErrorCategory, ...] = (
    ErrorCategory.INTERNAL,
    ErrorCategory.DEPENDENCY,
    ErrorCategory.NOT_FOUND,
    ErrorCategory.CONFLICT,
    ErrorCategory.VALIDATION,
    ErrorCategory.UNSPECIFIED,
)


@dataclass(frozen=True)
class ErrorDetail:
    """One structured failure attached to an envelope."""

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    metadata: Mapping[str, str] = field(default_factory=dict)


def most_severe_category(errors: Iterable[ErrorDetail]) -> ErrorCategory | None:
    """Return the highest-ranked category among ``errors``, or ``None``."""
    present = {error.category for error in errors}
    for category in SEVERITY_ORDER:
        if category in present:
            return category
    return None
