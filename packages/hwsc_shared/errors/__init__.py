"""Error taxonomy and builders shared by HWSC services."""

from . import codes
from .factories import (
    conflict_error,
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .types import SEVERITY_ORDER, ErrorCategory, ErrorDetail, most_severe_category

__all__ = [
    "SEVERITY_ORDER",
    "ErrorCategory",
    "ErrorDetail",
    "codes",
    "conflict_error",
    "dependency_error",
    "internal_error",
    "most_severe_category",
    "not_found_error",
    "validation_error",
]
