"""Builders for ``ErrorDetail`` values, one per category."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


def _detail(
    category: ErrorCategory,
    message: str,
    code: str,
    retryable: bool,
    metadata: Mapping[str, str] | None,
) -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message=message,
        category=category,
        retryable=retryable,
        metadata=dict(metadata or {}),
    )


def validation_error(
    message: str,
    *,
    code: str = codes.VALIDATION_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return _detail(ErrorCategory.VALIDATION, message, code, False, metadata)


def not_found_error(
    message: str,
    *,
    code: str = codes.NOT_FOUND,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return _detail(ErrorCategory.NOT_FOUND, message, code, False, metadata)


def conflict_error(
    message: str,
    *,
    code: str = codes.ALREADY_EXISTS,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Duplicate-key style failure; never retryable as-is."""
    return _detail(ErrorCategory.CONFLICT, message, code, False, metadata)


def dependency_error(
    message: str,
    *,
    code: str = codes.DEPENDENCY_FAILURE,
    retryable: bool = True,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Failure of MongoDB or another backing system.

    Retryable unless the caller says otherwise.
    """
    return _detail(ErrorCategory.DEPENDENCY, message, code, retryable, metadata)


def internal_error(
    message: str,
    *,
    code: str = codes.INTERNAL_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return _detail(ErrorCategory.INTERNAL, message, code, False, metadata)
