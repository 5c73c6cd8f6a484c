"""Checks applied to envelope metadata before a call is dispatched."""

from __future__ import annotations

from packages.hwsc_shared.errors import ErrorDetail, codes, validation_error

from .meta import EnvelopeKind, EnvelopeMeta

_REQUIRED = ("envelope_id", "trace_id", "source")


def validate_meta(meta: EnvelopeMeta) -> list[ErrorDetail]:
    """Return one validation error per blank required field or unset kind."""
    problems = [
        validation_error(
            f"metadata.{name} is required",
            code=codes.MISSING_REQUIRED_FIELD,
            metadata={"field": f"metadata.{name}"},
        )
        for name in _REQUIRED
        if not str(getattr(meta, name, "")).strip()
    ]
    if meta.kind is EnvelopeKind.UNSPECIFIED:
        problems.append(
            validation_error(
                "metadata.kind must be specified",
                code=codes.INVALID_ARGUMENT,
                metadata={"field": "metadata.kind"},
            )
        )
    return problems
