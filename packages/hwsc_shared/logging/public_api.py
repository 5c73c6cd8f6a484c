"""Structured invocation/completion logging for public service API methods.

``public_api_logged`` wraps one method so every call emits an invocation log
and a completion log carrying correlation fields, duration, and error
summaries taken from the returned envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    trace_id: str | None
    envelope_id: str | None
    principal: str | None
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]
    error_categories: list[str]


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with invocation/completion logging.

    ``id_fields`` names keyword arguments attached to both log lines.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            meta = kwargs.get("meta")
            invocation = InvocationContext(
                component_id=component_id,
                api_name=method_name,
                trace_id=_attr_or_none(meta, "trace_id"),
                envelope_id=_attr_or_none(meta, "envelope_id"),
                principal=_attr_or_none(meta, "principal"),
                references=_references(kwargs, id_fields),
            )
            with log_context(_invocation_log_context(invocation)):
                logger.info("Public API invocation")

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _log_completion(
                    logger,
                    CompletionContext(
                        invocation=invocation,
                        success=False,
                        duration_ms=_elapsed_ms(started),
                        errors=[f"{type(exc).__name__}: {exc}"],
                        error_categories=["internal"],
                    ),
                )
                raise

            success, errors = _result_summary(result)
            _log_completion(
                logger,
                CompletionContext(
                    invocation=invocation,
                    success=success,
                    duration_ms=_elapsed_ms(started),
                    errors=errors,
                    error_categories=_result_error_categories(result),
                ),
            )
            return result

        return wrapper

    return decorator


def _log_completion(logger: Any, context: CompletionContext) -> None:
    payload = _invocation_log_context(context.invocation)
    payload.update(
        {
            fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
            fields.SUCCESS: context.success,
            fields.DURATION_MS: context.duration_ms,
            fields.ERRORS: context.errors,
        }
    )
    if context.error_categories:
        payload[fields.ERROR_CATEGORY] = ",".join(context.error_categories)
    with log_context(payload):
        if context.success:
            logger.info("Public API completion")
        else:
            logger.warning("Public API completion")


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _references(kwargs: Mapping[str, Any], id_fields: tuple[str, ...]) -> dict[str, str]:
    references: dict[str, str] = {}
    for name in id_fields:
        value = kwargs.get(name)
        if value not in (None, ""):
            references[name] = str(value)
    return references


def _attr_or_none(obj: object | None, name: str) -> str | None:
    if obj is None:
        return None
    value = getattr(obj, name, None)
    if value in (None, ""):
        return None
    return str(value)


def _result_summary(result: object) -> tuple[bool, list[str]]:
    """Infer success and one-line error summaries from a result value."""
    errors = _sanitize_errors(getattr(result, "errors", []))
    ok_value = getattr(result, "ok", None)
    if isinstance(ok_value, bool):
        return ok_value, errors
    return len(errors) == 0, errors


def _result_error_categories(result: object) -> list[str]:
    errors_obj = getattr(result, "errors", [])
    if not isinstance(errors_obj, list):
        return []
    categories: list[str] = []
    for item in errors_obj:
        raw = getattr(item, "category", None)
        category = getattr(raw, "value", raw)
        if category not in (None, ""):
            categories.append(str(category))
    return categories


def _sanitize_errors(errors: object) -> list[str]:
    if not isinstance(errors, list):
        return []
    summaries: list[str] = []
    for item in errors:
        code = getattr(item, "code", None)
        message = getattr(item, "message", None)
        if message in (None, ""):
            continue
        summaries.append(str(message) if code in (None, "") else f"{code}: {message}")
    return summaries


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        fields.TRACE_ID: context.trace_id,
        fields.ENVELOPE_ID: context.envelope_id,
        fields.PRINCIPAL: context.principal,
        **context.references,
    }
