"""Structured stdout logging for HWSC services."""

from .config import configure_logging, get_logger
from .context import bind_context, clear_context, get_context, log_context
from .public_api import CompletionContext, InvocationContext, public_api_logged

__all__ = [
    "CompletionContext",
    "InvocationContext",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
    "public_api_logged",
]
