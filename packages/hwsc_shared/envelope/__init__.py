"""Result envelope API shared by HWSC services."""

from .envelope import Envelope, failure, success
from .meta import EnvelopeKind, EnvelopeMeta, meta_from_headers, new_meta
from .validate import validate_meta

__all__ = [
    "Envelope",
    "EnvelopeKind",
    "EnvelopeMeta",
    "failure",
    "meta_from_headers",
    "new_meta",
    "success",
    "validate_meta",
]
