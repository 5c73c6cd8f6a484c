"""File identifiers keyed into a document's media URL maps."""

from __future__ import annotations

import uuid

FUID_LENGTH = 36


def generate_fuid() -> str:
    """Generate a canonical lower-case 8-4-4-4-12 random (version 4) FUID."""
    return str(uuid.uuid4())
