"""Call metadata carried alongside every envelope."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Iterable
from uuid import uuid4


class EnvelopeKind(str, Enum):
    """Whether a call reads state or changes it."""

    UNSPECIFIED = "unspecified"
    COMMAND = "command"
    QUERY = "query"


@dataclass(frozen=True)
class EnvelopeMeta:
    envelope_id: str
    trace_id: str
    timestamp: datetime
    kind: EnvelopeKind
    source: str
    principal: str


def new_meta(
    *,
    kind: EnvelopeKind,
    source: str,
    principal: str = "",
    trace_id: str | None = None,
    envelope_id: str | None = None,
    timestamp: datetime | None = None,
) -> EnvelopeMeta:
    """Build metadata, generating ids and stamping the current UTC time when omitted."""
    if timestamp is None:
        stamped = datetime.now(UTC)
    elif timestamp.tzinfo is None:
        stamped = timestamp.replace(tzinfo=UTC)
    else:
        stamped = timestamp.astimezone(UTC)
    return EnvelopeMeta(
        envelope_id=envelope_id or uuid4().hex,
        trace_id=trace_id or uuid4().hex,
        timestamp=stamped,
        kind=kind,
        source=source,
        principal=principal,
    )


def meta_from_headers(
    headers: Iterable[tuple[str, str]] | None,
    *,
    kind: EnvelopeKind,
    source: str,
    trace_key: str,
    principal_key: str,
) -> EnvelopeMeta:
    """Build metadata from transport key/value headers.

    A blank or missing trace header gets a fresh trace id.
    """
    values = dict(headers or ())
    return new_meta(
        kind=kind,
        source=source,
        principal=str(values.get(principal_key, "")),
        trace_id=str(values.get(trace_key, "")).strip() or None,
    )
