"""Projection of raw ``distinct`` results into typed facet lists."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

from services.state.document_authority import errors
from services.state.document_authority.domain import (
    Publisher,
    QueryTransaction,
    StudySite,
)
from services.state.document_authority.errors import DocumentServiceError


class DistinctField(str, Enum):
    """Facet names, each bound to one ``QueryTransaction`` list."""

    PUBLISHERS = "Publishers"
    STUDY_SITES = "StudySites"
    CALL_TYPE_NAMES = "CallTypeNames"
    GROUND_TYPES = "GroundTypes"
    SENSOR_TYPES = "SensorTypes"
    SENSOR_NAMES = "SensorNames"


# Facet -> persisted document path passed to ``distinct``.
DISTINCT_SEARCH_FIELDS: tuple[tuple[DistinctField, str], ...] = (
    (DistinctField.PUBLISHERS, "publisherName"),
    (DistinctField.STUDY_SITES, "studySite"),
    (DistinctField.CALL_TYPE_NAMES, "callTypeName"),
    (DistinctField.GROUND_TYPES, "groundType"),
    (DistinctField.SENSOR_TYPES, "sensorType"),
    (DistinctField.SENSOR_NAMES, "sensorName"),
)

_STRING_FACETS = {
    DistinctField.CALL_TYPE_NAMES: "call_type_names",
    DistinctField.GROUND_TYPES: "ground_types",
    DistinctField.SENSOR_TYPES: "sensor_types",
    DistinctField.SENSOR_NAMES: "sensor_names",
}


def _positional(entry: object, width: int) -> list[str]:
    """Return the first ``width`` values of one sub-document, by position."""
    if isinstance(entry, Mapping):
        values = list(entry.values())
    elif isinstance(entry, Sequence) and not isinstance(entry, str):
        values = list(entry)
    else:
        raise DocumentServiceError(errors.INVALID_DISTINCT_RESULT)
    if len(values) < width or not all(isinstance(v, str) for v in values[:width]):
        raise DocumentServiceError(errors.INVALID_DISTINCT_RESULT)
    return values[:width]


def _publisher(entry: object) -> Publisher:
    last_name, first_name = _positional(entry, 2)
    return Publisher(last_name=last_name, first_name=first_name)


def _study_site(entry: object) -> StudySite:
    city, state, province, country = _positional(entry, 4)
    return StudySite(city=city, state=state, province=province, country=country)


def _string(entry: object) -> str:
    if not isinstance(entry, str):
        raise DocumentServiceError(errors.INVALID_DISTINCT_RESULT)
    return entry


def extract_distinct_results(
    query_result: QueryTransaction | None,
    field_name: str,
    raw_results: Sequence[object] | None,
) -> bool:
    """Populate the facet of ``query_result`` named by ``field_name``.

    Publisher entries are indexed lastName=0, firstName=1; study site entries
    city=0, state=1, province=2, country=3. Returns ``True`` on success.
    """
    if query_result is None:
        raise DocumentServiceError(errors.NIL_QUERY_RESULT)
    if not raw_results:
        raise DocumentServiceError(errors.INVALID_DISTINCT_RESULT)
    try:
        field = DistinctField(field_name)
    except ValueError:
        raise DocumentServiceError(
            errors.INVALID_DISTINCT_FIELD_NAME, metadata={"field_name": str(field_name)}
        ) from None

    if field is DistinctField.PUBLISHERS:
        query_result.publishers = [_publisher(entry) for entry in raw_results]
    elif field is DistinctField.STUDY_SITES:
        query_result.study_sites = [_study_site(entry) for entry in raw_results]
    else:
        setattr(query_result, _STRING_FACETS[field], [_string(e) for e in raw_results])
    return True
