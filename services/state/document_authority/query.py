"""Aggregation pipeline construction for faceted document queries."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from bson.regex import Regex

from services.state.document_authority import errors
from services.state.document_authority.domain import (
    Publisher,
    QueryTransaction,
    StudySite,
)
from services.state.document_authority.errors import DocumentServiceError

# Sole ``$in`` element for a filter with no values; matches any string.
MATCH_ALL = Regex(".*")


def _stripped(values: Iterable[str] | None) -> list[str]:
    return [value.strip() for value in values or () if value.strip() != ""]


def extract_publishers_fields(
    publishers: Sequence[Publisher] | None,
) -> tuple[list[str], list[str]]:
    """Return non-blank ``(last_names, first_names)`` across ``publishers``."""
    publishers = publishers or ()
    return (
        _stripped(item.last_name for item in publishers),
        _stripped(item.first_name for item in publishers),
    )


def extract_study_sites_fields(
    study_sites: Sequence[StudySite] | None,
) -> tuple[list[str], list[str], list[str], list[str]]:
    """Return non-blank ``(cities, states, provinces, countries)``."""
    study_sites = study_sites or ()
    return (
        _stripped(item.city for item in study_sites),
        _stripped(item.state for item in study_sites),
        _stripped(item.province for item in study_sites),
        _stripped(item.country for item in study_sites),
    )


def build_in_clause(path: str, values: Sequence[str]) -> dict[str, Any]:
    """Return ``{path: {"$in": values}}``, or the match-all form when empty."""
    return {path: {"$in": list(values) if values else [MATCH_ALL]}}


def build_aggregate_pipeline(query: QueryTransaction | None) -> list[dict[str, Any]]:
    """Build the single-``$match`` pipeline for one query.

    Clause order is fixed: publisher last/first name, study site city, state,
    province, country, call type, ground type, sensor type, sensor name, then
    the record timestamp window, which is always present.
    """
    if query is None:
        raise DocumentServiceError(errors.NIL_QUERY_TRANSACTION)

    last_names, first_names = extract_publishers_fields(query.publishers)
    cities, states, provinces, countries = extract_study_sites_fields(query.study_sites)

    clauses = [
        build_in_clause("publisherName.lastName", last_names),
        build_in_clause("publisherName.firstName", first_names),
        build_in_clause("studySite.city", cities),
        build_in_clause("studySite.state", states),
        build_in_clause("studySite.province", provinces),
        build_in_clause("studySite.country", countries),
        build_in_clause("callTypeName", _stripped(query.call_type_names)),
        build_in_clause("groundType", _stripped(query.ground_types)),
        build_in_clause("sensorType", _stripped(query.sensor_types)),
        build_in_clause("sensorName", _stripped(query.sensor_names)),
        {
            "recordTimestamp": {
                "$gte": query.min_record_timestamp,
                "$lte": query.max_record_timestamp,
            }
        },
    ]
    return [{"$match": {"$and": clauses}}]
