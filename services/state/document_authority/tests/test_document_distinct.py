"""Distinct facet extraction tests."""

from __future__ import annotations

import pytest

from services.state.document_authority import errors
from services.state.document_authority.distinct import (
    DISTINCT_SEARCH_FIELDS,
    DistinctField,
    extract_distinct_results,
)
from services.state.document_authority.domain import (
    Publisher,
    QueryTransaction,
    StudySite,
)
from services.state.document_authority.errors import DocumentServiceError


def _kind(query_result, field_name, raw) -> errors.ErrorKind:
    with pytest.raises(DocumentServiceError) as exc_info:
        extract_distinct_results(query_result, field_name, raw)
    return exc_info.value.kind


def test_publishers_are_projected_in_order() -> None:
    result = QueryTransaction()
    raw = [
        {"lastName": "Seger", "firstName": "Kerri"},
        {"lastName": "Abadi", "firstName": "Shima"},
    ]

    assert extract_distinct_results(result, "Publishers", raw) is True
    assert result.publishers == [
        Publisher(last_name="Seger", first_name="Kerri"),
        Publisher(last_name="Abadi", first_name="Shima"),
    ]


def test_study_sites_are_read_by_position() -> None:
    result = QueryTransaction()
    raw = [{"city": "Seattle", "state": "WA", "province": "", "country": "USA"}]

    extract_distinct_results(result, "StudySites", raw)

    assert result.study_sites == [
        StudySite(city="Seattle", state="WA", province="", country="USA")
    ]


@pytest.mark.parametrize(
    ("field_name", "attribute"),
    [
        ("CallTypeNames", "call_type_names"),
        ("GroundTypes", "ground_types"),
        ("SensorTypes", "sensor_types"),
        ("SensorNames", "sensor_names"),
    ],
)
def test_string_facets(field_name: str, attribute: str) -> None:
    result = QueryTransaction()

    extract_distinct_results(result, field_name, ["a", "b"])

    assert getattr(result, attribute) == ["a", "b"]


def test_unknown_field_name_fails() -> None:
    assert _kind(QueryTransaction(), "Oceans", ["pacific"]) == errors.INVALID_DISTINCT_FIELD_NAME


def test_nil_query_result_fails() -> None:
    assert _kind(None, "Publishers", ["x"]) == errors.NIL_QUERY_RESULT


@pytest.mark.parametrize("raw", [None, []])
def test_empty_raw_results_fail(raw) -> None:
    assert _kind(QueryTransaction(), "GroundTypes", raw) == errors.INVALID_DISTINCT_RESULT


def test_malformed_entries_fail() -> None:
    assert _kind(QueryTransaction(), "Publishers", ["Seger"]) == errors.INVALID_DISTINCT_RESULT
    assert (
        _kind(QueryTransaction(), "StudySites", [{"city": "Seattle"}])
        == errors.INVALID_DISTINCT_RESULT
    )
    assert _kind(QueryTransaction(), "SensorNames", [42]) == errors.INVALID_DISTINCT_RESULT


def test_search_fields_cover_every_facet() -> None:
    assert [field for field, _ in DISTINCT_SEARCH_FIELDS] == list(DistinctField)
