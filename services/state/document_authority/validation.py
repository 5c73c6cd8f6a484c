"""Field-level and whole-document validation rules.

Every validator returns ``None`` on success and raises
``DocumentValidationError`` carrying the first violated error kind.
URL validators take a ``probe`` callable that answers whether a URL is
reachable; the service injects an HTTP-backed probe and tests inject fakes.
"""

from __future__ import annotations

import math
import re
import time
from typing import Callable, Mapping
from urllib.parse import urlsplit

from services.state.document_authority import errors
from services.state.document_authority.domain import (
    Document,
    MediaType,
    Publisher,
    StudySite,
)
from services.state.document_authority.errors import DocumentValidationError, ErrorKind

UrlProbe = Callable[[str], bool]

MAX_LAST_NAME_LENGTH = 32
MAX_FIRST_NAME_LENGTH = 32
MAX_CALL_TYPE_NAME_LENGTH = 64
MAX_GROUND_TYPE_LENGTH = 64
MAX_CITY_LENGTH = 64
MAX_STATE_LENGTH = 32
MAX_PROVINCE_LENGTH = 48
MAX_COUNTRY_LENGTH = 64
MAX_SENSOR_TYPE_LENGTH = 64
MAX_SENSOR_NAME_LENGTH = 64
MAX_SAMPLING_RATE = 4_000_000_000
MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0
# Jan 1, 1990 UTC
MIN_TIMESTAMP = 631_152_000

DUID_PATTERN = re.compile(r"[0-9A-Za-z]{27}")
UUID_PATTERN = re.compile(r"[0-9A-Za-z]{26}")
FUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")
IMAGE_PATTERN = re.compile(r".*(jpg|jpeg|png|bmp|tif|gif|tiff).*")
AUDIO_PATTERN = re.compile(r".*(wav|wma|ogg|m4a|mp3).*")
VIDEO_PATTERN = re.compile(r".*(flv|wmv|mov|avi|mp4).*")

OCEANS = frozenset({"pacific", "atlantic", "indian", "southern", "arctic"})


def _fail(kind: ErrorKind, **metadata: str) -> DocumentValidationError:
    return DocumentValidationError(kind, metadata=metadata)


def _is_blank(value: str) -> bool:
    return value.strip() == ""


def _require_text(value: str, *, max_length: int, kind: ErrorKind) -> None:
    if _is_blank(value) or len(value) > max_length:
        raise _fail(kind)


# Identifiers


def validate_duid(duid: str) -> None:
    """Accept an empty duid (not yet assigned) or exactly 27 alphanumerics."""
    if duid != "" and DUID_PATTERN.fullmatch(duid) is None:
        raise _fail(errors.INVALID_DUID)


def validate_uuid(uuid: str) -> None:
    if UUID_PATTERN.fullmatch(uuid) is None:
        raise _fail(errors.INVALID_UUID)


def validate_fuid(fuid: str) -> None:
    if FUID_PATTERN.fullmatch(fuid) is None:
        raise _fail(errors.INVALID_FUID)


# Text attributes


def validate_last_name(last_name: str) -> None:
    _require_text(last_name, max_length=MAX_LAST_NAME_LENGTH, kind=errors.INVALID_LAST_NAME)


def validate_first_name(first_name: str) -> None:
    _require_text(
        first_name, max_length=MAX_FIRST_NAME_LENGTH, kind=errors.INVALID_FIRST_NAME
    )


def validate_publisher(publisher: Publisher | None) -> None:
    """Validate last name then first name; an absent publisher has blank names."""
    publisher = publisher or Publisher()
    validate_last_name(publisher.last_name)
    validate_first_name(publisher.first_name)


def validate_call_type_name(call_type_name: str) -> None:
    _require_text(
        call_type_name,
        max_length=MAX_CALL_TYPE_NAME_LENGTH,
        kind=errors.INVALID_CALL_TYPE_NAME,
    )


def validate_ground_type(ground_type: str) -> None:
    _require_text(
        ground_type, max_length=MAX_GROUND_TYPE_LENGTH, kind=errors.INVALID_GROUND_TYPE
    )


def validate_city(city: str) -> None:
    _require_text(city, max_length=MAX_CITY_LENGTH, kind=errors.INVALID_CITY)


def validate_state(state: str) -> None:
    """State may be empty; only its length is bounded."""
    if len(state) > MAX_STATE_LENGTH:
        raise _fail(errors.INVALID_STATE)


def validate_province(province: str) -> None:
    """Province may be empty; only its length is bounded."""
    if len(province) > MAX_PROVINCE_LENGTH:
        raise _fail(errors.INVALID_PROVINCE)


def validate_country(country: str) -> None:
    _require_text(country, max_length=MAX_COUNTRY_LENGTH, kind=errors.INVALID_COUNTRY)


def validate_study_site(study_site: StudySite | None) -> None:
    """Validate city, state, province, country in that order."""
    study_site = study_site or StudySite()
    validate_city(study_site.city)
    validate_state(study_site.state)
    validate_province(study_site.province)
    validate_country(study_site.country)


def validate_ocean(ocean: str) -> None:
    """Accept a known ocean name, optionally followed by the word "ocean".

    Matching is case-insensitive and surrounding whitespace is ignored, so
    " Southern Ocean " passes while "Atlantic oceans" and "Indian 1 Ocean" do
    not.
    """
    words = ocean.lower().split()
    if len(words) == 1 and words[0] in OCEANS:
        return
    if len(words) == 2 and words[0] in OCEANS and words[1] == "ocean":
        return
    raise _fail(errors.INVALID_OCEAN)


def validate_sensor_type(sensor_type: str) -> None:
    _require_text(
        sensor_type, max_length=MAX_SENSOR_TYPE_LENGTH, kind=errors.INVALID_SENSOR_TYPE
    )


def validate_sensor_name(sensor_name: str) -> None:
    _require_text(
        sensor_name, max_length=MAX_SENSOR_NAME_LENGTH, kind=errors.INVALID_SENSOR_NAME
    )


# Numeric attributes


def validate_sampling_rate(sampling_rate: int) -> None:
    if not 0 <= sampling_rate <= MAX_SAMPLING_RATE:
        raise _fail(errors.INVALID_SAMPLING_RATE)


def validate_latitude(latitude: float) -> None:
    if not math.isfinite(latitude) or not MIN_LATITUDE <= latitude <= MAX_LATITUDE:
        raise _fail(errors.INVALID_LATITUDE)


def validate_longitude(longitude: float) -> None:
    if not math.isfinite(longitude) or not MIN_LONGITUDE <= longitude <= MAX_LONGITUDE:
        raise _fail(errors.INVALID_LONGITUDE)


# URLs


def validate_reachable_url(url: str, *, probe: UrlProbe) -> None:
    """Require an absolute http(s) URL that the probe reports reachable.

    Parse failures and probe failures both collapse into one error kind.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        raise _fail(errors.UNREACHABLE_URI, url=url) from None
    if parts.scheme.lower() not in {"http", "https"} or parts.netloc == "":
        raise _fail(errors.UNREACHABLE_URI, url=url)
    if not probe(url):
        raise _fail(errors.UNREACHABLE_URI, url=url)


_MEDIA_RULES: dict[MediaType, tuple[ErrorKind, ErrorKind, ErrorKind, re.Pattern[str] | None]] = {
    MediaType.IMAGE: (
        errors.NIL_IMAGE_URLS,
        errors.INVALID_IMAGE_URL,
        errors.INVALID_IMAGE_TYPE,
        IMAGE_PATTERN,
    ),
    MediaType.AUDIO: (
        errors.NIL_AUDIO_URLS,
        errors.INVALID_AUDIO_URL,
        errors.INVALID_AUDIO_TYPE,
        AUDIO_PATTERN,
    ),
    MediaType.VIDEO: (
        errors.NIL_VIDEO_URLS,
        errors.INVALID_VIDEO_URL,
        errors.INVALID_VIDEO_TYPE,
        VIDEO_PATTERN,
    ),
    MediaType.FILE: (errors.NIL_FILE_URLS, errors.INVALID_FILE_URL, errors.INVALID_FILE_URL, None),
}


def validate_media_url(url: str, media: MediaType, *, probe: UrlProbe) -> None:
    """Validate one URL for ``media``: non-blank, media kind, reachability."""
    _, blank_kind, type_kind, pattern = _MEDIA_RULES[media]
    if _is_blank(url):
        raise _fail(blank_kind)
    if pattern is not None and pattern.fullmatch(url.lower()) is None:
        raise _fail(type_kind, url=url)
    validate_reachable_url(url, probe=probe)


def _validate_url_map(
    urls: Mapping[str, str] | None, media: MediaType, *, probe: UrlProbe
) -> None:
    nil_kind = _MEDIA_RULES[media][0]
    if urls is None:
        raise _fail(nil_kind)
    for fuid, url in urls.items():
        validate_fuid(fuid)
        validate_media_url(url, media, probe=probe)


def validate_image_urls(urls: Mapping[str, str] | None, *, probe: UrlProbe) -> None:
    _validate_url_map(urls, MediaType.IMAGE, probe=probe)


def validate_audio_urls(urls: Mapping[str, str] | None, *, probe: UrlProbe) -> None:
    _validate_url_map(urls, MediaType.AUDIO, probe=probe)


def validate_video_urls(urls: Mapping[str, str] | None, *, probe: UrlProbe) -> None:
    _validate_url_map(urls, MediaType.VIDEO, probe=probe)


def validate_file_urls(urls: Mapping[str, str] | None, *, probe: UrlProbe) -> None:
    _validate_url_map(urls, MediaType.FILE, probe=probe)


# Timestamps


def _now(now: int | None) -> int:
    return int(time.time()) if now is None else now


def validate_record_timestamp(timestamp: int, *, now: int | None = None) -> None:
    if not MIN_TIMESTAMP <= timestamp <= _now(now):
        raise _fail(errors.INVALID_RECORD_TIMESTAMP)


def validate_create_timestamp(
    create_timestamp: int, record_timestamp: int, *, now: int | None = None
) -> None:
    """Zero means unset; otherwise record <= create <= now."""
    if create_timestamp == 0:
        return
    if not record_timestamp <= create_timestamp <= _now(now):
        raise _fail(errors.INVALID_CREATE_TIMESTAMP)


def validate_update_timestamp(
    update_timestamp: int, create_timestamp: int, *, now: int | None = None
) -> None:
    """Zero means unset; otherwise create <= update <= now."""
    if update_timestamp == 0:
        return
    if not create_timestamp <= update_timestamp <= _now(now):
        raise _fail(errors.INVALID_UPDATE_TIMESTAMP)


def validate_document(
    document: Document, *, probe: UrlProbe, now: int | None = None
) -> None:
    """Run every field rule in a fixed order and stop at the first failure.

    The order is part of the service contract: when several fields are wrong,
    callers see the error of the earliest one below.
    """
    now = _now(now)
    validate_duid(document.duid)
    validate_uuid(document.uuid)
    validate_publisher(document.publisher_name)
    validate_call_type_name(document.call_type_name)
    validate_ground_type(document.ground_type)
    validate_study_site(document.study_site)
    validate_ocean(document.ocean)
    validate_sensor_type(document.sensor_type)
    validate_sensor_name(document.sensor_name)
    validate_sampling_rate(document.sampling_rate)
    validate_latitude(document.latitude)
    validate_longitude(document.longitude)
    validate_image_urls(document.image_urls_map, probe=probe)
    validate_audio_urls(document.audio_urls_map, probe=probe)
    validate_video_urls(document.video_urls_map, probe=probe)
    validate_file_urls(document.file_urls_map, probe=probe)
    validate_record_timestamp(document.record_timestamp, now=now)
    validate_create_timestamp(
        document.create_timestamp, document.record_timestamp, now=now
    )
    validate_update_timestamp(
        document.update_timestamp, document.create_timestamp, now=now
    )
    if not document.image_urls_map and not document.audio_urls_map:
        raise _fail(errors.MISSING_IMAGE_OR_AUDIO)
