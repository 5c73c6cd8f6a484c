"""Domain models for the Document Authority Service.

Field names are snake_case in Python and camelCase on the wire and in the
persisted MongoDB documents (``publisherName.lastName``, ``recordTimestamp``).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_UINT32_MAX = (1 << 32) - 1


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class Publisher(_CamelModel):
    """Person credited with one recording."""

    last_name: str = ""
    first_name: str = ""


class StudySite(_CamelModel):
    """Where one recording was made."""

    city: str = ""
    state: str = ""
    province: str = ""
    country: str = ""


class Document(_CamelModel):
    """One bioacoustic field observation and its media references.

    URL maps are keyed by FUID. ``None`` means the map is absent, which
    validation rejects; an empty map is allowed.
    """

    duid: str = ""
    uuid: str = ""
    publisher_name: Publisher | None = None
    call_type_name: str = ""
    ground_type: str = ""
    study_site: StudySite | None = None
    ocean: str = ""
    sensor_type: str = ""
    sensor_name: str = ""
    sampling_rate: int = Field(default=0, ge=0, le=_UINT32_MAX)
    latitude: float = 0.0
    longitude: float = 0.0
    image_urls_map: dict[str, str] | None = None
    audio_urls_map: dict[str, str] | None = None
    video_urls_map: dict[str, str] | None = None
    file_urls_map: dict[str, str] | None = None
    record_timestamp: int = 0
    create_timestamp: int = 0
    update_timestamp: int = 0
    is_public: bool = False

    def to_mongo(self) -> dict[str, object]:
        """Return the persisted shape of this document."""
        return self.model_dump(mode="python", by_alias=True)

    @classmethod
    def from_mongo(cls, raw: dict[str, object]) -> "Document":
        """Build a document from one persisted record, ignoring ``_id``."""
        data = {key: value for key, value in raw.items() if key != "_id"}
        return cls.model_validate(data)


class QueryTransaction(BaseModel):
    """Facet filters for queries, also the result shape of distinct listings.

    Empty or absent lists match any value of their field. Mutable so facet
    extraction can populate it in place.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    publishers: list[Publisher] | None = None
    study_sites: list[StudySite] | None = None
    call_type_names: list[str] | None = None
    ground_types: list[str] | None = None
    sensor_types: list[str] | None = None
    sensor_names: list[str] | None = None
    min_record_timestamp: int = 0
    max_record_timestamp: int = 0


class MediaType(str, Enum):
    """Which URL map of a document a file entry belongs to."""

    FILE = "FILE"
    AUDIO = "AUDIO"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class FileMetadataParameters(_CamelModel):
    """Target of AddFileMetadata/DeleteFileMetadata.

    ``media`` stays a plain string so unknown values reach the service and
    fail with a stable error instead of a decode failure.
    """

    duid: str = ""
    uuid: str = ""
    fuid: str = ""
    url: str = ""
    media: str = MediaType.FILE.value


class DocumentRequest(_CamelModel):
    """Wire request shared by every DocumentService method."""

    data: Document | None = None
    query_parameters: QueryTransaction | None = None
    file_metadata_parameters: FileMetadataParameters | None = None
    image_urls: list[str] | None = None
    audio_urls: list[str] | None = None
    video_urls: list[str] | None = None
    file_urls: list[str] | None = None


class DocumentResponse(_CamelModel):
    """Wire response shared by every DocumentService method.

    ``code`` is the numeric gRPC status code, ``message`` its display name.
    """

    code: int = 0
    message: str = "OK"
    data: Document | None = None
    document_collection: list[Document] = Field(default_factory=list)
    query_results: QueryTransaction | None = None


class ServiceStatus(_CamelModel):
    """Readiness answer of GetStatus and SetServiceState."""

    code: int
    message: str
    state: str


class ServiceStateRequest(_CamelModel):
    """Administrative request to toggle the service state gate."""

    state: str = ""
