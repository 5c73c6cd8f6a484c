"""Typed configuration models for HWSC runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "hwsc" / "hwsc.yaml"


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "hwsc-document-svc"
    environment: str = "dev"


class GrpcSettings(BaseModel):
    """gRPC server runtime settings."""

    max_workers: int = Field(default=10, gt=0)
    shutdown_grace_seconds: float = Field(default=5.0, ge=0)


class DocumentHostSettings(BaseModel):
    """Listen address of the document gRPC service."""

    address: str = "0.0.0.0"
    port: str = "50051"
    network: str = "tcp"

    @property
    def target(self) -> str:
        """Return ``address:port`` suitable for ``add_insecure_port``."""
        return f"{self.address}:{self.port}"


class MongoHostSettings(BaseModel):
    """MongoDB reader/writer connection URIs and collection location."""

    reader: str = ""
    writer: str = ""
    db: str = "document"
    collection: str = "documents"


class HostsSettings(BaseSettings):
    """Host endpoints, read from ``HOSTS_*`` environment variables.

    Example: ``HOSTS_MONGODB__WRITER=mongodb://...`` -> ``mongodb.writer``.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOSTS_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    document: DocumentHostSettings = Field(default_factory=DocumentHostSettings)
    mongodb: MongoHostSettings = Field(default_factory=MongoHostSettings)

    def require_database_uris(self) -> None:
        """Raise ``ValueError`` when either MongoDB URI is blank."""
        for role in ("reader", "writer"):
            if getattr(self.mongodb, role).strip() == "":
                raise ValueError(f"hosts.mongodb.{role} is required")


class ComponentsSettings(BaseModel):
    """Component-local settings keyed ``components.<kind>.<name>``."""

    model_config = ConfigDict(extra="allow")

    service: dict[str, dict[str, object]] = Field(default_factory=dict)
    substrate: dict[str, dict[str, object]] = Field(default_factory=dict)


class HwscSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="HWSC_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    grpc: GrpcSettings = Field(default_factory=GrpcSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)
    hosts: HostsSettings = Field(default_factory=HostsSettings)

    _config_path: ClassVar[Path] = DEFAULT_CONFIG_PATH

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > yaml > defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._config_path,
                yaml_file_encoding="utf-8",
            ),
        )


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: HwscSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Resolve one component's settings from ``components.<kind>.<name>``.

    ``component_id`` is ``<kind>_<name>``, e.g. ``service_document_authority``.
    Missing subtrees resolve to the model defaults.
    """
    kind, separator, name = component_id.partition("_")
    if not separator or kind not in {"service", "substrate"}:
        raise ValueError(f"unsupported component id: {component_id!r}")
    namespace = getattr(settings.components, kind)
    resolved = namespace.get(name, {})
    if not isinstance(resolved, dict):
        raise TypeError(f"components.{kind}.{name} must resolve to an object mapping")
    return model.model_validate(resolved)
