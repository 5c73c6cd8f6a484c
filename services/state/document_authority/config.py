"""Pydantic settings for Document Authority Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.hwsc_shared.config import HwscSettings, resolve_component_settings

SERVICE_COMPONENT_ID = "service_document_authority"


class DocumentAuthoritySettings(BaseModel):
    """Document Authority Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url_probe_timeout_seconds: float = Field(default=5.0, gt=0)
    dial_timeout_seconds: float = Field(default=5.0, gt=0)


def resolve_document_authority_settings(
    settings: HwscSettings,
) -> DocumentAuthoritySettings:
    """Resolve settings from ``components.service.document_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=DocumentAuthoritySettings,
    )
