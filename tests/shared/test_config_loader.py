"""Tests for pydantic-settings-backed shared configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.hwsc_shared.config import HostsSettings, load_settings
from services.state.document_authority.config import (
    resolve_document_authority_settings,
)


def test_load_settings_uses_precedence_cascade(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Init params should override env, env should override YAML, then defaults."""
    config_file = tmp_path / "hwsc.yaml"
    config_file.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "  service: from-yaml",
                "grpc:",
                "  max_workers: 4",
                "components:",
                "  service:",
                "    document_authority:",
                "      url_probe_timeout_seconds: 2.5",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("HWSC_LOGGING__LEVEL", "ERROR")
    monkeypatch.setenv("HWSC_GRPC__MAX_WORKERS", "6")

    settings = load_settings(
        overrides={"logging": {"level": "DEBUG"}},
        config_path=config_file,
    )
    service = resolve_document_authority_settings(settings)

    assert settings.logging.level == "DEBUG"
    assert settings.logging.service == "from-yaml"
    assert settings.grpc.max_workers == 6
    assert service.url_probe_timeout_seconds == 2.5
    assert service.dial_timeout_seconds == 5.0


def test_load_settings_uses_model_defaults_when_sources_missing(tmp_path: Path) -> None:
    settings = load_settings(config_path=tmp_path / "missing.yaml")

    assert settings.logging.level == "INFO"
    assert settings.logging.service == "hwsc-document-svc"
    assert settings.grpc.max_workers == 10
    assert resolve_document_authority_settings(settings).url_probe_timeout_seconds == 5.0


def test_hosts_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOSTS_DOCUMENT__PORT", "50099")
    monkeypatch.setenv("HOSTS_MONGODB__READER", "mongodb://reader:27017")
    monkeypatch.setenv("HOSTS_MONGODB__WRITER", "mongodb://writer:27017")

    hosts = HostsSettings()

    assert hosts.document.target == "0.0.0.0:50099"
    assert hosts.mongodb.reader == "mongodb://reader:27017"
    assert hosts.mongodb.db == "document"
    hosts.require_database_uris()


def test_blank_database_uri_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOSTS_MONGODB__READER", raising=False)
    monkeypatch.setenv("HOSTS_MONGODB__WRITER", "mongodb://writer:27017")

    with pytest.raises(ValueError, match="hosts.mongodb.reader is required"):
        HostsSettings().require_database_uris()


def test_unknown_component_settings_are_rejected(tmp_path: Path) -> None:
    settings = load_settings(
        overrides={
            "components": {"service": {"document_authority": {"unknown_knob": 1}}}
        },
        config_path=tmp_path / "missing.yaml",
    )

    with pytest.raises(ValueError):
        resolve_document_authority_settings(settings)
