"""Public API for shared HWSC configuration."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    DocumentHostSettings,
    GrpcSettings,
    HostsSettings,
    HwscSettings,
    LoggingSettings,
    MongoHostSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "DocumentHostSettings",
    "GrpcSettings",
    "HostsSettings",
    "HwscSettings",
    "LoggingSettings",
    "MongoHostSettings",
    "load_settings",
    "resolve_component_settings",
]
