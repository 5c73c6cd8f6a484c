"""Shared helpers for integration tests."""

from __future__ import annotations

import os


def real_provider_tests_enabled() -> bool:
    """Return True when real-database integration tests are explicitly enabled."""
    raw = os.getenv("HWSC_RUN_INTEGRATION_REAL", "").strip().lower()
    if raw not in {"1", "true", "yes", "on"}:
        return False
    return os.getenv("HOSTS_MONGODB__WRITER", "").strip() != ""
