"""Settings loading entrypoint.

The cascade is always:
1) explicit overrides passed by the caller
2) ``HWSC_*`` environment variables
3) ``~/.config/hwsc/hwsc.yaml`` (or ``config_path``)
4) built-in defaults; the ``hosts`` default reads ``HOSTS_*`` variables

Example: ``HWSC_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Mapping

from .models import HwscSettings


def load_settings(
    *,
    overrides: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> HwscSettings:
    """Load validated settings, optionally from a non-default YAML path."""
    values = dict(overrides or {})
    if config_path is None:
        return HwscSettings(**values)

    resolved = Path(config_path)

    class _PathBoundSettings(HwscSettings):
        _config_path: ClassVar[Path] = resolved

    return _PathBoundSettings(**values)
