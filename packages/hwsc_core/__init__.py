"""Process entrypoint for the HWSC document service."""

from packages.hwsc_core.main import main, serve

__all__ = ["main", "serve"]
