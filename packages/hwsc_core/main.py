"""Process entrypoint for HWSC document service startup and shutdown."""

from __future__ import annotations

import os
import signal
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from time import sleep
from typing import Callable

import grpc

from packages.hwsc_shared.config import HwscSettings, load_settings
from packages.hwsc_shared.logging import configure_logging, get_logger
from resources.substrates.mongodb import MongoSubstrateError
from services.state.document_authority.api import register_grpc
from services.state.document_authority.runtime import DocumentRuntime
from services.state.document_authority.service import (
    DocumentAuthorityService,
    build_document_authority_service,
)
from services.state.document_authority.state import ServiceState

_LOGGER = get_logger(__name__)
_RUNNING = True


def _handle_shutdown(_signum: int, _frame: object) -> None:
    """Mark process for graceful shutdown when receiving termination signals."""
    global _RUNNING
    _RUNNING = False


def _is_running() -> bool:
    return _RUNNING


def _new_grpc_server(max_workers: int) -> grpc.Server:
    return grpc.server(ThreadPoolExecutor(max_workers=max_workers))


def _start_grpc_runtime(
    *,
    settings: HwscSettings,
    service: DocumentAuthorityService,
    server_factory: Callable[[int], grpc.Server] = _new_grpc_server,
) -> grpc.Server:
    """Register the document service on a new server, bind, and start it."""
    server = server_factory(settings.grpc.max_workers)
    register_grpc(server=server, service=service)

    target = settings.hosts.document.target
    bound_port = server.add_insecure_port(target)
    if bound_port == 0:
        raise RuntimeError(f"failed to bind gRPC server to {target}")
    server.start()
    _LOGGER.info("gRPC server started: target=%s port=%s", target, bound_port)
    return server


def serve(
    settings: HwscSettings,
    *,
    runtime_factory: Callable[[HwscSettings], DocumentRuntime] = DocumentRuntime.from_settings,
    server_factory: Callable[[int], grpc.Server] = _new_grpc_server,
    should_run: Callable[[], bool] = _is_running,
    poll_seconds: float = 1.0,
) -> None:
    """Connect the database, serve gRPC until ``should_run`` turns false, and clean up.

    A failed initial database connection is fatal.
    """
    runtime = runtime_factory(settings)
    try:
        runtime.connect()
    except MongoSubstrateError as exc:
        _LOGGER.critical("MongoDB connection failed at startup: %s", exc)
        runtime.close()
        raise SystemExit(1) from exc

    service = build_document_authority_service(runtime=runtime)
    server = _start_grpc_runtime(
        settings=settings, service=service, server_factory=server_factory
    )
    try:
        while should_run():
            sleep(poll_seconds)
    finally:
        runtime.gate.set(ServiceState.UNAVAILABLE)
        server.stop(settings.grpc.shutdown_grace_seconds).wait()
        runtime.close()
        _LOGGER.info("document service stopped")


def main() -> None:
    """Load settings, validate required hosts, and run the service."""
    config_path = os.getenv("HWSC_CONFIG_FILE", "").strip()
    settings = load_settings(config_path=Path(config_path) if config_path else None)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )

    try:
        settings.hosts.require_database_uris()
    except ValueError as exc:
        _LOGGER.critical("invalid host configuration: %s", exc)
        raise SystemExit(1) from exc

    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)
    serve(settings)


if __name__ == "__main__":
    main()
