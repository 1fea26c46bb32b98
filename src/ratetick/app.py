# src/ratetick/app.py
"""
Application Entry Point - Wiring and Ingestion Trigger

This module serves as the composition root for RateTick. It wires the
engine, the provider registry and the services, and exposes:
- run_ingestion(): the zero-argument trigger invoked by the external scheduler
- build_query_handlers(): the query surface for an embedding transport
- main(): runs exactly one ingestion cycle and exits (0 on success, 1 on failure)

main() holds a PID file for the duration of the cycle so overlapping
invocations from the scheduler are refused.

Files that USE this module:
- python -m ratetick.app (cron / systemd timer entry point)

Files that this module USES:
- ratetick.shared.logging_conf (setup_logging for logging configuration)
- ratetick.config (settings for configuration management)
- ratetick.adapters.persistence.db (engine, sessions, schema)
- ratetick.adapters.providers.registry (ProviderRegistry)
- ratetick.application.* (IngestionService, RateQueryService)
- ratetick.adapters.api.handlers (build_handlers)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import atexit  # Register cleanup functions to run when program exits
import logging  # Standard library for logging messages and errors
import os  # Operating system interface for process IDs
import sys  # System-specific parameters and functions for exit codes
from pathlib import Path  # Object-oriented filesystem paths
from typing import Dict, Optional  # Type hints

from sqlalchemy import Engine  # Database engine type
from sqlalchemy.orm import sessionmaker  # Session factory type

from ratetick.adapters.api.handlers import Handler, build_handlers  # Query surface factory
from ratetick.adapters.persistence.db import (
    create_engine_from_settings,  # Engine from DATABASE_URL
    create_schema,  # CREATE TABLE IF NOT EXISTS
    make_session_factory,  # sessionmaker bound to the engine
)
from ratetick.adapters.providers.registry import ProviderRegistry  # Named rate source lookup
from ratetick.application.ingestion_service import IngestionService  # Ingestion cycle
from ratetick.application.query_service import RateQueryService  # Windowed reads
from ratetick.config import settings  # Application configuration and settings
from ratetick.domain.errors import DomainError  # Base of all classified errors
from ratetick.domain.models import CycleResult  # Result of one cycle
from ratetick.shared.logging_conf import setup_logging  # Configure logging with file rotation

logger = logging.getLogger(__name__)


def _get_pid_file() -> Path:
    """Get PID file path from settings (RATETICK_PID_FILE)."""
    return Path(settings.pid_file)


def _check_existing_instance() -> None:
    """
    Check if another ingestion run is still in progress.

    Raises RuntimeError if the PID file exists and its process is still running.
    """
    pid_file = _get_pid_file()
    if not pid_file.exists():
        return

    try:
        old_pid = int(pid_file.read_text().strip())
    except (ValueError, OSError):
        # Invalid PID file, remove it
        pid_file.unlink(missing_ok=True)
        return

    try:
        os.kill(old_pid, 0)  # Signal 0 doesn't kill, just checks if process exists
    except ProcessLookupError:
        # Stale PID file
        pid_file.unlink(missing_ok=True)
        return
    except PermissionError:
        pass  # process exists but belongs to another user

    raise RuntimeError(
        f"Another ingestion run is already in progress (PID: {old_pid}). "
        f"Remove {pid_file} if that process is not ratetick."
    )


def _create_pid_file() -> None:
    """
    Atomically create the PID file with the current process ID.

    Raises:
        RuntimeError: If another process created the file first
    """
    pid_file = _get_pid_file()
    pid_file.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = os.open(pid_file, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    except FileExistsError as e:
        raise RuntimeError(f"Another ingestion run acquired {pid_file} first") from e
    with os.fdopen(fd, "w") as f:
        f.write(str(os.getpid()))


def _remove_pid_file() -> None:
    """Remove PID file on exit."""
    _get_pid_file().unlink(missing_ok=True)


def build_ingestion_service(session_factory: sessionmaker, registry: Optional[ProviderRegistry] = None) -> IngestionService:
    registry = registry or ProviderRegistry(default_provider=settings.default_provider)
    return IngestionService(
        registry=registry,
        session_factory=session_factory,
        preferred_provider=settings.preferred_provider,
    )


def build_query_handlers(
    session_factory: sessionmaker, registry: Optional[ProviderRegistry] = None
) -> Dict[str, Handler]:
    """
    Wire the query surface to the preferred rate source.

    Raises:
        ValidationError: If the preferred provider is not registered
    """
    registry = registry or ProviderRegistry(default_provider=settings.default_provider)
    source = registry.create(settings.preferred_provider)
    return build_handlers(RateQueryService(source=source, session_factory=session_factory))


def run_ingestion(engine: Optional[Engine] = None) -> CycleResult:
    """
    Run one ingestion cycle against the configured database.

    This is the trigger invoked by the external scheduler.

    Raises:
        CycleFailedError: If the cycle aborted
    """
    owns_engine = engine is None
    engine = engine or create_engine_from_settings()
    try:
        service = build_ingestion_service(make_session_factory(engine))
        return service.run_cycle()
    finally:
        if owns_engine:
            engine.dispose()


def main() -> None:
    """
    Run one ingestion cycle and exit.

    This function:
    1. Sets up logging
    2. Acquires the PID file lock (exit 1 if another run is in progress)
    3. Ensures the schema exists
    4. Runs the cycle and exits 0 on success, 1 on failure
    """
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_to_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    try:
        _check_existing_instance()
        _create_pid_file()
        atexit.register(_remove_pid_file)
        logger.info("Ingestion lock acquired (PID: %d)", os.getpid())
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    engine = create_engine_from_settings()
    try:
        create_schema(engine)
        result = run_ingestion(engine)
    except DomainError as e:
        logger.error("Ingestion cycle failed (%s): %s", e.kind.value, e)
        sys.exit(1)
    finally:
        engine.dispose()

    logger.info(
        "Ingestion cycle completed: provider=%s saved=%d pairs=%s",
        result.provider, result.saved_count, ", ".join(result.pairs),
    )


if __name__ == "__main__":
    main()
