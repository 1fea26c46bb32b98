# src/ratetick/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines the closed set of error kinds used across the engine.
Every exception carries a `kind` classification so that outer surfaces
(query handlers, the ingestion trigger) can map it to a payload or exit code
without inspecting the exception type.

Files that USE this module:
- ratetick.adapters.providers.* (raise ProviderError / ValidationError)
- ratetick.adapters.persistence.* (raise PersistenceError / ValidationError)
- ratetick.application.* (raise NotFoundError, CycleFailedError)
- ratetick.adapters.api.handlers (maps kinds to error payloads)

Files that this module USES:
- None (pure domain layer)
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification attached to every domain error."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PROVIDER = "provider"
    PERSISTENCE = "persistence"


class DomainError(Exception):
    """Base exception for domain errors."""
    kind: ErrorKind = ErrorKind.VALIDATION

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised for caller-attributable input problems (pair, date, provider name, rate)."""
    kind = ErrorKind.VALIDATION


class NotFoundError(DomainError):
    """Raised when a referenced currency code does not exist."""
    kind = ErrorKind.NOT_FOUND


class ProviderError(DomainError):
    """Raised when the external rate source fails for every pair or at transport level."""
    kind = ErrorKind.PROVIDER


class PersistenceError(DomainError):
    """Raised when a storage write fails. Nothing from the batch is committed."""
    kind = ErrorKind.PERSISTENCE


class CycleFailedError(DomainError):
    """
    Raised by the ingestion service when a cycle aborts.

    The classification mirrors the underlying error, which is available
    as ``__cause__``.
    """

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind
