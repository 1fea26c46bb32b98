# src/ratetick/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and the error taxonomy.
No dependencies on infrastructure or external systems.
"""

from ratetick.domain.models import (
    CurrencyInfo,
    CycleResult,
    Pair,
    TickView,
    normalize_code,
    normalize_rate,
)
from ratetick.domain.errors import (
    CycleFailedError,
    DomainError,
    ErrorKind,
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationError,
)

__all__ = [
    "Pair",
    "CurrencyInfo",
    "TickView",
    "CycleResult",
    "normalize_code",
    "normalize_rate",
    "ErrorKind",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ProviderError",
    "PersistenceError",
    "CycleFailedError",
]
