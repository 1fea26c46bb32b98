# src/ratetick/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains the SQLAlchemy storage layer:
- Engine/session wiring and schema creation
- Currency and ExchangeRateTick ORM models
- CurrencyDirectory and TickRepository
"""

from ratetick.adapters.persistence.db import (
    Base,
    create_engine_from_settings,
    create_schema,
    make_session_factory,
)
from ratetick.adapters.persistence.models import Currency, ExchangeRateTick
from ratetick.adapters.persistence.currency_store import CurrencyDirectory
from ratetick.adapters.persistence.tick_store import TickRepository

__all__ = [
    "Base",
    "create_engine_from_settings",
    "create_schema",
    "make_session_factory",
    "Currency",
    "ExchangeRateTick",
    "CurrencyDirectory",
    "TickRepository",
]
