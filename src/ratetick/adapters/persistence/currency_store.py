# src/ratetick/adapters/persistence/currency_store.py
"""
Currency Directory - Lookup and Provisioning of Currency Records

Currencies are looked up by their canonical uppercase code. The directory
works inside the caller's session and never commits; the caller owns the
transaction.

Files that USE this module:
- ratetick.application.ingestion_service (resolves pair codes to currencies)
- tests.* (provision currencies for ingestion and query tests)

Files that this module USES:
- ratetick.adapters.persistence.models (Currency ORM model)
- ratetick.domain.models (normalize_code)
- ratetick.domain.errors (NotFoundError, PersistenceError)
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ratetick.adapters.persistence.models import Currency
from ratetick.domain.errors import NotFoundError, PersistenceError
from ratetick.domain.models import normalize_code

log = logging.getLogger(__name__)


class CurrencyDirectory:
    def __init__(self, session: Session):
        self.session = session

    def find_by_code(self, code: str) -> Optional[Currency]:
        """Return the currency with this code (case-insensitive), or None."""
        stmt = select(Currency).where(Currency.code == normalize_code(code))
        return self.session.scalars(stmt).one_or_none()

    def get_by_code(self, code: str) -> Currency:
        """
        Return the currency with this code.

        Raises:
            NotFoundError: If no currency has this code
        """
        currency = self.find_by_code(code)
        if currency is None:
            raise NotFoundError(f"Currency not found: {normalize_code(code)}")
        return currency

    def find_active(self) -> List[Currency]:
        stmt = select(Currency).where(Currency.is_active.is_(True)).order_by(Currency.code)
        return list(self.session.scalars(stmt))

    def find_or_create_by_code(
        self, code: str, name: Optional[str] = None, symbol: Optional[str] = None
    ) -> Currency:
        """
        Return the currency with this code, creating it if absent.

        Args:
            code: Currency code, canonicalized to uppercase
            name: Display name for a new record (defaults to the code)
            symbol: Optional display symbol for a new record

        Returns:
            Existing or newly flushed Currency
        """
        currency = self.find_by_code(code)
        if currency is not None:
            return currency

        currency = Currency(code=code, name=name or normalize_code(code), symbol=symbol, is_active=True)
        self.session.add(currency)
        self._flush()
        log.info("Created currency %s (%s)", currency.code, currency.name)
        return currency

    def set_active(self, code: str, active: bool) -> Currency:
        currency = self.get_by_code(code)
        currency.is_active = active
        self._flush()
        return currency

    def update(self, code: str, name: Optional[str] = None, symbol: Optional[str] = None) -> Currency:
        """Change the display name and/or symbol of an existing currency."""
        currency = self.get_by_code(code)
        if name is not None:
            currency.name = name
        if symbol is not None:
            currency.symbol = symbol
        self._flush()
        return currency

    def _flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write currency: {e.__class__.__name__}") from e
