# src/ratetick/adapters/persistence/models.py
"""
ORM Models - Currencies and Exchange Rate Ticks

`Currency` is keyed by its uppercase code. `ExchangeRateTick` is one
immutable observation referencing two currencies through one-directional
foreign keys; the reverse view (ticks of a currency) is an explicit query in
TickRepository.

Files that USE this module:
- ratetick.adapters.persistence.currency_store (CurrencyDirectory)
- ratetick.adapters.persistence.tick_store (TickRepository)
- ratetick.application.ingestion_service (builds ticks via ExchangeRateTick.create)
- tests.* (fixtures create currencies and ticks)

Files that this module USES:
- ratetick.adapters.persistence.db (declarative Base)
- ratetick.domain.models (code/rate normalization, views)
- ratetick.domain.errors (ValidationError, PersistenceError)
- ratetick.shared.timeutils (utcnow for timestamps)
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    TypeDecorator,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from ratetick.adapters.persistence.db import Base
from ratetick.domain.errors import PersistenceError, ValidationError
from ratetick.domain.models import (
    RATE_PRECISION,
    RATE_QUANTUM,
    RATE_SCALE,
    CurrencyInfo,
    Pair,
    TickView,
    normalize_code,
    normalize_rate,
)
from ratetick.shared.timeutils import utcnow

NAME_MAX_LENGTH = 100
SYMBOL_MAX_LENGTH = 10


class FixedPointRate(TypeDecorator):
    """
    NUMERIC(18, 8) rate column that never passes through float.

    SQLite has no fixed-point storage, so there the value is kept as an
    integer count of 1e-8 units. Other backends use their native NUMERIC.
    """

    impl = Numeric(RATE_PRECISION, RATE_SCALE, asdecimal=True)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return int(Decimal(str(value)).scaleb(RATE_SCALE).to_integral_value())

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "sqlite":
            return Decimal(int(value)).scaleb(-RATE_SCALE).quantize(RATE_QUANTUM)
        return Decimal(value)


class Currency(Base):
    """Canonical currency record (EUR, BTC, ...)."""

    __tablename__ = "currencies"
    __table_args__ = (
        UniqueConstraint("code", name="unique_currency_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    symbol: Mapped[Optional[str]] = mapped_column(String(SYMBOL_MAX_LENGTH), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, onupdate=utcnow)

    @validates("code")
    def _validate_code(self, key: str, value: str) -> str:
        return normalize_code(value)

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        value = (value or "").strip()
        if not value or len(value) > NAME_MAX_LENGTH:
            raise ValidationError(f"Currency name must be 1-{NAME_MAX_LENGTH} characters")
        return value

    @validates("symbol")
    def _validate_symbol(self, key: str, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > SYMBOL_MAX_LENGTH:
            raise ValidationError(f"Currency symbol must be at most {SYMBOL_MAX_LENGTH} characters")
        return value

    def pair_with(self, quote: Currency) -> str:
        return str(Pair(self.code, quote.code))

    def to_info(self) -> CurrencyInfo:
        return CurrencyInfo(code=self.code, name=self.name, symbol=self.symbol)

    def __repr__(self) -> str:
        return f"<Currency {self.code} active={self.is_active}>"


class ExchangeRateTick(Base):
    """One observed rate for a currency pair at the moment it was persisted."""

    __tablename__ = "exchange_rate_ticks"
    __table_args__ = (
        CheckConstraint("rate > 0", name="ck_tick_rate_positive"),
        CheckConstraint("base_currency_id <> quote_currency_id", name="ck_tick_distinct_currencies"),
        Index("idx_tick_pair_created_at", "base_currency_id", "quote_currency_id", "created_at"),
        Index("idx_tick_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    base_currency_id: Mapped[int] = mapped_column(ForeignKey("currencies.id"), nullable=False)
    quote_currency_id: Mapped[int] = mapped_column(ForeignKey("currencies.id"), nullable=False)
    rate: Mapped[Decimal] = mapped_column(FixedPointRate(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    base_currency: Mapped[Currency] = relationship(foreign_keys=[base_currency_id], lazy="joined")
    quote_currency: Mapped[Currency] = relationship(foreign_keys=[quote_currency_id], lazy="joined")

    @classmethod
    def create(cls, base: Currency, quote: Currency, rate: Union[str, Decimal]) -> ExchangeRateTick:
        """
        Build a tick for base/quote at the given rate.

        created_at is left unset; TickRepository stamps it when the tick is saved.

        Raises:
            ValidationError: If base and quote are the same currency or the rate is invalid
        """
        if base is quote or base.code == quote.code:
            raise ValidationError(f"Base and quote currency must differ, got {base.code}/{quote.code}")
        return cls(base_currency=base, quote_currency=quote, rate=rate)

    @validates("rate")
    def _validate_rate(self, key: str, value: Union[str, Decimal]) -> Decimal:
        return normalize_rate(value)

    @property
    def pair(self) -> str:
        return self.base_currency.pair_with(self.quote_currency)

    def to_view(self) -> TickView:
        return TickView(
            id=self.id,
            pair=self.pair,
            base_currency=self.base_currency.to_info(),
            quote_currency=self.quote_currency.to_info(),
            rate=self.rate,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<ExchangeRateTick {self.base_currency_id}/{self.quote_currency_id}={self.rate} at {self.created_at}>"


@event.listens_for(ExchangeRateTick, "before_update")
def _reject_tick_update(mapper, connection, target: ExchangeRateTick) -> None:
    raise PersistenceError(f"Exchange rate ticks are immutable (id={target.id})")
