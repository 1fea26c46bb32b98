# src/ratetick/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Currency pairs (BASE/QUOTE) with strict parsing and canonical formatting
- Read-only views of stored ticks returned by queries
- Ingestion cycle results

Files that USE this module:
- ratetick.application.* (services build and return these models)
- ratetick.adapters.persistence.models (pair formatting for ORM ticks)
- ratetick.adapters.api.handlers (serializes TickView via to_dict)
- tests.* (tests use domain models for assertions)

Files that this module USES:
- ratetick.domain.errors (ValidationError for malformed pairs)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import re  # Regular expressions for currency code validation
from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import datetime, timezone  # Date/time utilities for timestamps
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation  # Fixed-point rate values
from typing import Optional, Tuple, Union  # Type hints for optional values and tuples

from ratetick.domain.errors import ValidationError

PAIR_SEPARATOR = "/"
CURRENCY_CODE_RE = re.compile(r"^[A-Z0-9]{1,10}$")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rates are stored as NUMERIC(18, 8): 10 integer digits, 8 fractional digits
RATE_SCALE = 8
RATE_PRECISION = 18
RATE_QUANTUM = Decimal(1).scaleb(-RATE_SCALE)
RATE_MAX = Decimal(10) ** (RATE_PRECISION - RATE_SCALE)


def normalize_rate(value: Union[str, int, Decimal]) -> Decimal:
    """
    Convert a rate to a Decimal with 8 fractional digits.

    Floats are rejected so that no binary rounding reaches storage.

    Raises:
        ValidationError: If the rate is not numeric, not finite, not positive,
            or too large for NUMERIC(18, 8)
    """
    if isinstance(value, (bool, float)):
        raise ValidationError(f"Invalid rate: {value!r}. Pass rates as strings or Decimals")
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid rate: {value!r}") from e

    if not rate.is_finite():
        raise ValidationError(f"Invalid rate: {value!r}")

    if rate >= RATE_MAX:
        raise ValidationError(f"Rate {value!r} exceeds the storable range")
    rate = rate.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)
    if rate <= 0:
        raise ValidationError(f"Rate must be positive, got {value!r}")
    return rate


def normalize_code(code: str) -> str:
    """
    Canonicalize a currency code (trim + uppercase) and validate it.

    Raises:
        ValidationError: If the code is empty, longer than 10 chars or not alphanumeric
    """
    canonical = str(code or "").strip().upper()
    if not CURRENCY_CODE_RE.match(canonical):
        raise ValidationError(
            f"Invalid currency code: {code!r}. Expected 1-10 alphanumeric characters"
        )
    return canonical


@dataclass(frozen=True)
class Pair:
    """A BASE/QUOTE currency pair, always uppercase."""
    base: str
    quote: str

    @classmethod
    def parse(cls, value: str) -> Pair:
        """
        Parse a pair string such as ``"eur / btc"`` into ``Pair("EUR", "BTC")``.

        Raises:
            ValidationError: If the string does not have exactly two components
        """
        parts = str(value or "").split(PAIR_SEPARATOR)
        if len(parts) != 2:
            raise ValidationError(f"Invalid pair format: {value}. Expected format: BASE/QUOTE")
        try:
            base, quote = normalize_code(parts[0]), normalize_code(parts[1])
        except ValidationError as e:
            raise ValidationError(
                f"Invalid pair format: {value}. Expected format: BASE/QUOTE ({e})"
            ) from e
        return cls(base=base, quote=quote)

    def codes(self) -> Tuple[str, str]:
        return self.base, self.quote

    def __str__(self) -> str:
        return f"{self.base}{PAIR_SEPARATOR}{self.quote}"


@dataclass(frozen=True)
class CurrencyInfo:
    """Public descriptor of a currency (code, display name, display symbol)."""
    code: str
    name: str
    symbol: Optional[str] = None

    def to_dict(self) -> dict:
        return {"code": self.code, "name": self.name, "symbol": self.symbol}


@dataclass(frozen=True)
class TickView:
    """
    Read-only view of one stored exchange rate tick.

    Attributes:
        id: Storage identifier of the tick
        pair: Pair string (e.g. "EUR/BTC")
        base_currency: Descriptor of the base currency
        quote_currency: Descriptor of the quote currency
        rate: Observed rate as a fixed-point Decimal
        created_at: Naive UTC timestamp set when the tick was persisted
    """
    id: int
    pair: str
    base_currency: CurrencyInfo
    quote_currency: CurrencyInfo
    rate: Decimal
    created_at: datetime

    @property
    def timestamp(self) -> str:
        return self.created_at.strftime(TIMESTAMP_FORMAT)

    @property
    def unix_timestamp(self) -> int:
        ts = self.created_at
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return int(ts.timestamp())

    def to_dict(self) -> dict:
        """
        Convert the view to a JSON-serializable dictionary.

        The rate is emitted as a float for API consumers; the Decimal stays
        available on the view itself.
        """
        return {
            "id": self.id,
            "pair": self.pair,
            "base_currency": self.base_currency.to_dict(),
            "quote_currency": self.quote_currency.to_dict(),
            "rate": float(self.rate),
            "timestamp": self.timestamp,
            "unix_timestamp": self.unix_timestamp,
        }


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one successful ingestion cycle."""
    provider: str
    saved_count: int
    pairs: Tuple[str, ...] = field(default_factory=tuple)
    completed_at: Optional[datetime] = None
