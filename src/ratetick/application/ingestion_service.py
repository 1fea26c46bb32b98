# src/ratetick/application/ingestion_service.py
"""
Ingestion Service - One Fetch-and-Persist Cycle

This module contains the orchestration of an ingestion cycle: resolve the
rate source, fetch current rates, resolve every pair to stored currencies and
persist one tick per pair in a single all-or-nothing batch.

Failure semantics:
- Per-pair network failures are handled inside the rate source (logged, skipped)
- An unknown provider, a source that fails for every pair, a missing currency
  or a storage failure aborts the cycle with CycleFailedError
- There is no retry here; the external trigger decides when to run again

Files that USE this module:
- ratetick.app (run_ingestion trigger)
- tests.test_ingestion_service (unit tests)

Files that this module USES:
- ratetick.adapters.providers.registry (ProviderRegistry to resolve the source)
- ratetick.adapters.persistence.* (CurrencyDirectory, TickRepository, ExchangeRateTick)
- ratetick.domain.* (Pair, CycleResult, error taxonomy)
- ratetick.shared.timeutils (clock)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import logging  # Standard library for logging messages

from typing import Dict, Optional  # Type hints for mappings and optional values

from sqlalchemy.exc import SQLAlchemyError  # Base class of all SQLAlchemy errors
from sqlalchemy.orm import sessionmaker  # Session factory type

from ratetick.adapters.persistence.currency_store import CurrencyDirectory  # Currency lookup by code
from ratetick.adapters.persistence.models import ExchangeRateTick  # Tick ORM model
from ratetick.adapters.persistence.tick_store import TickRepository  # Batch tick writes
from ratetick.adapters.providers.base import RateSource  # Rate source interface
from ratetick.adapters.providers.registry import ProviderRegistry  # Named rate source lookup
from ratetick.domain.errors import (
    CycleFailedError,
    DomainError,
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from ratetick.domain.models import CycleResult, Pair  # Domain models
from ratetick.shared.timeutils import Clock, utcnow  # UTC clock

log = logging.getLogger(__name__)  # Create logger for this module


class IngestionService:
    """Drives fetch -> resolve -> persist cycles against one storage."""

    def __init__(
        self,
        registry: ProviderRegistry,
        session_factory: sessionmaker,
        preferred_provider: Optional[str] = None,
        clock: Clock = utcnow,
    ):
        """
        Initialize the ingestion service.

        Args:
            registry: Registry used to resolve rate sources by name
            session_factory: SQLAlchemy session factory for the tick storage
            preferred_provider: Provider used when run_cycle() gets no name
                (defaults to the registry's default provider)
            clock: Source of "now" for tick timestamps
        """
        self.registry = registry
        self.session_factory = session_factory
        self.preferred_provider = preferred_provider or registry.default_provider
        self.clock = clock

    def run_cycle(self, provider_name: Optional[str] = None) -> CycleResult:
        """
        Run one ingestion cycle.

        Args:
            provider_name: Explicit provider name; the preferred provider when omitted

        Returns:
            CycleResult with the provider name and the number of ticks saved

        Raises:
            CycleFailedError: If the cycle aborted; the original error is the __cause__
        """
        log.info(
            "Starting exchange rates update: requested_provider=%s preferred_provider=%s",
            provider_name, self.preferred_provider,
        )

        try:
            source = self._resolve_source(provider_name)
            rates = self._fetch(source)
            saved_count = self._persist(source, rates)
        except DomainError as e:
            log.error(
                "Failed to update exchange rates: kind=%s error=%s",
                e.kind.value, e, exc_info=True,
            )
            raise CycleFailedError(f"Failed to update exchange rates: {e}", kind=e.kind) from e

        result = CycleResult(
            provider=source.get_provider_name(),
            saved_count=saved_count,
            pairs=tuple(rates),
            completed_at=self.clock(),
        )
        log.info(
            "Successfully updated exchange rates: provider=%s saved_count=%d",
            result.provider, result.saved_count,
        )
        return result

    def _resolve_source(self, provider_name: Optional[str]) -> RateSource:
        if provider_name:
            return self.registry.create(provider_name)

        try:
            return self.registry.create(self.preferred_provider)
        except ValidationError as e:
            log.warning(
                "Failed to create preferred provider %s: %s", self.preferred_provider, e,
            )
            raise

    @staticmethod
    def _fetch(source: RateSource) -> Dict[str, str]:
        """Run the source, reporting any non-domain failure as a ProviderError."""
        try:
            return source.fetch_rates()
        except DomainError:
            raise
        except Exception as e:
            raise ProviderError(
                f"Rate source {source.get_provider_name()} failed: {e.__class__.__name__}: {e}"
            ) from e

    def _persist(self, source: RateSource, rates: Dict[str, str]) -> int:
        """Resolve every pair and write all ticks in one transaction."""
        try:
            with self.session_factory() as session, session.begin():
                directory = CurrencyDirectory(session)
                ticks = [self._build_tick(directory, pair, rate) for pair, rate in rates.items()]
                saved_count = TickRepository(session, clock=self.clock).add_all(ticks)

                for tick in ticks:
                    log.debug(
                        "Saved exchange rate: provider=%s pair=%s rate=%s",
                        source.get_provider_name(), tick.pair, tick.rate,
                    )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to commit exchange rates: {e.__class__.__name__}") from e

        return saved_count

    @staticmethod
    def _build_tick(directory: CurrencyDirectory, pair_string: str, rate: str) -> ExchangeRateTick:
        pair = Pair.parse(pair_string)

        base = directory.find_by_code(pair.base)
        quote = directory.find_by_code(pair.quote)
        if base is None or quote is None:
            raise NotFoundError(f"Currency not found for pair: {pair_string}")

        return ExchangeRateTick.create(base, quote, rate)
