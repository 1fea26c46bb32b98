# src/ratetick/adapters/persistence/tick_store.py
"""
Tick Repository - Append-only Storage of Exchange Rate Ticks

Ticks are written in batches and stamped with the repository clock at
persistence time. Reads return ticks for one pair inside an inclusive time
window, oldest first.

Files that USE this module:
- ratetick.application.ingestion_service (add_all for the cycle batch)
- ratetick.application.query_service (find_by_pair_between)
- tests.* (seed ticks at controlled timestamps)

Files that this module USES:
- ratetick.adapters.persistence.models (ExchangeRateTick, Currency)
- ratetick.domain.errors (PersistenceError, ValidationError)
- ratetick.shared.timeutils (utcnow clock)
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from ratetick.adapters.persistence.models import Currency, ExchangeRateTick
from ratetick.domain.errors import PersistenceError, ValidationError
from ratetick.domain.models import normalize_rate
from ratetick.shared.timeutils import Clock, to_naive_utc, utcnow

log = logging.getLogger(__name__)


class TickRepository:
    def __init__(self, session: Session, clock: Clock = utcnow):
        self.session = session
        self.clock = clock

    def add_all(self, ticks: Sequence[ExchangeRateTick]) -> int:
        """
        Stamp and stage a batch of ticks, then flush.

        Every tick gets the same created_at taken from the clock. A tick is
        never stamped earlier than the latest stored tick of its pair.

        Returns:
            Number of ticks written

        Raises:
            ValidationError: If a tick breaks base != quote or rate > 0
            PersistenceError: If the flush fails
        """
        now = to_naive_utc(self.clock())
        latest: Dict[Tuple[int, int], Optional[datetime]] = {}

        for tick in ticks:
            self._check(tick)
            key = (tick.base_currency.id, tick.quote_currency.id)
            if key not in latest:
                latest[key] = self.latest_created_at(*key)
            previous = latest[key]
            tick.created_at = max(now, previous) if previous else now

        try:
            self.session.add_all(ticks)
            self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to persist {len(ticks)} exchange rate ticks: {e.__class__.__name__}"
            ) from e

        log.debug("Staged %d ticks at %s", len(ticks), now)
        return len(ticks)

    @staticmethod
    def _check(tick: ExchangeRateTick) -> None:
        if tick.base_currency is None or tick.quote_currency is None:
            raise ValidationError("Tick must reference both a base and a quote currency")
        if tick.base_currency.code == tick.quote_currency.code:
            raise ValidationError(f"Base and quote currency must differ, got {tick.pair}")
        normalize_rate(tick.rate)

    def latest_created_at(self, base_currency_id: int, quote_currency_id: int) -> Optional[datetime]:
        stmt = select(func.max(ExchangeRateTick.created_at)).where(
            ExchangeRateTick.base_currency_id == base_currency_id,
            ExchangeRateTick.quote_currency_id == quote_currency_id,
        )
        return self.session.scalar(stmt)

    def find_by_pair_between(
        self, base_code: str, quote_code: str, start: datetime, end: datetime
    ) -> List[ExchangeRateTick]:
        """
        Ticks of base/quote with start <= created_at <= end, oldest first.

        Args:
            base_code: Uppercase base currency code
            quote_code: Uppercase quote currency code
            start: Inclusive lower bound (naive UTC)
            end: Inclusive upper bound (naive UTC)
        """
        base = aliased(Currency)
        quote = aliased(Currency)
        stmt = (
            select(ExchangeRateTick)
            .join(base, ExchangeRateTick.base_currency_id == base.id)
            .join(quote, ExchangeRateTick.quote_currency_id == quote.id)
            .where(
                base.code == base_code,
                quote.code == quote_code,
                ExchangeRateTick.created_at >= start,
                ExchangeRateTick.created_at <= end,
            )
            .order_by(ExchangeRateTick.created_at.asc(), ExchangeRateTick.id.asc())
        )
        return list(self.session.scalars(stmt).unique())

    def list_for_currency(self, currency_id: int, limit: int = 100) -> List[ExchangeRateTick]:
        """Most recent ticks where the currency is either base or quote."""
        stmt = (
            select(ExchangeRateTick)
            .where(
                or_(
                    ExchangeRateTick.base_currency_id == currency_id,
                    ExchangeRateTick.quote_currency_id == currency_id,
                )
            )
            .order_by(ExchangeRateTick.created_at.desc(), ExchangeRateTick.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt).unique())

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(ExchangeRateTick)) or 0
