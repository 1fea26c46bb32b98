# src/ratetick/application/query_service.py
"""
Rate Query Service - Time-windowed Reads of Stored Ticks

This module contains the read side of the engine. It validates the pair
against the active rate source, computes the window (trailing 24 hours or one
calendar day, both inclusive) and returns the matching ticks oldest first as
TickView objects. An empty window is a normal, successful result.

Files that USE this module:
- ratetick.adapters.api.handlers (query surface)
- ratetick.app (wiring)
- tests.test_query_service (unit tests)

Files that this module USES:
- ratetick.adapters.providers.base (RateSource for the supported pair list)
- ratetick.adapters.persistence.tick_store (TickRepository)
- ratetick.domain.* (Pair, TickView, ValidationError)
- ratetick.shared.timeutils (window bounds and clock)
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from ratetick.adapters.persistence.tick_store import TickRepository
from ratetick.adapters.providers.base import RateSource
from ratetick.domain.errors import ValidationError
from ratetick.domain.models import Pair, TickView
from ratetick.shared.timeutils import Clock, day_window, trailing_window, utcnow

log = logging.getLogger(__name__)


class RateQueryService:
    """Read-only queries over stored ticks for pairs of the active rate source."""

    def __init__(self, source: RateSource, session_factory: sessionmaker, clock: Clock = utcnow):
        self.source = source
        self.session_factory = session_factory
        self.clock = clock

    def get_supported_pairs(self) -> List[str]:
        return list(self.source.get_supported_pairs())

    def get_trailing_window(self, pair: str, now: Optional[datetime] = None) -> List[TickView]:
        """
        Ticks of `pair` within [now - 24h, now], oldest first.

        Raises:
            ValidationError: If the pair is malformed or not supported
        """
        parsed = self._validate_pair(pair)
        start, end = trailing_window(now or self.clock())
        return self._find(parsed, start, end)

    def get_day_window(self, pair: str, day: date) -> List[TickView]:
        """
        Ticks of `pair` within [day 00:00:00, day 23:59:59], oldest first.

        Raises:
            ValidationError: If the pair is malformed or not supported, or day is not a date
        """
        parsed = self._validate_pair(pair)
        if isinstance(day, datetime):
            day = day.date()
        elif not isinstance(day, date):
            raise ValidationError(f"Invalid date: {day!r}. Expected a calendar date")

        start, end = day_window(day)
        return self._find(parsed, start, end)

    def _validate_pair(self, pair: str) -> Pair:
        parsed = Pair.parse(pair)
        if not self.source.is_pair_supported(str(parsed)):
            raise ValidationError(
                f"Unsupported trading pair: {parsed}. "
                f"Supported pairs: {', '.join(self.get_supported_pairs())}"
            )
        return parsed

    def _find(self, pair: Pair, start: datetime, end: datetime) -> List[TickView]:
        with self.session_factory() as session:
            ticks = TickRepository(session).find_by_pair_between(pair.base, pair.quote, start, end)
            views = [tick.to_view() for tick in ticks]

        log.debug("Query %s [%s, %s] returned %d ticks", pair, start, end, len(views))
        return views
