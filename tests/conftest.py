# tests/conftest.py
"""
Shared Test Fixtures - In-memory Storage, Clock and Fake Rate Sources

Files that USE this module:
- pytest (fixtures are injected into every test module)

Files that this module USES:
- ratetick.adapters.persistence (engine, schema, sessions, repositories)
- ratetick.adapters.providers.base (RateSource for the fake source)
- sqlalchemy.pool (StaticPool to share one in-memory SQLite connection)
"""
from datetime import datetime, timedelta  # Date/time utilities for the fake clock
from typing import Dict, Optional  # Type hints

import pytest  # Testing framework for writing and running tests
from sqlalchemy.pool import StaticPool  # Single shared connection for sqlite://

from ratetick.adapters.persistence import (
    CurrencyDirectory,
    TickRepository,
    create_engine_from_settings,
    create_schema,
    make_session_factory,
)
from ratetick.adapters.persistence.models import ExchangeRateTick
from ratetick.adapters.providers.base import RateSource
from ratetick.adapters.providers.binance import BinanceProvider
from ratetick.domain.models import Pair


SEED_CURRENCIES = [
    ("EUR", "Euro", "€"),
    ("BTC", "Bitcoin", "₿"),
    ("ETH", "Ethereum", "Ξ"),
    ("LTC", "Litecoin", "Ł"),
]


class FakeClock:
    """Callable clock returning a settable naive UTC time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeSource(RateSource):
    """Rate source returning canned rates, or raising a canned error."""

    def __init__(self, rates: Optional[Dict[str, str]] = None, error: Optional[Exception] = None,
                 pairs: Optional[Dict[str, str]] = None):
        self.rates = rates or {}
        self.error = error
        self.pairs = pairs if pairs is not None else dict(BinanceProvider.PAIRS)
        self.calls = 0

    def fetch_rates(self) -> Dict[str, str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.rates)

    def get_supported_pairs(self) -> Dict[str, str]:
        return dict(self.pairs)

    def get_provider_name(self) -> str:
        return "Fake"


@pytest.fixture
def engine():
    engine = create_engine_from_settings(
        "sqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 10, 12, 0, 0))


@pytest.fixture
def currencies(session_factory):
    """Provision EUR, BTC, ETH and LTC."""
    with session_factory() as session, session.begin():
        directory = CurrencyDirectory(session)
        for code, name, symbol in SEED_CURRENCIES:
            directory.find_or_create_by_code(code, name=name, symbol=symbol)
    return [code for code, _, _ in SEED_CURRENCIES]


@pytest.fixture
def seed_tick(session_factory, clock):
    """Persist one tick at a given time: seed_tick("EUR/BTC", "100", at=datetime(...))."""

    def _seed(pair: str, rate: str, at: datetime) -> None:
        parsed = Pair.parse(pair)
        clock.now = at
        with session_factory() as session, session.begin():
            directory = CurrencyDirectory(session)
            tick = ExchangeRateTick.create(
                directory.get_by_code(parsed.base), directory.get_by_code(parsed.quote), rate
            )
            TickRepository(session, clock=clock).add_all([tick])

    return _seed
