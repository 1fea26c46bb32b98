# tests/test_handlers.py
"""
Query Handler Tests - Payload Shapes and Error Mapping

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- ratetick.adapters.api.handlers (build_handlers, RateQueryHandlers)
- ratetick.application.query_service (RateQueryService interface for the mock)
- unittest.mock (Mock for the query service)
"""
from datetime import date, datetime  # Query dates and tick timestamps
from decimal import Decimal  # Tick rates

import pytest  # Testing framework for writing and running tests
from unittest.mock import Mock  # Mock query service

from ratetick.adapters.api.handlers import STATUS_CODES, build_handlers, error_payload
from ratetick.application.query_service import RateQueryService
from ratetick.domain.errors import NotFoundError, ValidationError
from ratetick.domain.models import CurrencyInfo, TickView

from conftest import FakeSource


def _tick(rate="45000.12345678", created_at=datetime(2024, 1, 1, 0, 0, 0)):
    return TickView(
        id=1,
        pair="EUR/BTC",
        base_currency=CurrencyInfo("EUR", "Euro", "€"),
        quote_currency=CurrencyInfo("BTC", "Bitcoin", "₿"),
        rate=Decimal(rate),
        created_at=created_at,
    )


@pytest.fixture
def mock_service():
    return Mock(spec=RateQueryService)


@pytest.fixture
def handlers(mock_service):
    return build_handlers(mock_service)


class TestLast24h:
    def test_success_payload(self, handlers, mock_service):
        mock_service.get_trailing_window.return_value = [_tick()]

        payload = handlers["last_24h"]({"pair": " eur/btc "})

        mock_service.get_trailing_window.assert_called_once_with("EUR/BTC")
        assert payload["success"] is True
        assert payload["data"]["pair"] == "EUR/BTC"
        assert payload["data"]["period"] == "last-24h"
        assert payload["data"]["count"] == 1
        assert payload["data"]["rates"][0]["rate"] == 45000.12345678
        assert payload["data"]["rates"][0]["unix_timestamp"] == 1704067200
        assert payload["meta"]["timezone"] == "UTC"
        assert "generated_at" in payload["meta"]

    def test_spaced_pair_is_echoed_canonically(self, handlers, mock_service):
        mock_service.get_trailing_window.return_value = []

        payload = handlers["last_24h"]({"pair": " eur / btc "})

        assert payload["success"] is True
        assert payload["data"]["pair"] == "EUR/BTC"

    def test_empty_window(self, handlers, mock_service):
        mock_service.get_trailing_window.return_value = []

        payload = handlers["last_24h"]({"pair": "EUR/LTC"})

        assert payload["success"] is True
        assert payload["data"]["rates"] == []
        assert payload["data"]["count"] == 0

    @pytest.mark.parametrize("params", [{}, {"pair": ""}, {"pair": "   "}, {"pair": 5}])
    def test_missing_pair(self, handlers, mock_service, params):
        payload = handlers["last_24h"](params)

        assert payload["success"] is False
        assert payload["error"]["message"] == "Missing required parameter: pair"
        assert payload["error"]["kind"] == "validation"
        assert payload["error"]["code"] == 400
        mock_service.get_trailing_window.assert_not_called()

    def test_validation_error_is_mapped(self, handlers, mock_service):
        mock_service.get_trailing_window.side_effect = ValidationError("Unsupported trading pair: XYZ/ABC")

        payload = handlers["last_24h"]({"pair": "XYZ/ABC"})

        assert payload["success"] is False
        assert payload["error"] == {
            "message": "Unsupported trading pair: XYZ/ABC",
            "kind": "validation",
            "code": 400,
        }

    def test_unexpected_error_is_hidden(self, handlers, mock_service):
        mock_service.get_trailing_window.side_effect = RuntimeError("database locked at /var/db")

        payload = handlers["last_24h"]({"pair": "EUR/BTC"})

        assert payload["error"]["message"] == "Internal server error"
        assert payload["error"]["kind"] == "internal"
        assert payload["error"]["code"] == 500


class TestDay:
    def test_success_payload(self, handlers, mock_service):
        mock_service.get_day_window.return_value = [_tick(), _tick(rate="45001")]

        payload = handlers["day"]({"pair": "EUR/BTC", "date": "2024-01-01"})

        mock_service.get_day_window.assert_called_once_with("EUR/BTC", date(2024, 1, 1))
        assert payload["success"] is True
        assert payload["data"]["date"] == "2024-01-01"
        assert payload["data"]["count"] == 2
        assert "period" not in payload["data"]

    def test_spaced_pair_is_echoed_canonically(self, handlers, mock_service):
        mock_service.get_day_window.return_value = []

        payload = handlers["day"]({"pair": " eur / btc ", "date": "2024-01-01"})

        assert payload["success"] is True
        assert payload["data"]["pair"] == "EUR/BTC"

    def test_missing_date(self, handlers, mock_service):
        payload = handlers["day"]({"pair": "EUR/BTC"})

        assert payload["error"]["message"] == "Missing required parameter: date (format: YYYY-MM-DD)"
        assert payload["error"]["kind"] == "validation"
        mock_service.get_day_window.assert_not_called()

    def test_missing_pair_checked_first(self, handlers):
        payload = handlers["day"]({"date": "2024-01-01"})
        assert payload["error"]["message"] == "Missing required parameter: pair"

    @pytest.mark.parametrize("value", ["2024-13-01", "2024-02-30", "01-01-2024", "2024-1-1", "yesterday"])
    def test_invalid_date(self, handlers, mock_service, value):
        payload = handlers["day"]({"pair": "EUR/BTC", "date": value})

        assert payload["error"]["message"] == "Invalid date format. Expected: YYYY-MM-DD"
        assert payload["error"]["code"] == 400
        mock_service.get_day_window.assert_not_called()

    def test_domain_error_kind_is_preserved(self, handlers, mock_service):
        mock_service.get_day_window.side_effect = NotFoundError("Currency not found: BTC")

        payload = handlers["day"]({"pair": "EUR/BTC", "date": "2024-01-01"})

        assert payload["error"]["kind"] == "not_found"
        assert payload["error"]["code"] == 404

    def test_unexpected_error_is_hidden(self, handlers, mock_service):
        mock_service.get_day_window.side_effect = KeyError("boom")

        payload = handlers["day"]({"pair": "EUR/BTC", "date": "2024-01-01"})

        assert payload["error"]["message"] == "Internal server error"


class TestErrorPayload:
    def test_status_codes(self):
        assert STATUS_CODES == {
            "validation": 400,
            "not_found": 404,
            "provider": 502,
            "persistence": 500,
            "internal": 500,
        }

    def test_unknown_kind_defaults_to_500(self):
        payload = error_payload("oops", "weird")
        assert payload["success"] is False
        assert payload["error"]["code"] == 500


class TestHandlersIntegration:
    def test_round_trip_through_storage(self, session_factory, clock, currencies, seed_tick):
        seed_tick("EUR/BTC", "45000.12345678", datetime(2024, 5, 10, 9, 30, 0))
        service = RateQueryService(FakeSource(), session_factory, clock=clock)
        handlers = build_handlers(service)

        day = handlers["day"]({"pair": "eur/btc", "date": "2024-05-10"})
        unsupported = handlers["last_24h"]({"pair": "XYZ/ABC"})
        malformed = handlers["last_24h"]({"pair": "EURBTC"})

        assert day["data"]["count"] == 1
        assert day["data"]["rates"][0]["timestamp"] == "2024-05-10 09:30:00"
        assert unsupported["error"]["message"].startswith("Unsupported trading pair: XYZ/ABC")
        assert malformed["error"]["kind"] == "validation"
