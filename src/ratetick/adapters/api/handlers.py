# src/ratetick/adapters/api/handlers.py
"""
Query Handlers - Transport-agnostic Query Surface

This module turns raw request parameters into the success and error payloads
served to callers. It rejects missing or malformed `pair`/`date` inputs before
they reach the query service, maps domain errors to a classified error payload
and hides unexpected failures behind a generic message. Any transport (HTTP
framework, bot, CLI) can call these handlers and serialize the dictionaries.

Files that USE this module:
- ratetick.app (build_handlers wires handlers to the query service)
- tests.test_handlers (unit tests)

Files that this module USES:
- ratetick.application.query_service (RateQueryService)
- ratetick.domain.errors (DomainError, ErrorKind)
- ratetick.shared.validators (sanitize_pair, parse_iso_date)
- ratetick.shared.timeutils (utcnow for response metadata)
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from ratetick.application.query_service import RateQueryService
from ratetick.domain.errors import DomainError, ErrorKind
from ratetick.domain.models import TIMESTAMP_FORMAT, Pair
from ratetick.shared.timeutils import utcnow
from ratetick.shared.validators import DATE_FORMAT, parse_iso_date, sanitize_pair

logger = logging.getLogger(__name__)

INTERNAL_ERROR_KIND = "internal"

# Status codes a transport may use when serializing error payloads
STATUS_CODES = {
    ErrorKind.VALIDATION.value: 400,
    ErrorKind.NOT_FOUND.value: 404,
    ErrorKind.PROVIDER.value: 502,
    ErrorKind.PERSISTENCE.value: 500,
    INTERNAL_ERROR_KIND: 500,
}

Handler = Callable[[Mapping[str, Any]], Dict[str, Any]]


def _meta(**extra: Any) -> Dict[str, Any]:
    return {"generated_at": utcnow().strftime(TIMESTAMP_FORMAT), **extra}


def error_payload(message: str, kind: str) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {
            "message": message,
            "kind": kind,
            "code": STATUS_CODES.get(kind, 500),
        },
        "meta": _meta(),
    }


def _success_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": True, "data": data, "meta": _meta(timezone="UTC")}


class RateQueryHandlers:
    """Query surface over a RateQueryService."""

    def __init__(self, service: RateQueryService):
        self.service = service

    # --- last 24 hours ---
    def last_24h(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        pair = self._pair_param(params)
        if pair is None:
            return error_payload("Missing required parameter: pair", ErrorKind.VALIDATION.value)

        try:
            ticks = self.service.get_trailing_window(pair)
            pair = str(Pair.parse(pair))
        except DomainError as e:
            logger.warning("Rejected last 24h query: pair=%s error=%s", params.get("pair"), e)
            return error_payload(e.message, e.kind.value)
        except Exception:
            logger.exception("Error fetching last 24h rates: pair=%s", params.get("pair"))
            return error_payload("Internal server error", INTERNAL_ERROR_KIND)

        rates = [tick.to_dict() for tick in ticks]
        return _success_payload({
            "pair": pair,
            "period": "last-24h",
            "rates": rates,
            "count": len(rates),
        })

    # --- one calendar day ---
    def day(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        pair = self._pair_param(params)
        if pair is None:
            return error_payload("Missing required parameter: pair", ErrorKind.VALIDATION.value)

        date_string = params.get("date")
        if not date_string:
            return error_payload(
                "Missing required parameter: date (format: YYYY-MM-DD)", ErrorKind.VALIDATION.value
            )

        day = parse_iso_date(date_string)
        if day is None:
            logger.warning("Invalid date requested: date=%r", date_string)
            return error_payload("Invalid date format. Expected: YYYY-MM-DD", ErrorKind.VALIDATION.value)

        try:
            ticks = self.service.get_day_window(pair, day)
            pair = str(Pair.parse(pair))
        except DomainError as e:
            logger.warning(
                "Rejected day query: pair=%s date=%s error=%s",
                params.get("pair"), date_string, e,
            )
            return error_payload(e.message, e.kind.value)
        except Exception:
            logger.exception("Error fetching day rates: pair=%s date=%s", params.get("pair"), date_string)
            return error_payload("Internal server error", INTERNAL_ERROR_KIND)

        rates = [tick.to_dict() for tick in ticks]
        return _success_payload({
            "pair": pair,
            "date": day.strftime(DATE_FORMAT),
            "rates": rates,
            "count": len(rates),
        })

    @staticmethod
    def _pair_param(params: Mapping[str, Any]) -> Optional[str]:
        raw = params.get("pair")
        if not isinstance(raw, str):
            return None
        return sanitize_pair(raw) or None


def build_handlers(service: RateQueryService) -> Dict[str, Handler]:
    """
    Create the query handlers keyed by route name.

    Returns:
        {"last_24h": ..., "day": ...}
    """
    handlers = RateQueryHandlers(service)
    return {
        "last_24h": handlers.last_24h,
        "day": handlers.day,
    }
