# src/ratetick/adapters/api/__init__.py
"""
Query Surface Adapters

Transport-agnostic handlers producing success/error payloads for rate queries.
"""

from ratetick.adapters.api.handlers import RateQueryHandlers, build_handlers, error_payload

__all__ = [
    "RateQueryHandlers",
    "build_handlers",
    "error_payload",
]
