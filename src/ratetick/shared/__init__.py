# src/ratetick/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- UTC clock and window bounds
- Logging configuration
"""

from ratetick.shared.validators import (
    parse_iso_date,
    sanitize_pair,
    validate_http_url,
    validate_log_level,
    validate_provider_name,
)
from ratetick.shared.timeutils import (
    Clock,
    day_window,
    trailing_window,
    utcnow,
)

__all__ = [
    "sanitize_pair",
    "parse_iso_date",
    "validate_provider_name",
    "validate_log_level",
    "validate_http_url",
    "Clock",
    "utcnow",
    "day_window",
    "trailing_window",
]
