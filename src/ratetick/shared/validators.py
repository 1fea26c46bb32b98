# src/ratetick/shared/validators.py
"""
Input Validation Utilities - Configuration and Query Input Validation

This module provides input validation functions for configuration values and
for raw query parameters. It sanitizes pair strings, parses calendar dates
strictly and validates provider names, log levels and base URLs so that
malformed input is rejected before it reaches the query engine.

Files that USE this module:
- ratetick.config.settings (uses validation functions in Settings field validators)
- ratetick.adapters.api.handlers (sanitize_pair, parse_iso_date)

Files that this module USES:
- None (pure utility functions)
"""
import logging
import re
from datetime import date, datetime
from typing import Optional
from urllib.parse import urlparse

DATE_FORMAT = "%Y-%m-%d"


def sanitize_pair(pair: str) -> str:
    """
    Sanitize a raw pair parameter.

    Args:
        pair: Raw pair string (e.g. " eur/btc ")

    Returns:
        Trimmed, uppercased pair string (e.g. "EUR/BTC")
    """
    if not pair:
        return ""
    return str(pair).strip().upper()


def parse_iso_date(value: str) -> Optional[date]:
    """
    Parse a strict YYYY-MM-DD calendar date.

    The parsed date must format back to exactly the input string, so
    "2024-2-3" and "2024-02-30" are both rejected.

    Args:
        value: Date string to parse

    Returns:
        date instance, or None if the value is not a valid YYYY-MM-DD date
    """
    if not value or not isinstance(value, str):
        return None

    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None

    if parsed.strftime(DATE_FORMAT) != value:
        return None
    return parsed


def validate_provider_name(name: str) -> bool:
    """
    Validate provider name format.

    Args:
        name: Provider name to validate (e.g. "binance")

    Returns:
        True if valid, False otherwise
    """
    if not name:
        return False
    return bool(re.match(r'^[A-Za-z0-9_-]{1,50}$', name))


def validate_log_level(level: str) -> bool:
    """
    Validate a logging level name.

    Args:
        level: Level name (e.g. "INFO", "debug")

    Returns:
        True if the name maps to a standard logging level, False otherwise
    """
    if not level:
        return False
    return isinstance(logging.getLevelName(level.upper()), int)


def validate_http_url(url: str) -> bool:
    """
    Validate that a URL is an absolute http(s) URL.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
