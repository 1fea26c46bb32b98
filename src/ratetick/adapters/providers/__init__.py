# src/ratetick/adapters/providers/__init__.py
"""
Provider Adapters - External API Clients

This package contains adapters for external exchange rate APIs.
All providers implement the RateSource interface and are resolved by name
through the ProviderRegistry.
"""

from ratetick.adapters.providers.base import RateSource
from ratetick.adapters.providers.binance import BinanceProvider
from ratetick.adapters.providers.registry import ProviderRegistry, PROVIDER_BINANCE

__all__ = [
    "RateSource",
    "BinanceProvider",
    "ProviderRegistry",
    "PROVIDER_BINANCE",
]
