# src/ratetick/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Sources

This module defines the abstract base class for all exchange rate sources.
It establishes the contract that all provider implementations must follow.

Files that USE this module:
- ratetick.adapters.providers.binance (BinanceProvider implements RateSource)
- ratetick.adapters.providers.registry (registry hands out RateSource instances)
- ratetick.application.* (services depend on the RateSource interface)
- tests.* (fake sources implement RateSource)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class RateSource(ABC):
    @abstractmethod
    def fetch_rates(self) -> Dict[str, str]:
        """
        Fetch current rates for every supported pair.

        Returns a mapping of pair ("EUR/BTC") to rate string. Pairs that
        failed are left out; raises ProviderError if none succeeded.
        """
        raise NotImplementedError

    @abstractmethod
    def get_supported_pairs(self) -> Dict[str, str]:
        """Return the mapping of pair to source-specific symbol."""
        raise NotImplementedError

    def is_pair_supported(self, pair: str) -> bool:
        return pair in self.get_supported_pairs()

    @abstractmethod
    def get_provider_name(self) -> str:
        raise NotImplementedError

    def get_provider_info(self) -> Dict[str, Any]:
        """Return descriptive, informational metadata about the source."""
        return {
            "name": self.get_provider_name(),
            "supported_pairs_count": len(self.get_supported_pairs()),
        }
