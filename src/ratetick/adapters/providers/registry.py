# src/ratetick/adapters/providers/registry.py
"""
Provider Registry - Named Lookup of Rate Sources

This module maps provider names to zero-argument factories and hands out one
cached RateSource instance per name. Lookups are case-insensitive; an unknown
name raises ValidationError listing the known names.

Files that USE this module:
- ratetick.app (builds the registry and the services that depend on it)
- ratetick.application.ingestion_service (resolves the source for each cycle)
- tests.test_registry (unit tests)

Files that this module USES:
- ratetick.adapters.providers.base (RateSource interface)
- ratetick.adapters.providers.binance (built-in Binance provider)
- ratetick.domain.errors (ValidationError)
- ratetick.config (settings for the default provider name)
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional

from ratetick.adapters.providers.base import RateSource
from ratetick.adapters.providers.binance import BinanceProvider
from ratetick.config import settings
from ratetick.domain.errors import ValidationError

log = logging.getLogger(__name__)

ProviderFactory = Callable[[], RateSource]

PROVIDER_BINANCE = "binance"

BUILT_IN_PROVIDERS: Dict[str, ProviderFactory] = {
    PROVIDER_BINANCE: BinanceProvider,
}


class ProviderRegistry:
    """Resolve rate sources by name and cache one instance per name."""

    def __init__(
        self,
        factories: Optional[Mapping[str, ProviderFactory]] = None,
        default_provider: Optional[str] = None,
    ):
        """
        Initialize the registry.

        Args:
            factories: Mapping of provider name to zero-argument factory
                (defaults to the built-in providers)
            default_provider: Name used when create() is called without one
                (defaults to settings.default_provider)
        """
        source = BUILT_IN_PROVIDERS if factories is None else factories
        self._factories: Dict[str, ProviderFactory] = {
            name.lower(): factory for name, factory in source.items()
        }
        self._default_provider = (default_provider or settings.default_provider).lower()
        self._instances: Dict[str, RateSource] = {}

    @property
    def default_provider(self) -> str:
        return self._default_provider

    def available_providers(self) -> List[str]:
        return sorted(self._factories)

    def is_supported(self, name: str) -> bool:
        return bool(name) and name.lower() in self._factories

    def create(self, name: Optional[str] = None) -> RateSource:
        """
        Return the rate source registered under `name`.

        Args:
            name: Provider name, case-insensitive; the default provider when omitted

        Returns:
            Cached RateSource instance for that name

        Raises:
            ValidationError: If no provider is registered under that name
        """
        key = (name or self._default_provider).lower()

        if key not in self._factories:
            raise ValidationError(
                f"Unsupported provider: {key}. "
                f"Available providers: {', '.join(self.available_providers())}"
            )

        if key not in self._instances:
            log.debug("Creating rate source instance for provider %s", key)
            self._instances[key] = self._factories[key]()

        return self._instances[key]

    def clear_cache(self) -> None:
        """Drop all cached provider instances."""
        self._instances.clear()
