"""
Hierarchical data store with on-demand providers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .container_base import ContainerBase, DataStoreBase, Provider
from .flat_map import FlatMap

logger = logging.getLogger(__name__)


class DataStore(DataStoreBase):
    """
    Flattened key/value data plus a registry of providers.

    A key present in the data always wins. Otherwise the provider whose key is
    the closest extension of the requested key computes the value; shared
    providers have their result written back under the requested key.
    """

    def __init__(
        self,
        container: ContainerBase,
        items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        providers: Mapping[str, Provider] | None = None,
    ):
        """
        Create a new DataStore.

        Args:
            container: Container passed to providers
            items: Initial data, nested or already flattened
            providers: Initial providers keyed by provider key (not shared)
        """
        self._container = container
        self._data = FlatMap(items)
        self._providers: dict[str, Provider] = dict(providers or {})
        self._shared_providers: set[str] = set()
        self._provider_cache: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._data:
            return self._data.get(key, default)

        provider_key = self._find_provider(key)
        if provider_key is not None:
            return self._provide_data(provider_key, key, default)

        return default

    def set(self, key: str, value: Any) -> DataStore:
        self._data.put(key, value)
        return self

    def provide(self, key: str, provider: Provider, shared: bool = True) -> DataStore:
        self._providers[key] = provider

        if shared:
            self._shared_providers.add(key)
        else:
            self._shared_providers.discard(key)

        # A new provider may be a better match for keys already looked up
        self._provider_cache.clear()
        logger.debug("Registered %s provider for %s", "shared" if shared else "non-shared", key)
        return self

    def has(self, key: str) -> bool:
        return key in self._data or self._find_provider(key) is not None

    def _find_provider(self, key: str) -> str | None:
        """
        Find the provider serving ``key``.

        Candidates are provider keys starting with ``key``; the one with the
        shortest remaining suffix wins. Providers are scanned in registration
        order and the first of several equally close candidates is kept.
        """
        if key in self._provider_cache:
            return self._provider_cache[key]

        provider: str | None = None
        difference = 0

        for provider_key in self._providers:
            if not provider_key.startswith(key):
                continue
            remaining = len(provider_key) - len(key)
            if provider is None or remaining < difference:
                provider = provider_key
                difference = remaining
            if remaining == 0:
                break

        if provider is not None:
            logger.debug("Provider %s matched %s", provider, key)
            self._provider_cache[key] = provider

        return provider

    def _provide_data(self, provider_key: str, key: str, default: Any) -> Any:
        provider = self._providers[provider_key]
        value = provider(key, default, self._container)
        if value is None:
            value = default

        if provider_key in self._shared_providers:
            self.set(key, value)

        return value
