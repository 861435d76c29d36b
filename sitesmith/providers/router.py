"""Resolve the active provider/model/credential and hand out a cached adapter."""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from sitesmith.core.config import Settings
from sitesmith.core.errors import ConfigurationError
from sitesmith.providers.adapters import build_adapter
from sitesmith.providers.base import ProviderAdapter
from sitesmith.providers.catalog import ProviderEntry, load_catalog

log = logging.getLogger(__name__)

AdapterFactory = Callable[[str, str, str], ProviderAdapter]


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.provider, self.model, self.api_key)

    def __repr__(self) -> str:
        return f"AIConfig(provider={self.provider!r}, model={self.model!r}, api_key=***)"


class AdapterCache:
    """
    Holds the adapter for the most recently resolved config.

    One entry at a time: a lookup with a different key evicts the previous
    adapter and builds a new one. The compare-and-rebuild step runs under a
    lock so concurrent requests with the same key construct only once.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, ProviderAdapter] = {}
        self.constructions = 0

    def get_or_build(self, key: Hashable, factory: Callable[[], ProviderAdapter]) -> ProviderAdapter:
        with self._lock:
            adapter = self._entries.get(key)
            if adapter is None:
                adapter = factory()
                self._entries = {key: adapter}
                self.constructions += 1
            return adapter

    def clear(self) -> None:
        with self._lock:
            self._entries = {}


class ModelRouter:
    """
    Resolves AIConfig from stored settings plus environment fallback.

    ``settings_source`` returns the stored settings object (anything with
    ``ai_provider``, ``ai_model`` and ``api_keys``) or None when the user has
    never saved settings.
    """

    def __init__(
        self,
        cache: AdapterCache,
        settings_source: Callable[[], Optional[Any]],
        config: Settings,
        adapter_factory: AdapterFactory = build_adapter,
        catalog: Optional[Dict[str, ProviderEntry]] = None,
    ):
        self.cache = cache
        self.settings_source = settings_source
        self.config = config
        self.adapter_factory = adapter_factory
        self.catalog = catalog if catalog is not None else load_catalog()

    def resolve_config(self) -> AIConfig:
        stored = self.settings_source()
        provider = (getattr(stored, "ai_provider", None) or self.config.default_provider)
        model = getattr(stored, "ai_model", None)

        entry = self.catalog.get(provider)
        if entry is None:
            raise ConfigurationError(f"Unsupported AI provider: {provider}")
        if not model:
            model = entry.default_model
        if not model:
            raise ConfigurationError(f"No model configured for {provider}")

        stored_keys = getattr(stored, "api_keys", None) or {}
        api_key = stored_keys.get(provider) or self.config.env_api_key(provider)
        if not api_key:
            raise ConfigurationError(
                f"API key not found for {provider}. Please configure it in settings."
            )
        return AIConfig(provider=provider, model=model, api_key=api_key)

    def get_adapter(self) -> ProviderAdapter:
        config = self.resolve_config()

        def factory() -> ProviderAdapter:
            log.info("Building %s adapter for model %s", config.provider, config.model)
            return self.adapter_factory(config.provider, config.model, config.api_key)

        return self.cache.get_or_build(config.key, factory)

    def generate_text(self, prompt: str) -> str:
        return self.get_adapter().generate_text(prompt)
