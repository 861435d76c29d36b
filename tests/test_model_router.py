"""Model router: config resolution, environment fallback and the adapter cache."""
import threading
import time
from types import SimpleNamespace

import pytest
from sitesmith.core.config import Settings
from sitesmith.core.errors import ConfigurationError
from sitesmith.providers.adapters import GeminiAdapter
from sitesmith.providers.router import AdapterCache, AIConfig, ModelRouter


class RecordingFactory:
    def __init__(self, delay: float = 0.0):
        self.calls = []
        self.delay = delay

    def __call__(self, provider, model, api_key):
        if self.delay:
            time.sleep(self.delay)
        self.calls.append((provider, model, api_key))
        return SimpleNamespace(provider=provider, model=model, generate_text=lambda prompt: f"{provider}:{prompt}")


def _router(stored=None, env=None, factory=None, cache=None):
    holder = {"stored": stored}
    router = ModelRouter(
        cache=cache or AdapterCache(),
        settings_source=lambda: holder["stored"],
        config=Settings(_env_file=None, **(env or {})),
        adapter_factory=factory or RecordingFactory(),
    )
    return router, holder


def _stored(provider, model=None, api_keys=None):
    return SimpleNamespace(ai_provider=provider, ai_model=model, api_keys=api_keys or {})


def test_stored_settings_win():
    router, _ = _router(
        stored=_stored("openai", "gpt-4o-mini", {"openai": "sk-stored"}),
        env={"openai_api_key": "sk-env"},
    )
    assert router.resolve_config() == AIConfig("openai", "gpt-4o-mini", "sk-stored")


def test_env_key_used_when_no_stored_key():
    router, _ = _router(stored=_stored("claude", "claude-3-haiku-20240307"), env={"anthropic_api_key": "sk-ant"})
    assert router.resolve_config().api_key == "sk-ant"


def test_default_provider_and_model_without_stored_settings():
    router, _ = _router(stored=None, env={"google_api_key": "g-key"})
    config = router.resolve_config()
    assert config.provider == "gemini"
    assert config.model == "gemini-1.5-flash"
    assert config.api_key == "g-key"


def test_gemini_accepts_either_env_variable():
    router, _ = _router(stored=None, env={"gemini_api_key": "gem-key"})
    assert router.resolve_config().api_key == "gem-key"


def test_missing_key_is_configuration_error():
    router, _ = _router(stored=_stored("openai", "gpt-4o"))
    with pytest.raises(ConfigurationError) as exc_info:
        router.resolve_config()
    assert "API key not found for openai" in str(exc_info.value)


def test_unknown_provider_is_configuration_error():
    router, _ = _router(stored=_stored("mistral", "large", {"mistral": "k"}))
    with pytest.raises(ConfigurationError):
        router.get_adapter()


def test_repr_hides_api_key():
    assert "sk-secret" not in repr(AIConfig("openai", "gpt-4o", "sk-secret"))


def test_unchanged_config_reuses_adapter():
    factory = RecordingFactory()
    router, _ = _router(stored=_stored("openai", "gpt-4o", {"openai": "k1"}), factory=factory)

    first = router.get_adapter()
    second = router.get_adapter()

    assert first is second
    assert router.cache.constructions == 1
    assert factory.calls == [("openai", "gpt-4o", "k1")]


def test_changed_config_rebuilds_adapter():
    factory = RecordingFactory()
    router, holder = _router(stored=_stored("openai", "gpt-4o", {"openai": "k1"}), factory=factory)
    first = router.get_adapter()

    holder["stored"] = _stored("openai", "gpt-4o", {"openai": "k2"})
    second = router.get_adapter()
    holder["stored"] = _stored("claude", "claude-sonnet-4-20250514", {"claude": "k3"})
    third = router.get_adapter()

    assert first is not second and second is not third
    assert router.cache.constructions == 3
    assert [c[0] for c in factory.calls] == ["openai", "openai", "claude"]


def test_generate_text_goes_through_active_adapter():
    router, holder = _router(stored=_stored("openai", "gpt-4o", {"openai": "k"}))
    assert router.generate_text("hi") == "openai:hi"
    holder["stored"] = _stored("claude", None, {"claude": "k"})
    assert router.generate_text("hi") == "claude:hi"


def test_concurrent_lookups_construct_once():
    factory = RecordingFactory(delay=0.05)
    router, _ = _router(stored=_stored("openai", "gpt-4o", {"openai": "k"}), factory=factory)
    results = []

    def worker():
        results.append(router.get_adapter())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(factory.calls) == 1
    assert all(a is results[0] for a in results)


def test_cache_clear_forces_rebuild():
    cache = AdapterCache()
    router, _ = _router(stored=_stored("openai", "gpt-4o", {"openai": "k"}), cache=cache)
    router.get_adapter()
    cache.clear()
    router.get_adapter()
    assert cache.constructions == 2


def test_default_factory_builds_real_adapter_without_network():
    router = ModelRouter(
        cache=AdapterCache(),
        settings_source=lambda: None,
        config=Settings(_env_file=None, google_api_key="g-key"),
    )
    adapter = router.get_adapter()
    assert isinstance(adapter, GeminiAdapter)
    assert adapter.model == "gemini-1.5-flash"
