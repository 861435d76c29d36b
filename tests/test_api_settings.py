"""Settings, provider catalog and AI config endpoints (real router, mocked SDK)."""
import json
from unittest.mock import MagicMock, patch

from conftest import TODO_ANALYSIS


def _save(client, **body):
    payload = {"aiProvider": "openai", "aiModel": "gpt-4o", "apiKeys": {"openai": "sk-test-1234567890"}}
    payload.update(body)
    r = client.post("/api/settings", json=payload)
    assert r.status_code == 200, r.text
    return r.json()


def test_settings_missing_is_404(settings_client):
    assert settings_client.get("/api/settings").status_code == 404


def test_saved_keys_are_masked(settings_client):
    body = _save(settings_client)
    assert body["aiProvider"] == "openai"
    assert body["apiKeys"]["openai"] == "sk-t**********7890"
    assert "sk-test-1234567890" not in json.dumps(settings_client.get("/api/settings").json())


def test_masked_key_echo_keeps_stored_key(settings_client, store):
    masked = _save(settings_client)["apiKeys"]["openai"]
    _save(settings_client, aiModel="gpt-4o-mini", apiKeys={"openai": masked})

    row = store.get_settings("default")
    assert row.ai_model == "gpt-4o-mini"
    assert row.api_keys == {"openai": "sk-test-1234567890"}


def test_missing_model_defaults_to_catalog_default(settings_client):
    body = _save(settings_client, aiProvider="claude", aiModel=None, apiKeys={"claude": "sk-ant-xyz"})
    assert body["aiModel"] == "claude-sonnet-4-20250514"


def test_unknown_provider_rejected(settings_client):
    r = settings_client.post("/api/settings", json={"aiProvider": "mistral", "aiModel": "large"})
    assert r.status_code == 400


def test_ai_config_without_key(settings_client):
    body = settings_client.get("/api/ai-config").json()
    assert body["provider"] == "gemini"
    assert body["hasApiKey"] is False
    assert set(body["availableProviders"]) == {"gemini", "openai", "claude"}


def test_ai_config_with_stored_key(settings_client):
    _save(settings_client)
    body = settings_client.get("/api/ai-config").json()
    assert body == {
        "provider": "openai",
        "model": "gpt-4o",
        "hasApiKey": True,
        "availableProviders": ["gemini", "openai", "claude"],
    }


def test_ai_models_listing(settings_client):
    providers = settings_client.get("/api/ai-models").json()
    assert [p["key"] for p in providers] == ["gemini", "openai", "claude"]

    only = settings_client.get("/api/ai-models", params={"provider": "openai"}).json()
    assert only[0]["defaultModel"] == "gpt-4o"
    assert settings_client.get("/api/ai-models", params={"provider": "nope"}).status_code == 404


def test_generation_without_credentials_is_configuration_error(settings_client):
    r = settings_client.post("/api/chat/start", json={"prompt": "a todo list app"})
    assert r.status_code == 500
    assert r.json()["type"] == "ConfigurationError"
    assert "API key not found for gemini" in r.json()["error"]


def test_stored_provider_drives_generation(settings_client):
    _save(settings_client)
    choice = MagicMock()
    choice.message.content = json.dumps(TODO_ANALYSIS)

    with patch("sitesmith.providers.adapters.openai.OpenAI") as ctor:
        ctor.return_value.chat.completions.create.return_value = MagicMock(choices=[choice])
        first = settings_client.post("/api/chat/start", json={"prompt": "a todo list app"})
        second = settings_client.post("/api/chat/start", json={"prompt": "another todo app"})

    assert first.status_code == 200, first.text
    assert second.status_code == 200
    ctor.assert_called_once_with(api_key="sk-test-1234567890")
    kwargs = ctor.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
