"""The three provider variants behind ProviderAdapter."""
from __future__ import annotations
from typing import Any, Dict, Type

import anthropic
import httpx
import openai
from google import genai
from google.genai import errors as genai_errors

from sitesmith.core.config import settings
from sitesmith.providers.base import ProviderAdapter


class GeminiAdapter(ProviderAdapter):
    """Single-turn ``generate_content`` interface; text comes from the first candidate."""
    provider = "gemini"
    provider_errors = (genai_errors.APIError, httpx.HTTPError)

    def _build_client(self) -> Any:
        return genai.Client(api_key=self.api_key)

    def _generate(self, prompt: str) -> str:
        response = self.client.models.generate_content(model=self.model, contents=prompt)
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return ""
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        return "".join(part.text for part in parts if getattr(part, "text", None))


class OpenAIAdapter(ProviderAdapter):
    """Chat-completion interface with a single user message."""
    provider = "openai"
    provider_errors = (openai.OpenAIError,)

    def __init__(self, api_key: str, model: str, max_tokens: int | None = None):
        super().__init__(api_key, model)
        self.max_tokens = max_tokens or settings.max_output_tokens

    def _build_client(self) -> Any:
        return openai.OpenAI(api_key=self.api_key)

    def _generate(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.choices:
            return ""
        content = response.choices[0].message.content
        if isinstance(content, list):
            return "".join(p.get("text", "") for p in content if isinstance(p, dict))
        return content or ""


class ClaudeAdapter(ProviderAdapter):
    """Messages interface; text comes from the first text-typed content block."""
    provider = "claude"
    provider_errors = (anthropic.AnthropicError,)

    def __init__(self, api_key: str, model: str, max_tokens: int | None = None):
        super().__init__(api_key, model)
        self.max_tokens = max_tokens or settings.max_output_tokens

    def _build_client(self) -> Any:
        return anthropic.Anthropic(api_key=self.api_key)

    def _generate(self, prompt: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        for block in response.content or []:
            if getattr(block, "type", None) == "text":
                return block.text or ""
        return ""


ADAPTERS: Dict[str, Type[ProviderAdapter]] = {
    GeminiAdapter.provider: GeminiAdapter,
    OpenAIAdapter.provider: OpenAIAdapter,
    ClaudeAdapter.provider: ClaudeAdapter,
}


def build_adapter(provider: str, model: str, api_key: str) -> ProviderAdapter:
    return ADAPTERS[provider](api_key=api_key, model=model)
