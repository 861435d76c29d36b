from __future__ import annotations
import logging
from typing import Any, Tuple, Type

from sitesmith.core.errors import ProviderError

log = logging.getLogger(__name__)


class ProviderAdapter:
    """
    Uniform ``generate_text(prompt) -> str`` contract over one AI backend.

    Subclasses build their SDK client in ``_build_client`` (called once, on
    first use) and turn one prompt into plain text in ``_generate``. SDK
    failures listed in ``provider_errors`` are re-raised as ProviderError with
    the original message preserved.
    """
    provider: str = ""
    provider_errors: Tuple[Type[BaseException], ...] = ()

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model
        self._client: Any = None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
            log.info("Initialized %s client with model %s", self.provider, self.model)
        return self._client

    def generate_text(self, prompt: str) -> str:
        try:
            text = self._generate(prompt)
        except self.provider_errors as e:
            log.warning("%s call failed: %s", self.provider, e)
            raise ProviderError(self.provider, str(e)) from e
        return text or ""

    def _build_client(self) -> Any:
        raise NotImplementedError

    def _generate(self, prompt: str) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
