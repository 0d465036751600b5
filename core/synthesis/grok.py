"""X.AI Grok provider, called over plain HTTP with ``requests``."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from core.errors import MalformedResponseError, ProviderTimeoutError, ProviderUnavailableError
from core.response_cache import ResponseCache
from core.settings import ProviderSelection
from core.synthesis.base import MAX_TOKENS, TEMPERATURE, ProviderSynthesizer, extract_reply

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.x.ai/v1"


class GrokSynthesizer(ProviderSynthesizer):
    provider = ProviderSelection.GROK
    label = "X.AI"
    credential_variable = "XAI_API_KEY"
    model = "grok-2-latest"

    def __init__(
        self,
        cache: ResponseCache,
        *,
        api_key: Optional[str],
        api_base: str = DEFAULT_API_BASE,
        session: Optional[requests.Session] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(cache, api_key=api_key, **kwargs)
        self._api_base = api_base.rstrip("/")
        # No retry adapter is mounted: a failed call is reported, never repeated.
        self._session = session or requests.Session()

    async def _complete(self, api_key: str, system_prompt: str, user_prompt: str) -> str:
        return await asyncio.to_thread(self._post, api_key, system_prompt, user_prompt)

    def _post(self, api_key: str, system_prompt: str, user_prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": self._messages(system_prompt, user_prompt),
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        try:
            response = self._session.post(
                f"{self._api_base}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            raise ProviderTimeoutError(self.label, self._timeout) from exc
        except requests.RequestException as exc:
            raise ProviderUnavailableError(self.label, str(exc)) from exc

        if not response.ok:
            logger.error("%s API error (%s): %s", self.label, response.status_code, response.text)
            raise ProviderUnavailableError(self.label, response.text, status=response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(self.label) from exc
        return extract_reply(body, self.label)


__all__ = ["DEFAULT_API_BASE", "GrokSynthesizer"]
