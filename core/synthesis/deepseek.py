"""DeepSeek provider through its OpenAI-compatible chat completions API."""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from core.errors import MalformedResponseError, ProviderTimeoutError, ProviderUnavailableError
from core.response_cache import ResponseCache
from core.settings import ProviderSelection
from core.synthesis.base import MAX_TOKENS, TEMPERATURE, ProviderSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.deepseek.com"


class DeepSeekSynthesizer(ProviderSynthesizer):
    provider = ProviderSelection.DEEPSEEK
    label = "DeepSeek"
    credential_variable = "DEEPSEEK_API_KEY"
    model = "deepseek-chat"

    def __init__(
        self,
        cache: ResponseCache,
        *,
        api_key: Optional[str],
        api_base: str = DEFAULT_API_BASE,
        client: Optional[AsyncOpenAI] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(cache, api_key=api_key, **kwargs)
        self._api_base = api_base
        self._client = client

    def _get_client(self, api_key: str) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self._api_base,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    async def _complete(self, api_key: str, system_prompt: str, user_prompt: str) -> str:
        client = self._get_client(api_key)
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=self._messages(system_prompt, user_prompt),
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except APITimeoutError as exc:
            raise ProviderTimeoutError(self.label, self._timeout) from exc
        except APIStatusError as exc:
            logger.error("%s API error (%s): %s", self.label, exc.status_code, exc.message)
            raise ProviderUnavailableError(self.label, exc.message, status=exc.status_code) from exc
        except APIConnectionError as exc:
            raise ProviderUnavailableError(self.label, str(exc)) from exc

        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError(self.label)
        return content.strip()


__all__ = ["DEFAULT_API_BASE", "DeepSeekSynthesizer"]
