"""Common pieces of every synthesizer: input sanitation and the provider flow."""

from __future__ import annotations

import logging
import unicodedata
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Awaitable, Callable, ClassVar, List, Optional

from core.automation import DEFAULT_CALENDARS
from core.command import CommandText, ParseOutcome
from core.errors import EmptyCommandError, InputTooLongError, MalformedResponseError, MissingCredentialError
from core.response_cache import ResponseCache
from core.settings import ProviderSelection
from core.synthesis.prompts import PromptContext, build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 1000
DEFAULT_TIMEOUT_SECONDS = 30.0
TEMPERATURE = 0.3
MAX_TOKENS = 200

CalendarSource = Callable[[], Awaitable[List[str]]]


def sanitize_user_input(text: str) -> str:
    """Drop control characters other than newline and tab."""

    return "".join(
        char for char in text if char in "\n\t" or unicodedata.category(char) != "Cc"
    )


def prepare_input(text: str) -> str:
    """Validate length and return the sanitized, trimmed input."""

    if not text or not text.strip():
        raise EmptyCommandError("Empty input provided")
    if len(text) > MAX_INPUT_LENGTH:
        raise InputTooLongError(MAX_INPUT_LENGTH)
    sanitized = sanitize_user_input(text).strip()
    if not sanitized:
        raise EmptyCommandError("Empty input provided")
    return sanitized


def extract_reply(body: Any, provider: str) -> str:
    """Return ``choices[0].message.content`` from a chat-completions body."""

    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError(provider) from exc
    if not isinstance(content, str) or not content.strip():
        raise MalformedResponseError(provider)
    return content.strip()


class Synthesizer(ABC):
    """Turns one line of user input into a ``ParseOutcome``."""

    provider: ClassVar[ProviderSelection]

    @abstractmethod
    async def synthesize(self, text: str) -> ParseOutcome:
        raise NotImplementedError


class ProviderSynthesizer(Synthesizer):
    """Shared flow for network-backed providers.

    sanitize -> cache lookup -> credential check -> prompt -> provider call
    -> cache store. Subclasses only implement ``_complete``.
    """

    label: ClassVar[str] = "provider"
    credential_variable: ClassVar[str] = ""
    model: ClassVar[str] = ""

    def __init__(
        self,
        cache: ResponseCache,
        *,
        api_key: Optional[str],
        calendar_source: Optional[CalendarSource] = None,
        default_calendar: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._cache = cache
        self._api_key = api_key
        self._calendar_source = calendar_source
        self._default_calendar = default_calendar or "Calendar"
        self._timeout = timeout
        self._clock = clock

    async def synthesize(self, text: str) -> ParseOutcome:
        sanitized = prepare_input(text)
        cached = self._cache.get(sanitized)
        if cached is not None:
            logger.debug("Using cached %s response", self.label)
            return CommandText(cached)

        if not self._api_key:
            raise MissingCredentialError(self.credential_variable)

        context = await self._build_context()
        system_prompt = build_system_prompt(sanitized, context)
        user_prompt = build_user_prompt(sanitized, context.now)
        logger.debug("Sending request to %s with prompt: %s", self.label, user_prompt)

        reply = await self._complete(self._api_key, system_prompt, user_prompt)
        self._cache.put(sanitized, reply)
        return CommandText(reply)

    async def _build_context(self) -> PromptContext:
        calendars: List[str] = list(DEFAULT_CALENDARS)
        if self._calendar_source is not None:
            try:
                fetched = await self._calendar_source()
            except Exception as exc:  # backend failures only degrade the prompt
                logger.warning("Failed to get available calendars: %s", exc)
            else:
                if fetched:
                    calendars = list(fetched)
        return PromptContext(now=self._clock(), calendars=calendars, default_calendar=self._default_calendar)

    def _messages(self, system_prompt: str, user_prompt: str) -> List[dict]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    @abstractmethod
    async def _complete(self, api_key: str, system_prompt: str, user_prompt: str) -> str:
        raise NotImplementedError


__all__ = [
    "MAX_INPUT_LENGTH",
    "DEFAULT_TIMEOUT_SECONDS",
    "TEMPERATURE",
    "MAX_TOKENS",
    "CalendarSource",
    "sanitize_user_input",
    "prepare_input",
    "extract_reply",
    "Synthesizer",
    "ProviderSynthesizer",
]
