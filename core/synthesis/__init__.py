"""Natural-language synthesizers, one per provider selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.response_cache import ResponseCache
from core.settings import ProviderSelection
from core.synthesis import deepseek, grok
from core.synthesis.base import (
    DEFAULT_TIMEOUT_SECONDS,
    MAX_INPUT_LENGTH,
    CalendarSource,
    ProviderSynthesizer,
    Synthesizer,
    prepare_input,
    sanitize_user_input,
)
from core.synthesis.deepseek import DeepSeekSynthesizer
from core.synthesis.grok import GrokSynthesizer
from core.synthesis.terminal import TerminalSynthesizer


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys and endpoints handed over by the entry point."""

    xai_api_key: Optional[str] = None
    xai_api_base: str = grok.DEFAULT_API_BASE
    deepseek_api_key: Optional[str] = None
    deepseek_api_base: str = deepseek.DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT_SECONDS


def create_synthesizer(
    selection: ProviderSelection,
    *,
    cache: ResponseCache,
    credentials: ProviderCredentials,
    calendar_source: Optional[CalendarSource] = None,
    default_calendar: Optional[str] = None,
) -> Synthesizer:
    """Construct the synthesizer for ``selection``."""

    if selection is ProviderSelection.GROK:
        return GrokSynthesizer(
            cache,
            api_key=credentials.xai_api_key,
            api_base=credentials.xai_api_base,
            calendar_source=calendar_source,
            default_calendar=default_calendar,
            timeout=credentials.timeout,
        )
    if selection is ProviderSelection.DEEPSEEK:
        return DeepSeekSynthesizer(
            cache,
            api_key=credentials.deepseek_api_key,
            api_base=credentials.deepseek_api_base,
            calendar_source=calendar_source,
            default_calendar=default_calendar,
            timeout=credentials.timeout,
        )
    return TerminalSynthesizer()


__all__ = [
    "MAX_INPUT_LENGTH",
    "ProviderCredentials",
    "ProviderSynthesizer",
    "Synthesizer",
    "TerminalSynthesizer",
    "GrokSynthesizer",
    "DeepSeekSynthesizer",
    "create_synthesizer",
    "prepare_input",
    "sanitize_user_input",
]
