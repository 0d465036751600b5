"""Synthesizer used when no language model provider is configured."""

from __future__ import annotations

from core.command import TOOL_NAME, ParseOutcome, StructuredCommand
from core.command_parser import parse_command_text
from core.settings import ProviderSelection
from core.synthesis.base import Synthesizer, prepare_input


class TerminalSynthesizer(Synthesizer):
    """Treat the input as a structured command; never touches the network."""

    provider = ProviderSelection.NONE

    async def synthesize(self, text: str) -> ParseOutcome:
        sanitized = prepare_input(text)
        first_word = sanitized.split(maxsplit=1)[0].lower()
        if first_word != TOOL_NAME:
            sanitized = f"{TOOL_NAME} {sanitized}"
        return StructuredCommand(parse_command_text(sanitized))


__all__ = ["TerminalSynthesizer"]
