"""Run one line of user input through the interpretation pipeline.

tokenize/parse or synthesize -> enhance -> validate -> dispatch. The
interpreter owns the response cache, reads the provider selection afresh on
every call, and turns pipeline failures into a result the front ends can show
without stopping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.command import TOOL_NAME, Command, CommandText, StructuredCommand
from core.command_parser import parse_command_text
from core.enhancement import enhance, normalize_command_text
from core.errors import AssistantError, MalformedResponseError
from core.handler_registry import HandlerKind, HandlerRegistry
from core.response_cache import ResponseCache
from core.security import validate_command_text
from core.settings import ProviderSelection
from core.synthesis import Synthesizer, prepare_input
from core.turn_logger import TurnLogger, TurnRecord

logger = logging.getLogger(__name__)

RETRY_HINT = "Type 'help' for a list of available commands or try rephrasing."

SynthesizerFactory = Callable[[ProviderSelection, ResponseCache], Synthesizer]
ProviderReader = Callable[[], ProviderSelection]

_EXIT_WORDS = {"exit", "quit", f"{TOOL_NAME} exit", f"{TOOL_NAME} quit"}


def _is_exit(text: str) -> bool:
    return text.strip().lower() in _EXIT_WORDS


@dataclass
class InterpretationResult:
    """Outcome of a single call, successful or not."""

    user_text: str
    provider: ProviderSelection
    status: str
    command: Optional[Command] = None
    command_text: Optional[str] = None
    handler: Optional[HandlerKind] = None
    messages: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[AssistantError] = None
    exit_requested: bool = False
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class Interpreter:
    """Coordinates synthesizer, enhancement, validation and dispatch."""

    def __init__(
        self,
        registry: HandlerRegistry,
        *,
        synthesizer_factory: SynthesizerFactory,
        provider_reader: ProviderReader,
        cache: Optional[ResponseCache] = None,
        turn_logger: Optional[TurnLogger] = None,
    ) -> None:
        self._registry = registry
        self._synthesizer_factory = synthesizer_factory
        self._provider_reader = provider_reader
        self._cache = cache if cache is not None else ResponseCache()
        self._turn_logger = turn_logger

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    def current_provider(self) -> ProviderSelection:
        return self._provider_reader()

    async def interpret(self, text: str) -> Tuple[Command, str]:
        """Return the validated command for ``text`` and the text it was parsed from.

        Raises ``AssistantError`` subclasses; nothing is dispatched here.
        """

        return await self._interpret(text, self._select_provider(text))

    def _select_provider(self, text: str) -> ProviderSelection:
        if _is_exit(text):
            return ProviderSelection.NONE
        return self._provider_reader()

    async def _interpret(self, text: str, selection: ProviderSelection) -> Tuple[Command, str]:
        if _is_exit(text):
            command = Command(name="exit")
            return command, command.to_text()

        synthesizer = self._synthesizer_factory(selection, self._cache)
        outcome = await synthesizer.synthesize(text)

        if isinstance(outcome, StructuredCommand):
            command_text = outcome.command.to_text()
            validate_command_text(command_text)
            return outcome.command, command_text

        if not isinstance(outcome, CommandText):
            raise MalformedResponseError(getattr(synthesizer, "label", selection.value))
        command_text = normalize_command_text(outcome.text)
        if not command_text:
            raise MalformedResponseError(getattr(synthesizer, "label", selection.value))
        command_text = enhance(command_text, prepare_input(text))
        logger.debug("Enhanced command: %s", command_text)
        validate_command_text(command_text)
        return parse_command_text(command_text), command_text

    async def handle(self, text: str) -> InterpretationResult:
        """Interpret and dispatch ``text``; pipeline errors end up in the result."""

        started = perf_counter()
        selection = ProviderSelection.NONE
        try:
            selection = self._select_provider(text)
            command, command_text = await self._interpret(text, selection)
            dispatch = await self._registry.dispatch(command)
        except AssistantError as exc:
            logger.info("Failed to process %r: %s", text, exc)
            result = InterpretationResult(
                user_text=text,
                provider=selection,
                status="error",
                messages=[str(exc), RETRY_HINT],
                error=exc,
            )
        else:
            result = InterpretationResult(
                user_text=text,
                provider=selection,
                status="dispatched" if dispatch.handled else "unrecognized",
                command=command,
                command_text=command_text,
                handler=dispatch.handler,
                messages=dispatch.messages,
                data=dispatch.data,
                exit_requested=dispatch.exit_requested,
            )
        result.latency_ms = int((perf_counter() - started) * 1000)
        self._log_turn(result)
        return result

    def _log_turn(self, result: InterpretationResult) -> None:
        if not self._turn_logger or not self._turn_logger.enabled:
            return
        record = TurnRecord.new(
            user_text=result.user_text,
            provider=result.provider.value,
            status=result.status,
            command_text=result.command_text,
            command_name=result.command.name if result.command else None,
            handler=result.handler.value if result.handler else None,
            error=result.error,
            latency_ms=result.latency_ms,
        )
        try:
            self._turn_logger.log_turn(record)
        except OSError as exc:
            logger.warning("Failed to write turn log: %s", exc)


__all__ = ["RETRY_HINT", "InterpretationResult", "Interpreter", "SynthesizerFactory", "ProviderReader"]
