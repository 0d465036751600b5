"""Route validated commands to the capability handler that owns their name.

The handler set is a closed, ordered tuple fixed at construction. Dispatch is
a linear scan in registration order; the first handler whose
``can_handle(name)`` is true executes the command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Protocol, Tuple

from core.command import Command

logger = logging.getLogger(__name__)

UNRECOGNIZED_MESSAGE = "Unrecognized command. Type 'help' for a list of available commands."


class HandlerKind(str, Enum):
    CALENDAR = "calendar"
    TODO = "todo"
    NOTES = "notes"
    CONFIG = "config"
    UTILITY = "utility"
    CONTACTS = "contacts"
    VERSION = "version"
    HELP = "help"
    EXIT = "exit"
    REMINDER = "reminder"


@dataclass
class HandlerResult:
    """Lines a handler wants shown to the user plus structured data for the API."""

    messages: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    exit_requested: bool = False


class Handler(Protocol):
    kind: HandlerKind
    names: FrozenSet[str]

    def can_handle(self, name: str) -> bool:
        ...

    async def execute(self, command: Command) -> HandlerResult:
        ...


class BaseHandler:
    """Claims a fixed set of command names."""

    kind: HandlerKind
    names: FrozenSet[str] = frozenset()

    def can_handle(self, name: str) -> bool:
        return name.lower() in self.names

    async def execute(self, command: Command) -> HandlerResult:
        raise NotImplementedError


@dataclass
class DispatchResult:
    handled: bool
    handler: Optional[HandlerKind]
    messages: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    exit_requested: bool = False


class HandlerRegistry:
    """Ordered, immutable collection of handlers."""

    def __init__(self, handlers: Iterable[Handler]) -> None:
        ordered: Tuple[Handler, ...] = tuple(handlers)
        claimed: Dict[str, HandlerKind] = {}
        for handler in ordered:
            for name in handler.names:
                key = name.lower()
                if key in claimed:
                    raise ValueError(f"Command name '{key}' is already claimed by '{claimed[key].value}'")
                claimed[key] = handler.kind
        self._handlers = ordered
        self._claimed = claimed

    @property
    def handlers(self) -> Tuple[Handler, ...]:
        return self._handlers

    def command_names(self) -> List[str]:
        return list(self._claimed)

    def resolve(self, name: str) -> Optional[Handler]:
        for handler in self._handlers:
            if handler.can_handle(name):
                return handler
        return None

    async def dispatch(self, command: Command) -> DispatchResult:
        """Execute ``command`` with the first matching handler.

        An unknown name is not an error: the result carries the
        "unrecognized command" message and ``handled`` is false. Handler
        exceptions propagate to the caller.
        """

        handler = self.resolve(command.name)
        if handler is None:
            logger.warning("Unrecognized command: %s", command.name)
            return DispatchResult(handled=False, handler=None, messages=[UNRECOGNIZED_MESSAGE])

        logger.debug("Dispatching '%s' to %s handler", command.name, handler.kind.value)
        result = await handler.execute(command)
        return DispatchResult(
            handled=True,
            handler=handler.kind,
            messages=list(result.messages),
            data=dict(result.data),
            exit_requested=result.exit_requested,
        )


__all__ = [
    "UNRECOGNIZED_MESSAGE",
    "HandlerKind",
    "HandlerResult",
    "Handler",
    "BaseHandler",
    "DispatchResult",
    "HandlerRegistry",
]
