"""Normalized command representation handed from the parsers to the handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from core.errors import EmptyCommandError
from core.tokenizer import FLAG_MARKER, join_with_quoting

TOOL_NAME = "ducktape"


@dataclass
class Command:
    """A command name plus ordered positionals and optionally-valued flags.

    ``flags`` maps the flag name (without ``--``) to its value; a flag given
    without a value is stored as ``None`` rather than left out.
    """

    name: str
    positionals: List[str] = field(default_factory=list)
    flags: Dict[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        name = (self.name or "").strip().lower()
        if not name:
            raise EmptyCommandError("Command name must not be empty")
        self.name = name
        self.positionals = list(self.positionals)
        self.flags = {_bare_flag(key): value for key, value in self.flags.items()}

    @property
    def action(self) -> Optional[str]:
        """First positional lower-cased, which most handlers treat as the sub-command."""

        if not self.positionals:
            return None
        return self.positionals[0].lower()

    def has_flag(self, name: str) -> bool:
        return _bare_flag(name) in self.flags

    def flag(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self.flags.get(_bare_flag(name))
        return default if value is None else value

    def to_tokens(self, *, include_tool_name: bool = True) -> List[str]:
        tokens: List[str] = [TOOL_NAME] if include_tool_name else []
        tokens.append(self.name)
        tokens.extend(self.positionals)
        for key, value in self.flags.items():
            tokens.append(f"{FLAG_MARKER}{key}")
            if value is not None:
                tokens.append(value)
        return tokens

    def to_text(self, *, include_tool_name: bool = True) -> str:
        return join_with_quoting(self.to_tokens(include_tool_name=include_tool_name))


def _bare_flag(name: str) -> str:
    stripped = name.strip()
    while stripped.startswith("-"):
        stripped = stripped[1:]
    return stripped


# --- Parse outcomes ----------------------------------------------------------
@dataclass(frozen=True)
class CommandText:
    """Command text that still has to go through the structured parser."""

    text: str


@dataclass(frozen=True)
class StructuredCommand:
    """A command that is ready for dispatch."""

    command: Command


ParseOutcome = Union[CommandText, StructuredCommand]


__all__ = ["TOOL_NAME", "Command", "CommandText", "StructuredCommand", "ParseOutcome"]
