"""Grammar-validated parsers, one module per command family."""

from __future__ import annotations

from typing import Dict, List, Sequence

from core.command import TOOL_NAME, Command
from core.errors import EmptyCommandError, GrammarError
from core.tokenizer import strip_wrapping_quotes

from . import calendar, contacts, notes, settings, todo, utility
from .types import GrammarCommand

GRAMMARS: tuple[GrammarCommand, ...] = (
    calendar.GRAMMAR,
    todo.GRAMMAR,
    notes.GRAMMAR,
    settings.GRAMMAR,
    contacts.GRAMMAR,
    utility.GRAMMAR,
)

_BY_NAME: Dict[str, GrammarCommand] = {name: grammar for grammar in GRAMMARS for name in grammar.names()}


def parse_with_grammar(tokens: Sequence[str]) -> Command:
    """Map ``tokens`` onto the closed command tree.

    Unknown commands, unknown actions, unknown flags and missing required
    fields raise ``GrammarError``; the resulting command always uses the
    canonical command and action names.
    """

    remaining: List[str] = list(tokens)
    if remaining and remaining[0].lower() == TOOL_NAME:
        remaining = remaining[1:]
    if not remaining:
        raise EmptyCommandError()

    grammar = _BY_NAME.get(remaining[0].lower())
    if grammar is None:
        raise GrammarError(f"Unknown command '{remaining[0]}'")
    if len(remaining) < 2:
        raise GrammarError(f"Missing action for '{grammar.name}'")

    selected = grammar.find_action(remaining[1].lower())
    if selected is None:
        raise GrammarError(f"Unknown {grammar.name} action '{remaining[1]}'")

    positionals, flags = selected.parse(grammar.name, remaining[2:])
    return Command(
        name=grammar.name,
        positionals=[selected.name, *(strip_wrapping_quotes(value) for value in positionals)],
        flags={key: strip_wrapping_quotes(value) if value is not None else None for key, value in flags.items()},
    )


__all__ = ["GRAMMARS", "parse_with_grammar", "calendar", "contacts", "notes", "settings", "todo", "utility"]
