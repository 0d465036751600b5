"""Shared building blocks for the grammar-validated command parsers."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from core.errors import GrammarError

Flags = Dict[str, Optional[str]]
Conversion = Tuple[List[str], Flags]


class GrammarParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises ``GrammarError`` instead of exiting."""

    def __init__(self, prog: str) -> None:
        super().__init__(prog=prog, add_help=False, allow_abbrev=False)

    def error(self, message: str):  # type: ignore[override]
        raise GrammarError(f"{self.prog}: {message}")

    def exit(self, status: int = 0, message: Optional[str] = None):  # type: ignore[override]
        raise GrammarError(message or f"{self.prog}: invalid arguments")


@dataclass(frozen=True)
class GrammarAction:
    """One sub-command: its names, argument layout, and conversion to flags."""

    name: str
    aliases: Tuple[str, ...]
    configure: Callable[[GrammarParser], None]
    convert: Callable[[argparse.Namespace], Conversion]

    def matches(self, token: str) -> bool:
        return token == self.name or token in self.aliases

    def parse(self, command: str, args: Sequence[str]) -> Conversion:
        parser = GrammarParser(prog=f"{command} {self.name}")
        self.configure(parser)
        namespace = parser.parse_intermixed_args(list(args))
        return self.convert(namespace)


@dataclass(frozen=True)
class GrammarCommand:
    name: str
    aliases: Tuple[str, ...]
    actions: Tuple[GrammarAction, ...]

    def names(self) -> Tuple[str, ...]:
        return (self.name,) + self.aliases

    def find_action(self, token: str) -> Optional[GrammarAction]:
        for action in self.actions:
            if action.matches(token):
                return action
        return None


# --- Conversion helpers ------------------------------------------------------
def no_arguments(parser: GrammarParser) -> None:
    return None


def empty(namespace: argparse.Namespace) -> Conversion:
    return [], {}


def optional_positionals(*values: Optional[str]) -> List[str]:
    """Keep given values in order, stopping at the first missing optional."""

    result: List[str] = []
    for value in values:
        if value is None:
            break
        result.append(value)
    return result


def collect_flags(namespace: argparse.Namespace, names: Iterable[str]) -> Flags:
    flags: Flags = {}
    for name in names:
        value = getattr(namespace, name.replace("-", "_"), None)
        if value is None or value is False:
            continue
        if value is True:
            flags[name] = None
        elif isinstance(value, (list, tuple)):
            flags[name] = ",".join(str(item) for item in value)
        else:
            flags[name] = str(value)
    return flags


def action(
    name: str,
    *aliases: str,
    configure: Callable[[GrammarParser], None] = no_arguments,
    convert: Callable[[argparse.Namespace], Conversion] = empty,
) -> GrammarAction:
    return GrammarAction(name=name, aliases=tuple(aliases), configure=configure, convert=convert)


__all__ = [
    "Flags",
    "Conversion",
    "GrammarParser",
    "GrammarAction",
    "GrammarCommand",
    "no_arguments",
    "empty",
    "optional_positionals",
    "collect_flags",
    "action",
]
