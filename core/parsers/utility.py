"""Grammar for ``utility`` commands."""

from __future__ import annotations

from core.parsers.types import GrammarCommand, action

GRAMMAR = GrammarCommand(
    name="utility",
    aliases=("utils",),
    actions=(action("date"), action("time"), action("datetime")),
)


__all__ = ["GRAMMAR"]
