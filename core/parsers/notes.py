"""Grammar for ``note`` commands.

Titles and search queries may be typed as several bare words; they are joined
with single spaces.
"""

from __future__ import annotations

import argparse

from core.parsers.types import (
    Conversion,
    GrammarCommand,
    GrammarParser,
    action,
    collect_flags,
    optional_positionals,
)


def _configure_list(parser: GrammarParser) -> None:
    parser.add_argument("folder", nargs="?")


def _convert_list(namespace: argparse.Namespace) -> Conversion:
    return optional_positionals(namespace.folder), {}


def _configure_create(parser: GrammarParser) -> None:
    parser.add_argument("title", nargs="+")
    parser.add_argument("--content")
    parser.add_argument("--folder")


def _convert_create(namespace: argparse.Namespace) -> Conversion:
    return [" ".join(namespace.title)], collect_flags(namespace, ("content", "folder"))


def _configure_words(parser: GrammarParser) -> None:
    parser.add_argument("words", nargs="+")
    parser.add_argument("--folder")


def _convert_words(namespace: argparse.Namespace) -> Conversion:
    return [" ".join(namespace.words)], collect_flags(namespace, ("folder",))


GRAMMAR = GrammarCommand(
    name="note",
    aliases=("notes",),
    actions=(
        action("list", configure=_configure_list, convert=_convert_list),
        action("folders"),
        action("create", "add", "new", configure=_configure_create, convert=_convert_create),
        action("search", "find", configure=_configure_words, convert=_convert_words),
        action("delete", "remove", configure=_configure_words, convert=_convert_words),
    ),
)


__all__ = ["GRAMMAR"]
