"""Grammar for ``config`` commands."""

from __future__ import annotations

import argparse

from core.parsers.types import Conversion, GrammarCommand, GrammarParser, action, optional_positionals


def _configure_show(parser: GrammarParser) -> None:
    parser.add_argument("key", nargs="?")


def _convert_show(namespace: argparse.Namespace) -> Conversion:
    return optional_positionals(namespace.key), {}


def _configure_get(parser: GrammarParser) -> None:
    parser.add_argument("key")


def _convert_get(namespace: argparse.Namespace) -> Conversion:
    return [namespace.key], {}


def _configure_set(parser: GrammarParser) -> None:
    parser.add_argument("key")
    parser.add_argument("value")


def _convert_set(namespace: argparse.Namespace) -> Conversion:
    return [namespace.key, namespace.value], {}


GRAMMAR = GrammarCommand(
    name="config",
    aliases=(),
    actions=(
        action("show", "list", configure=_configure_show, convert=_convert_show),
        action("get", configure=_configure_get, convert=_convert_get),
        action("set", configure=_configure_set, convert=_convert_set),
    ),
)


__all__ = ["GRAMMAR"]
