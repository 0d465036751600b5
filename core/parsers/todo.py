"""Grammar for ``todo`` commands."""

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


def _configure_create(parser: GrammarParser) -> None:
    parser.add_argument("title")
    parser.add_argument("lists", nargs="*")
    parser.add_argument("--remind")
    parser.add_argument("--notes")


def _convert_create(namespace: argparse.Namespace) -> Conversion:
    return [namespace.title, *namespace.lists], collect_flags(namespace, ("remind", "notes"))


def _configure_list(parser: GrammarParser) -> None:
    parser.add_argument("list_name", nargs="?")


def _convert_list(namespace: argparse.Namespace) -> Conversion:
    return optional_positionals(namespace.list_name), {}


def _configure_title(parser: GrammarParser) -> None:
    parser.add_argument("title")
    parser.add_argument("list_name", nargs="?")


def _convert_title(namespace: argparse.Namespace) -> Conversion:
    return [namespace.title, *optional_positionals(namespace.list_name)], {}


def _configure_set_list(parser: GrammarParser) -> None:
    parser.add_argument("list_name")


def _convert_set_list(namespace: argparse.Namespace) -> Conversion:
    return [namespace.list_name], {}


GRAMMAR = GrammarCommand(
    name="todo",
    aliases=("todos",),
    actions=(
        action("lists"),
        action("list", configure=_configure_list, convert=_convert_list),
        action("create", "add", configure=_configure_create, convert=_convert_create),
        action("complete", "done", configure=_configure_title, convert=_convert_title),
        action("delete", "remove", configure=_configure_title, convert=_convert_title),
        action("set-list", "set-default", configure=_configure_set_list, convert=_convert_set_list),
    ),
)


__all__ = ["GRAMMAR"]
