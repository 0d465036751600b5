"""Grammar for contact group commands."""

from __future__ import annotations

import argparse

from core.parsers.types import Conversion, GrammarCommand, GrammarParser, action


def _configure_create(parser: GrammarParser) -> None:
    parser.add_argument("group")
    parser.add_argument("emails", nargs="+")


def _convert_create(namespace: argparse.Namespace) -> Conversion:
    return [namespace.group, *namespace.emails], {}


def _configure_show(parser: GrammarParser) -> None:
    parser.add_argument("group")


def _convert_show(namespace: argparse.Namespace) -> Conversion:
    return [namespace.group], {}


GRAMMAR = GrammarCommand(
    name="contacts",
    aliases=("contact",),
    actions=(
        action("create", configure=_configure_create, convert=_convert_create),
        action("list"),
        action("show", configure=_configure_show, convert=_convert_show),
    ),
)


__all__ = ["GRAMMAR"]
