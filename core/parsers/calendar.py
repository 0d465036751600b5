"""Grammar for ``calendar`` commands."""

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
from core.security import validate_date_format, validate_time_format

REPEAT_CHOICES = ("daily", "weekly", "monthly", "yearly")
_CREATE_FLAGS = ("contacts", "email", "location", "notes", "zoom", "repeat", "interval", "until", "count", "days")


def _repeat(value: str) -> str:
    normalized = value.strip().lower()
    if normalized == "annually":
        normalized = "yearly"
    if normalized not in REPEAT_CHOICES:
        raise argparse.ArgumentTypeError(f"invalid choice: '{value}' (choose from {', '.join(REPEAT_CHOICES)})")
    return normalized


def _date(value: str) -> str:
    if value.strip().lower() in {"today", "tomorrow"} or validate_date_format(value):
        return value
    raise argparse.ArgumentTypeError(f"invalid date '{value}' (use YYYY-MM-DD)")


def _time(value: str) -> str:
    if validate_time_format(value):
        return value
    raise argparse.ArgumentTypeError(f"invalid time '{value}' (use HH:MM)")


def _days(value: str) -> str:
    days = []
    for part in value.strip().strip('"').split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or int(part) > 6:
            raise argparse.ArgumentTypeError(f"invalid weekday '{part}' (use 0=Sun .. 6=Sat)")
        days.append(str(int(part)))
    if not days:
        raise argparse.ArgumentTypeError("expected at least one weekday")
    return ",".join(days)


def _configure_create(parser: GrammarParser) -> None:
    parser.add_argument("title")
    parser.add_argument("date", type=_date)
    parser.add_argument("start_time", type=_time)
    parser.add_argument("end_time", type=_time)
    parser.add_argument("calendar", nargs="?")
    parser.add_argument("--contacts")
    parser.add_argument("--email")
    parser.add_argument("--location")
    parser.add_argument("--notes")
    parser.add_argument("--zoom", action="store_true")
    parser.add_argument("--repeat", "--recurring", dest="repeat", type=_repeat)
    parser.add_argument("--interval", type=int)
    parser.add_argument("--until", type=_date)
    parser.add_argument("--count", type=int)
    parser.add_argument("--days", type=_days)


def _convert_create(namespace: argparse.Namespace) -> Conversion:
    positionals = [namespace.title, namespace.date, namespace.start_time, namespace.end_time]
    positionals.extend(optional_positionals(namespace.calendar))
    return positionals, collect_flags(namespace, _CREATE_FLAGS)


def _configure_delete(parser: GrammarParser) -> None:
    parser.add_argument("title")
    parser.add_argument("calendar", nargs="?")


def _convert_delete(namespace: argparse.Namespace) -> Conversion:
    return [namespace.title, *optional_positionals(namespace.calendar)], {}


def _configure_set_default(parser: GrammarParser) -> None:
    parser.add_argument("calendar")


def _convert_set_default(namespace: argparse.Namespace) -> Conversion:
    return [namespace.calendar], {}


GRAMMAR = GrammarCommand(
    name="calendar",
    aliases=("calendars",),
    actions=(
        action("list"),
        action("props", "properties"),
        action("create", "add", configure=_configure_create, convert=_convert_create),
        action("delete", "remove", configure=_configure_delete, convert=_convert_delete),
        action("set-default", configure=_configure_set_default, convert=_convert_set_default),
    ),
)


__all__ = ["GRAMMAR", "REPEAT_CHOICES"]
