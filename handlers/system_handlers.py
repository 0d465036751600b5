"""Handlers that need no backend: utility, version, help, exit."""

from __future__ import annotations

from datetime import datetime

from core.command import Command
from core.handler_registry import BaseHandler, HandlerKind, HandlerResult
from handlers.common import Clock, unknown_action

VERSION = "0.1.0"

HELP_TEXT = """DuckTape - A tool for interacting with your calendar, notes, and reminders

USAGE:
  ducktape [COMMAND] [SUBCOMMAND] [OPTIONS]

COMMANDS:
  calendar  Manage calendar events
  todo      Manage todo items
  reminder  Manage reminders
  notes     Manage notes
  config    Manage configuration
  contacts  Manage contact groups
  utils     Utility commands
  help      Show this help message
  version   Show version information
  exit      Exit the application

EXAMPLES:
  ducktape calendar create "Meeting with Team" 2025-04-15 10:00 11:00
  ducktape todo add "Buy groceries" --remind "2025-04-15 18:00"
  ducktape notes create "Meeting Notes" --content "Points discussed in the meeting"
  ducktape config set calendar.default Personal"""


class UtilityHandler(BaseHandler):
    kind = HandlerKind.UTILITY
    names = frozenset({"utility", "utils"})

    def __init__(self, clock: Clock = datetime.now) -> None:
        self._clock = clock

    async def execute(self, command: Command) -> HandlerResult:
        now = self._clock()
        formats = {"date": "%Y-%m-%d", "time": "%H:%M:%S", "datetime": "%Y-%m-%d %H:%M:%S"}
        pattern = formats.get(command.action or "")
        if pattern is None:
            return HandlerResult(messages=[unknown_action("utility", "date, time, datetime")])
        value = now.strftime(pattern)
        return HandlerResult(messages=[value], data={command.action: value})


class VersionHandler(BaseHandler):
    kind = HandlerKind.VERSION
    names = frozenset({"version", "--version", "-v"})

    async def execute(self, command: Command) -> HandlerResult:
        return HandlerResult(messages=[f"ducktape v{VERSION}"], data={"version": VERSION})


class HelpHandler(BaseHandler):
    kind = HandlerKind.HELP
    names = frozenset({"help", "--help", "-h"})

    async def execute(self, command: Command) -> HandlerResult:
        return HandlerResult(messages=HELP_TEXT.splitlines())


class ExitHandler(BaseHandler):
    kind = HandlerKind.EXIT
    names = frozenset({"exit", "quit"})

    async def execute(self, command: Command) -> HandlerResult:
        return HandlerResult(messages=["Goodbye!"], exit_requested=True)


__all__ = ["VERSION", "HELP_TEXT", "UtilityHandler", "VersionHandler", "HelpHandler", "ExitHandler"]
