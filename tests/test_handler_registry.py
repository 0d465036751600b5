from pathlib import Path

import pytest

from core.automation import JsonAutomationBackend
from core.command import Command
from core.handler_registry import (
    UNRECOGNIZED_MESSAGE,
    BaseHandler,
    HandlerKind,
    HandlerRegistry,
    HandlerResult,
)
from handlers import build_handlers, load_all_handlers


class EchoHandler(BaseHandler):
    def __init__(self, kind, names):
        self.kind = kind
        self.names = frozenset(names)
        self.calls = []

    async def execute(self, command):
        self.calls.append(command)
        return HandlerResult(messages=[f"{self.kind.value}:{command.name}"])


@pytest.mark.asyncio
async def test_unknown_command_is_not_an_error():
    registry = HandlerRegistry([EchoHandler(HandlerKind.HELP, ["help"])])
    result = await registry.dispatch(Command(name="frobnicate"))
    assert result.handled is False
    assert result.handler is None
    assert result.messages == [UNRECOGNIZED_MESSAGE]


@pytest.mark.asyncio
async def test_dispatch_runs_matching_handler_once():
    help_handler = EchoHandler(HandlerKind.HELP, ["help"])
    exit_handler = EchoHandler(HandlerKind.EXIT, ["exit", "quit"])
    registry = HandlerRegistry([help_handler, exit_handler])

    result = await registry.dispatch(Command(name="QUIT"))

    assert result.handled is True
    assert result.handler is HandlerKind.EXIT
    assert result.messages == ["exit:quit"]
    assert help_handler.calls == []
    assert len(exit_handler.calls) == 1


def test_duplicate_names_are_rejected():
    with pytest.raises(ValueError) as excinfo:
        HandlerRegistry(
            [
                EchoHandler(HandlerKind.TODO, ["todo", "reminder"]),
                EchoHandler(HandlerKind.REMINDER, ["reminder"]),
            ]
        )
    assert "reminder" in str(excinfo.value)


def test_builtin_handlers_keep_fixed_order(tmp_path: Path):
    handlers = build_handlers(JsonAutomationBackend(tmp_path), settings_path=tmp_path / "ducktape.yml")
    assert [handler.kind for handler in handlers] == [
        HandlerKind.CALENDAR,
        HandlerKind.TODO,
        HandlerKind.NOTES,
        HandlerKind.CONFIG,
        HandlerKind.UTILITY,
        HandlerKind.CONTACTS,
        HandlerKind.VERSION,
        HandlerKind.HELP,
        HandlerKind.EXIT,
        HandlerKind.REMINDER,
    ]


def test_builtin_registry_resolves_aliases(tmp_path: Path):
    registry = load_all_handlers(JsonAutomationBackend(tmp_path), settings_path=tmp_path / "ducktape.yml")
    assert registry.resolve("calendars").kind is HandlerKind.CALENDAR
    assert registry.resolve("utils").kind is HandlerKind.UTILITY
    assert registry.resolve("reminders").kind is HandlerKind.REMINDER
    assert registry.resolve("frobnicate") is None
    assert "notes" in registry.command_names()
