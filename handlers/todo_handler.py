"""Todo and reminder commands backed by the automation backend's lists."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from core.automation import AutomationBackend, AutomationError, TodoConfig
from core.command import Command
from core.errors import ValidationError
from core.handler_registry import BaseHandler, HandlerKind, HandlerResult
from core.security import validate_date_format, validate_time_format
from core.settings import load_settings, save_settings, update_setting
from handlers.common import backend_failure, unknown_action

_AVAILABLE = "create/add, list, lists, complete, delete, set-list"


def _validate_reminder(value: str) -> str:
    parts = value.strip().split()
    if len(parts) != 2 or not validate_date_format(parts[0]) or not validate_time_format(parts[1]):
        raise ValidationError(f"Invalid reminder time: {value}. Use \"YYYY-MM-DD HH:MM\"")
    return f"{parts[0]} {parts[1]}"


class TodoHandler(BaseHandler):
    kind = HandlerKind.TODO
    names = frozenset({"todo", "todos"})
    noun = "Todo"

    def __init__(self, backend: AutomationBackend, settings_path: Path) -> None:
        self._backend = backend
        self._settings_path = settings_path

    async def execute(self, command: Command) -> HandlerResult:
        action = command.action
        args = command.positionals[1:]
        try:
            if action in {"create", "add"}:
                return await self._create(command, args)
            if action in {None, "list"}:
                return await self._list(args[0] if args else None)
            if action == "lists":
                lists = await self._backend.list_todo_lists()
                return HandlerResult(messages=["Available lists:"] + [f"  - {name}" for name in lists], data={"lists": lists})
            if action in {"complete", "done"}:
                return await self._complete(args)
            if action in {"delete", "remove"}:
                return await self._delete(args)
        except AutomationError as exc:
            raise backend_failure(f"{action} {self.noun.lower()}", exc) from exc
        if action in {"set-list", "set-default"}:
            return self._set_default_list(args)
        return HandlerResult(messages=[unknown_action(self.noun.lower(), _AVAILABLE)])

    async def _create(self, command: Command, args: List[str]) -> HandlerResult:
        if not args or not args[0].strip():
            return HandlerResult(messages=[f"Usage: {self.noun.lower()} create <title> [list...] [--remind \"YYYY-MM-DD HH:MM\"] [--notes <text>]"])
        title = args[0].strip()
        lists = [name for name in args[1:] if name.strip()]
        if not lists:
            default_list = load_settings(self._settings_path).todo.default_list
            lists = [default_list] if default_list else []

        remind = command.flag("remind")
        config = TodoConfig(
            title=title,
            lists=lists,
            reminder_time=_validate_reminder(remind) if remind else None,
            notes=command.flag("notes"),
        )
        record = await self._backend.create_todo(config)
        lines = [f"{self.noun} '{title}' added to {', '.join(lists) or 'default list'}"]
        if config.reminder_time:
            lines.append(f"Reminder set for {config.reminder_time}")
        return HandlerResult(messages=lines, data={"todo": record})

    async def _list(self, list_name: Optional[str]) -> HandlerResult:
        todos = await self._backend.list_todos(list_name)
        if not todos:
            return HandlerResult(messages=[f"No {self.noun.lower()}s found"], data={"todos": []})
        return HandlerResult(messages=[_format_todo(todo) for todo in todos], data={"todos": todos})

    async def _complete(self, args: List[str]) -> HandlerResult:
        if not args:
            return HandlerResult(messages=[f"Usage: {self.noun.lower()} complete <title> [list]"])
        done = await self._backend.complete_todo(args[0], args[1] if len(args) > 1 else None)
        if not done:
            return HandlerResult(messages=[f"No open {self.noun.lower()} named '{args[0]}'"])
        return HandlerResult(messages=[f"{self.noun} '{args[0]}' marked as completed"])

    async def _delete(self, args: List[str]) -> HandlerResult:
        if not args:
            return HandlerResult(messages=[f"Usage: {self.noun.lower()} delete <title> [list]"])
        removed = await self._backend.delete_todo(args[0], args[1] if len(args) > 1 else None)
        if not removed:
            return HandlerResult(messages=[f"No {self.noun.lower()} named '{args[0]}'"])
        return HandlerResult(messages=[f"{self.noun} '{args[0]}' deleted"])

    def _set_default_list(self, args: List[str]) -> HandlerResult:
        if not args:
            return HandlerResult(messages=[f"Usage: {self.noun.lower()} set-list <list>"])
        settings = update_setting(load_settings(self._settings_path), "todo.default_list", args[0])
        save_settings(settings, self._settings_path)
        return HandlerResult(messages=[f"Default list set to {args[0]}"])


class ReminderHandler(TodoHandler):
    """Same lists as todos, addressed as ``reminder``."""

    kind = HandlerKind.REMINDER
    names = frozenset({"reminder", "reminders"})
    noun = "Reminder"


def _format_todo(todo: Dict[str, Any]) -> str:
    marker = "x" if todo.get("completed") else " "
    line = f"[{marker}] {todo.get('title', '')}"
    lists = todo.get("lists") or []
    if lists:
        line += f" ({', '.join(lists)})"
    if todo.get("reminder_time"):
        line += f" - remind {todo['reminder_time']}"
    return line


__all__ = ["TodoHandler", "ReminderHandler"]
