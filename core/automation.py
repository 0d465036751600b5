"""Boundary between handlers and the automation backend.

Handlers only ever call the async functions of ``AutomationBackend`` with
fully validated configuration objects. ``JsonAutomationBackend`` is a
file-backed implementation used by the CLI and the web API; an OS-specific
backend implements the same protocol.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

from core.json_storage import JsonDocument, read_json

logger = logging.getLogger(__name__)

DEFAULT_CALENDARS = ("Calendar", "Work", "Home", "KIDS")
DEFAULT_TODO_LISTS = ("Reminders", "Work", "Personal", "Urgent")
DEFAULT_NOTE_FOLDER = "Notes"


class AutomationError(RuntimeError):
    """Raised by a backend when it cannot carry out a request."""


@dataclass
class RecurrenceConfig:
    frequency: str
    interval: int = 1
    until: Optional[str] = None
    count: Optional[int] = None
    days_of_week: List[int] = field(default_factory=list)


@dataclass
class EventConfig:
    title: str
    start_date: str
    start_time: str
    end_time: Optional[str] = None
    calendars: List[str] = field(default_factory=list)
    location: Optional[str] = None
    description: Optional[str] = None
    emails: List[str] = field(default_factory=list)
    reminder_minutes: Optional[int] = None
    recurrence: Optional[RecurrenceConfig] = None
    create_meeting_link: bool = False


@dataclass
class TodoConfig:
    title: str
    lists: List[str] = field(default_factory=list)
    reminder_time: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class NoteConfig:
    title: str
    content: str = ""
    folder: Optional[str] = None


class AutomationBackend(Protocol):
    async def list_calendars(self) -> List[str]: ...

    async def create_event(self, config: EventConfig) -> Dict[str, Any]: ...

    async def delete_event(self, title: str, calendar: Optional[str] = None) -> int: ...

    async def lookup_contact(self, name: str) -> List[str]: ...

    async def list_todo_lists(self) -> List[str]: ...

    async def create_todo(self, config: TodoConfig) -> Dict[str, Any]: ...

    async def list_todos(self, list_name: Optional[str] = None) -> List[Dict[str, Any]]: ...

    async def complete_todo(self, title: str, list_name: Optional[str] = None) -> bool: ...

    async def delete_todo(self, title: str, list_name: Optional[str] = None) -> bool: ...

    async def create_note(self, config: NoteConfig) -> Dict[str, Any]: ...

    async def list_notes(self, folder: Optional[str] = None) -> List[Dict[str, Any]]: ...

    async def list_note_folders(self) -> List[str]: ...

    async def search_notes(self, query: str, folder: Optional[str] = None) -> List[Dict[str, Any]]: ...

    async def delete_note(self, title: str, folder: Optional[str] = None) -> bool: ...


def _utc_timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class JsonAutomationBackend:
    """Automation backend that keeps events, todos and notes in JSON files.

    ``calendars.json`` and ``contacts.json`` in ``root`` are read on every
    call when present, so edits made outside the process show up immediately.
    """

    def __init__(
        self,
        root: Path,
        *,
        calendars: Sequence[str] = DEFAULT_CALENDARS,
        todo_lists: Sequence[str] = DEFAULT_TODO_LISTS,
    ) -> None:
        self._root = Path(root)
        self._default_calendars = list(calendars)
        self._default_todo_lists = list(todo_lists)
        self._events = JsonDocument(self._root / "events.json", list)
        self._todos = JsonDocument(self._root / "todos.json", list)
        self._notes = JsonDocument(self._root / "notes.json", list)

    # --- Calendar ------------------------------------------------------------
    async def list_calendars(self) -> List[str]:
        configured = read_json(self._root / "calendars.json", None)
        if isinstance(configured, list) and configured:
            return [str(name) for name in configured]
        return list(self._default_calendars)

    async def create_event(self, config: EventConfig) -> Dict[str, Any]:
        available = await self.list_calendars()
        unknown = [name for name in config.calendars if name not in available]
        if unknown:
            raise AutomationError(f"Calendar not found: {', '.join(unknown)}")
        record = {"id": uuid.uuid4().hex, "created_at": _utc_timestamp(), **asdict(config)}

        def _append(events: List[Dict[str, Any]]) -> Dict[str, Any]:
            events.append(record)
            return record

        self._events.update(_append)
        logger.info("Created event '%s' in %s", config.title, ", ".join(config.calendars))
        return record

    async def delete_event(self, title: str, calendar: Optional[str] = None) -> int:
        def _remove(events: List[Dict[str, Any]]) -> int:
            kept = [
                event
                for event in events
                if not (
                    event.get("title", "").lower() == title.lower()
                    and (calendar is None or calendar in event.get("calendars", []))
                )
            ]
            removed = len(events) - len(kept)
            events[:] = kept
            return removed

        return self._events.update(_remove)

    def list_events(self) -> List[Dict[str, Any]]:
        return list(self._events.load())

    async def lookup_contact(self, name: str) -> List[str]:
        book = read_json(self._root / "contacts.json", {})
        if not isinstance(book, dict):
            return []
        wanted = name.strip().lower()
        for contact, emails in book.items():
            if contact.lower() == wanted:
                return [str(email) for email in (emails if isinstance(emails, list) else [emails])]
        return []

    # --- Todos ---------------------------------------------------------------
    async def list_todo_lists(self) -> List[str]:
        names = list(self._default_todo_lists)
        for todo in self._todos.load():
            for list_name in todo.get("lists", []):
                if list_name not in names:
                    names.append(list_name)
        return names

    async def create_todo(self, config: TodoConfig) -> Dict[str, Any]:
        record = {"id": uuid.uuid4().hex, "created_at": _utc_timestamp(), "completed": False, **asdict(config)}

        def _append(todos: List[Dict[str, Any]]) -> Dict[str, Any]:
            todos.append(record)
            return record

        return self._todos.update(_append)

    async def list_todos(self, list_name: Optional[str] = None) -> List[Dict[str, Any]]:
        todos = self._todos.load()
        if list_name is None:
            return todos
        return [todo for todo in todos if list_name in todo.get("lists", [])]

    def _todo_matches(self, todo: Dict[str, Any], title: str, list_name: Optional[str]) -> bool:
        if todo.get("title", "").lower() != title.lower():
            return False
        return list_name is None or list_name in todo.get("lists", [])

    async def complete_todo(self, title: str, list_name: Optional[str] = None) -> bool:
        def _complete(todos: List[Dict[str, Any]]) -> bool:
            found = False
            for todo in todos:
                if self._todo_matches(todo, title, list_name) and not todo.get("completed"):
                    todo["completed"] = True
                    todo["completed_at"] = _utc_timestamp()
                    found = True
            return found

        return self._todos.update(_complete)

    async def delete_todo(self, title: str, list_name: Optional[str] = None) -> bool:
        def _remove(todos: List[Dict[str, Any]]) -> bool:
            kept = [todo for todo in todos if not self._todo_matches(todo, title, list_name)]
            removed = len(kept) != len(todos)
            todos[:] = kept
            return removed

        return self._todos.update(_remove)

    # --- Notes ---------------------------------------------------------------
    async def create_note(self, config: NoteConfig) -> Dict[str, Any]:
        record = {
            "id": uuid.uuid4().hex,
            "created_at": _utc_timestamp(),
            "title": config.title,
            "content": config.content,
            "folder": config.folder or DEFAULT_NOTE_FOLDER,
        }

        def _append(notes: List[Dict[str, Any]]) -> Dict[str, Any]:
            notes.append(record)
            return record

        return self._notes.update(_append)

    async def list_notes(self, folder: Optional[str] = None) -> List[Dict[str, Any]]:
        notes = self._notes.load()
        if folder is None:
            return notes
        return [note for note in notes if note.get("folder") == folder]

    async def list_note_folders(self) -> List[str]:
        folders = [DEFAULT_NOTE_FOLDER]
        for note in self._notes.load():
            folder = note.get("folder")
            if folder and folder not in folders:
                folders.append(folder)
        return folders

    async def search_notes(self, query: str, folder: Optional[str] = None) -> List[Dict[str, Any]]:
        needle = query.lower()
        return [
            note
            for note in await self.list_notes(folder)
            if needle in note.get("title", "").lower() or needle in note.get("content", "").lower()
        ]

    async def delete_note(self, title: str, folder: Optional[str] = None) -> bool:
        def _remove(notes: List[Dict[str, Any]]) -> bool:
            kept = [
                note
                for note in notes
                if not (
                    note.get("title", "").lower() == title.lower()
                    and (folder is None or note.get("folder") == folder)
                )
            ]
            removed = len(kept) != len(notes)
            notes[:] = kept
            return removed

        return self._notes.update(_remove)


__all__ = [
    "DEFAULT_CALENDARS",
    "DEFAULT_TODO_LISTS",
    "DEFAULT_NOTE_FOLDER",
    "AutomationError",
    "RecurrenceConfig",
    "EventConfig",
    "TodoConfig",
    "NoteConfig",
    "AutomationBackend",
    "JsonAutomationBackend",
]
