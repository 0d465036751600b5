"""Notes commands: create, list, folders, search, delete."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from core.automation import AutomationBackend, AutomationError, NoteConfig
from core.command import Command
from core.handler_registry import BaseHandler, HandlerKind, HandlerResult
from core.settings import load_settings
from handlers.common import backend_failure, unknown_action


class NotesHandler(BaseHandler):
    kind = HandlerKind.NOTES
    names = frozenset({"note", "notes"})

    def __init__(self, backend: AutomationBackend, settings_path: Path) -> None:
        self._backend = backend
        self._settings_path = settings_path

    async def execute(self, command: Command) -> HandlerResult:
        action = command.action
        args = command.positionals[1:]
        folder = command.flag("folder")
        try:
            if action in {"create", "add", "new"}:
                if not args:
                    return HandlerResult(messages=["Usage: note create <title> [content] [--content <text>] [--folder <name>]"])
                content = command.flag("content") or " ".join(args[1:])
                config = NoteConfig(
                    title=args[0],
                    content=content,
                    folder=folder or load_settings(self._settings_path).notes.default_folder,
                )
                record = await self._backend.create_note(config)
                return HandlerResult(
                    messages=[f"Note '{record['title']}' created in {record['folder']}"],
                    data={"note": record},
                )
            if action in {None, "list"}:
                notes = await self._backend.list_notes(args[0] if args else folder)
                return _note_listing(notes, "No notes found")
            if action == "folders":
                folders = await self._backend.list_note_folders()
                return HandlerResult(messages=["Note folders:"] + [f"  - {name}" for name in folders], data={"folders": folders})
            if action in {"search", "find"}:
                if not args:
                    return HandlerResult(messages=["Usage: note search <query> [--folder <name>]"])
                query = " ".join(args)
                notes = await self._backend.search_notes(query, folder)
                return _note_listing(notes, f"No notes matching '{query}'")
            if action in {"delete", "remove"}:
                if not args:
                    return HandlerResult(messages=["Usage: note delete <title> [--folder <name>]"])
                title = " ".join(args)
                removed = await self._backend.delete_note(title, folder)
                if not removed:
                    return HandlerResult(messages=[f"No note named '{title}'"])
                return HandlerResult(messages=[f"Note '{title}' deleted"])
        except AutomationError as exc:
            raise backend_failure(f"{action} note", exc) from exc
        return HandlerResult(messages=[unknown_action("notes", "create/add, list, folders, delete, search")])


def _note_listing(notes: List[Dict[str, Any]], empty_message: str) -> HandlerResult:
    if not notes:
        return HandlerResult(messages=[empty_message], data={"notes": []})
    lines = [f"- {note.get('title', '')} [{note.get('folder', '')}]" for note in notes]
    return HandlerResult(messages=lines, data={"notes": notes})


__all__ = ["NotesHandler"]
