"""Named contact groups that can be invited as a unit."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from core.command import Command
from core.errors import ValidationError
from core.handler_registry import BaseHandler, HandlerKind, HandlerResult
from core.json_storage import JsonDocument
from core.security import contains_dangerous_characters
from handlers.common import unknown_action


class ContactGroupStore:
    """Groups stored as ``{"groups": {name: [member, ...]}}`` in one JSON file."""

    def __init__(self, path: Path) -> None:
        self._document = JsonDocument(path, lambda: {"groups": {}})

    def groups(self) -> Dict[str, List[str]]:
        data = self._document.load()
        groups = data.get("groups") if isinstance(data, dict) else None
        return dict(groups) if isinstance(groups, dict) else {}

    def get(self, name: str) -> Optional[List[str]]:
        wanted = name.strip().lower()
        for group, members in self.groups().items():
            if group.lower() == wanted:
                return list(members)
        return None

    def save_group(self, name: str, members: List[str]) -> None:
        def _store(data: Dict[str, Dict[str, List[str]]]) -> None:
            data.setdefault("groups", {})[name] = members

        self._document.update(_store)


class ContactGroupsHandler(BaseHandler):
    kind = HandlerKind.CONTACTS
    names = frozenset({"contacts", "contact"})

    def __init__(self, store: ContactGroupStore) -> None:
        self._store = store

    async def execute(self, command: Command) -> HandlerResult:
        action = command.action
        args = command.positionals[1:]
        if action == "create":
            if len(args) < 2:
                return HandlerResult(messages=["Usage: contacts create <group> <member> [member...]"])
            group, members = args[0], [member.strip() for member in args[1:] if member.strip()]
            unsafe = [member for member in [group, *members] if contains_dangerous_characters(member)]
            if unsafe:
                raise ValidationError(f"Contact group entries contain unsafe characters: {', '.join(unsafe)}")
            self._store.save_group(group, members)
            return HandlerResult(
                messages=[f"Contact group '{group}' saved with {len(members)} member(s)"],
                data={"group": group, "members": members},
            )
        if action in {None, "list"}:
            groups = self._store.groups()
            if not groups:
                return HandlerResult(messages=["No contact groups defined"], data={"groups": []})
            lines = ["Contact groups:"] + [f"  - {name} ({len(members)})" for name, members in groups.items()]
            return HandlerResult(messages=lines, data={"groups": sorted(groups)})
        if action == "show":
            if not args:
                return HandlerResult(messages=["Usage: contacts show <group>"])
            members = self._store.get(args[0])
            if members is None:
                return HandlerResult(messages=[f"Contact group '{args[0]}' not found"])
            lines = [f"Contact group '{args[0]}':"] + [f"  - {member}" for member in members]
            return HandlerResult(messages=lines, data={"group": args[0], "members": members})
        return HandlerResult(messages=[unknown_action("contacts", "create, list, show")])


__all__ = ["ContactGroupStore", "ContactGroupsHandler"]
