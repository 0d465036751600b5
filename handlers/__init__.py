"""Build the fixed, ordered set of capability handlers.

Order matters: dispatch picks the first handler that claims a command name,
and the registry refuses two handlers claiming the same name.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from core.automation import AutomationBackend
from core.handler_registry import Handler, HandlerRegistry
from handlers.calendar_handler import CalendarHandler
from handlers.common import Clock
from handlers.config_handler import ConfigHandler
from handlers.contacts_handler import ContactGroupsHandler, ContactGroupStore
from handlers.notes_handler import NotesHandler
from handlers.system_handlers import ExitHandler, HelpHandler, UtilityHandler, VersionHandler
from handlers.todo_handler import ReminderHandler, TodoHandler


def build_handlers(
    backend: AutomationBackend,
    *,
    settings_path: Path,
    contact_groups: Optional[ContactGroupStore] = None,
    clock: Clock = datetime.now,
) -> Tuple[Handler, ...]:
    groups = contact_groups or ContactGroupStore(settings_path.parent / "contact_groups.json")
    return (
        CalendarHandler(backend, settings_path, contact_groups=groups, clock=clock),
        TodoHandler(backend, settings_path),
        NotesHandler(backend, settings_path),
        ConfigHandler(settings_path),
        UtilityHandler(clock),
        ContactGroupsHandler(groups),
        VersionHandler(),
        HelpHandler(),
        ExitHandler(),
        ReminderHandler(backend, settings_path),
    )


def load_all_handlers(
    backend: AutomationBackend,
    *,
    settings_path: Path,
    contact_groups: Optional[ContactGroupStore] = None,
    clock: Clock = datetime.now,
) -> HandlerRegistry:
    """Return a registry holding every built-in handler."""

    return HandlerRegistry(
        build_handlers(backend, settings_path=settings_path, contact_groups=contact_groups, clock=clock)
    )


__all__ = ["build_handlers", "load_all_handlers"]
