"""Helpers for small JSON documents kept on disk.

The file-backed automation backend and the contact groups store share this
pattern: read the whole document, change it in memory, write it back with an
atomic rename so a crash never leaves half a file behind.
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def read_json(path: Path, default: T) -> T:
    """Return JSON content from ``path`` or ``default`` when absent or blank."""

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return default
    if not raw.strip():
        return default
    return json.loads(raw)


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to a sibling temp file, then rename it over ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(text, encoding="utf-8")
    os.replace(tmp_path, path)


def atomic_write_json(path: Path, payload: Any) -> None:
    atomic_write_text(path, json.dumps(payload, indent=2, ensure_ascii=False))


class JsonDocument:
    """One JSON file with read-modify-write guarded by a lock."""

    def __init__(self, path: Path, default_factory: Callable[[], Any]) -> None:
        self.path = path
        self._default_factory = default_factory
        self._lock = threading.Lock()

    def load(self) -> Any:
        return read_json(self.path, self._default_factory())

    def update(self, mutate: Callable[[Any], T]) -> T:
        """Apply ``mutate`` to the loaded document, persist it, return its result."""

        with self._lock:
            document = self.load()
            result = mutate(document)
            atomic_write_json(self.path, document)
            return result


__all__ = ["read_json", "atomic_write_text", "atomic_write_json", "JsonDocument"]
