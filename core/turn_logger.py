"""JSONL record of every interpretation call.

One ``TurnRecord`` is appended per line of user input: what was typed, which
provider interpreted it, the command text that came out, and how dispatch
ended. Free-text fields are scrubbed of emails, phone numbers and URLs before
they touch disk, and the file is rotated once it grows past ``max_bytes``.
"""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Pattern

_KNOWN_PATTERNS: Dict[str, Pattern[str]] = {
    "email": re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE),
    "phone": re.compile(r"(?:\+?\d[\d\s\-().]{6,}\d)"),
    "url": re.compile(r"https?://[^\s]+", re.IGNORECASE),
}
_PATTERN_PRIORITY: Dict[str, int] = {"email": 0, "url": 1, "phone": 2}
_REDACT_FIELDS = {"user_text", "command_text", "error"}


def _utc_now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def hash_input(value: str) -> str:
    """SHA-256 of the whitespace-collapsed, lower-cased input; empty for blank input."""

    normalized = " ".join((value or "").split()).lower()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


@dataclass
class TurnRecord:
    """One interpretation call, from raw input to dispatch outcome."""

    timestamp: str
    user_text: str
    input_hash: str
    provider: str
    status: str
    command_text: Optional[str] = None
    command_name: Optional[str] = None
    handler: Optional[str] = None
    error_type: Optional[str] = None
    error: Optional[str] = None
    latency_ms: Optional[int] = None

    @classmethod
    def new(
        cls,
        *,
        user_text: str,
        provider: str,
        status: str,
        command_text: Optional[str] = None,
        command_name: Optional[str] = None,
        handler: Optional[str] = None,
        error: Optional[BaseException] = None,
        latency_ms: Optional[int] = None,
    ) -> "TurnRecord":
        return cls(
            timestamp=_utc_now(),
            user_text=user_text,
            input_hash=hash_input(user_text),
            provider=provider,
            status=status,
            command_text=command_text,
            command_name=command_name,
            handler=handler,
            error_type=type(error).__name__ if error is not None else None,
            error=str(error) if error is not None else None,
            latency_ms=latency_ms,
        )


class TurnLogger:
    """Append ``TurnRecord`` rows to a JSONL file with redaction and rotation."""

    def __init__(
        self,
        *,
        log_path: Path,
        enabled: bool = True,
        redact: bool = True,
        patterns: Iterable[str] | None = None,
        max_bytes: int = 0,
        backup_count: int = 0,
    ) -> None:
        self._log_path = log_path
        self._enabled = enabled
        self._redact = redact
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        selected = tuple(patterns) if patterns else tuple(_KNOWN_PATTERNS)
        self._redaction_patterns = sorted(
            ((key, _KNOWN_PATTERNS[key]) for key in selected if key in _KNOWN_PATTERNS),
            key=lambda item: _PATTERN_PRIORITY.get(item[0], 10),
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    def log_turn(self, record: TurnRecord) -> None:
        if not self._enabled:
            return
        self._append_json_line(self._log_path, asdict(record))

    def _append_json_line(self, path: Path, payload: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(self._prepare_payload(payload), ensure_ascii=False)
        self._rotate_if_needed(path, len(line.encode("utf-8")) + 1)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line)
            handle.write("\n")

    def _prepare_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self._redact or not self._redaction_patterns:
            return payload
        return {
            key: self._scrub_string(value) if key in _REDACT_FIELDS and isinstance(value, str) else value
            for key, value in payload.items()
        }

    def _scrub_string(self, value: str) -> str:
        sanitized = value
        for key, pattern in self._redaction_patterns:
            sanitized = pattern.sub(f"[REDACTED_{key.upper()}]", sanitized)
        return sanitized

    # WHAT: keep the log below ``max_bytes``.
    # HOW: shift numbered backups up by one and move the live file to ``.1``;
    # without backups the live file is simply dropped.
    def _rotate_if_needed(self, path: Path, incoming_bytes: int) -> None:
        if self._max_bytes <= 0 or not path.exists():
            return
        if path.stat().st_size + incoming_bytes <= self._max_bytes:
            return

        if self._backup_count <= 0:
            path.unlink()
            return

        for index in range(self._backup_count - 1, 0, -1):
            src = Path(f"{path}.{index}")
            if src.exists():
                src.replace(Path(f"{path}.{index + 1}"))
        path.replace(Path(f"{path}.1"))


__all__ = ["TurnRecord", "TurnLogger", "hash_input"]
