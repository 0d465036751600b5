import json
from pathlib import Path

from core.errors import UnsafeCharactersError
from core.turn_logger import TurnLogger, TurnRecord, hash_input


def test_turn_logger_writes_jsonl_records(tmp_path: Path):
    log_path = tmp_path / "turns.jsonl"
    logger = TurnLogger(log_path=log_path, redact=False)

    logger.log_turn(
        TurnRecord.new(
            user_text="Lunch tomorrow",
            provider="grok",
            status="dispatched",
            command_text='ducktape calendar create "Lunch" 2025-04-15 12:00 13:00',
            command_name="calendar",
            handler="calendar",
            latency_ms=12,
        )
    )
    logger.log_turn(
        TurnRecord.new(user_text="oops", provider="none", status="error", error=UnsafeCharactersError())
    )

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["command_name"] == "calendar"
    assert first["latency_ms"] == 12
    assert first["input_hash"] == hash_input("lunch   TOMORROW")
    assert second["error_type"] == "UnsafeCharactersError"
    assert second["error"] == "Generated command contains potentially unsafe characters"


def test_disabled_logger_writes_nothing(tmp_path: Path):
    log_path = tmp_path / "turns.jsonl"
    logger = TurnLogger(log_path=log_path, enabled=False)
    logger.log_turn(TurnRecord.new(user_text="hi", provider="none", status="dispatched"))
    assert not log_path.exists()


def test_redaction_scrubs_sensitive_strings(tmp_path: Path):
    log_path = tmp_path / "turns.jsonl"
    logger = TurnLogger(log_path=log_path, patterns=["email", "phone", "url"])

    logger.log_turn(
        TurnRecord.new(
            user_text="Call +1 415 555 1212 and invite jane.doe@example.com, agenda at https://example.com/doc",
            provider="deepseek",
            status="dispatched",
            command_text='ducktape calendar create "Call" 2025-04-15 10:00 11:00 --email "jane.doe@example.com"',
        )
    )

    payload = json.loads(log_path.read_text(encoding="utf-8").strip())
    assert "[REDACTED" not in payload["timestamp"]
    assert "jane.doe@example.com" not in payload["user_text"]
    assert "415 555 1212" not in payload["user_text"]
    assert "https://example.com" not in payload["user_text"]
    assert "[REDACTED_EMAIL]" in payload["command_text"]
    assert payload["provider"] == "deepseek"


def test_log_rotation_respects_max_bytes(tmp_path: Path):
    log_path = tmp_path / "turns.jsonl"
    logger = TurnLogger(log_path=log_path, redact=False, max_bytes=700, backup_count=1)

    for idx in range(5):
        logger.log_turn(TurnRecord.new(user_text=f"hello {idx}", provider="none", status="dispatched"))

    rotated = Path(f"{log_path}.1")
    assert log_path.exists()
    assert rotated.exists()
    active_text = log_path.read_text(encoding="utf-8")
    assert "hello 4" in active_text
    assert "hello 0" not in active_text
    assert "hello 3" in rotated.read_text(encoding="utf-8")


def test_hash_input_ignores_case_and_spacing():
    assert hash_input("  Lunch   Tomorrow ") == hash_input("lunch tomorrow")
    assert hash_input("   ") == ""
