"""Centralize defaults and environment lookups for the assistant."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Default configuration values
# ---------------------------------------------------------------------------
_DEFAULT_XAI_API_BASE = "https://api.x.ai/v1"
_DEFAULT_DEEPSEEK_API_BASE = "https://api.deepseek.com"
_DEFAULT_LLM_TIMEOUT_SECONDS = 30.0
_DEFAULT_SETTINGS_PATH = "config/ducktape.yml"
_DEFAULT_DATA_DIR = "data"
_DEFAULT_LOGGING_ENABLED: bool = True
_DEFAULT_LOG_REDACTION_ENABLED: bool = True
_DEFAULT_LOG_DIR = "logs"
_DEFAULT_LOG_LEVEL = "WARNING"
_TURN_LOG_FILENAME = "turns.jsonl"
_DEFAULT_LOG_REDACTION_PATTERNS = "email,phone,url"
_DEFAULT_LOG_MAX_BYTES = 1_000_000
_DEFAULT_LOG_BACKUP_COUNT = 5
_DEFAULT_WEB_HOST = "127.0.0.1"
_DEFAULT_WEB_PORT = 3000


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


# ---------------------------------------------------------------------------
# Provider credentials
# ---------------------------------------------------------------------------
def get_xai_api_key(env: Dict[str, str] | None = None) -> str | None:
    """Return the X.AI key used by the Grok provider, if configured."""

    source = env if env is not None else os.environ
    return source.get("XAI_API_KEY") or None


def get_xai_api_base(env: Dict[str, str] | None = None) -> str:
    source = env if env is not None else os.environ
    return (source.get("XAI_API_BASE") or _DEFAULT_XAI_API_BASE).rstrip("/")


def get_deepseek_api_key(env: Dict[str, str] | None = None) -> str | None:
    """Return the DeepSeek key, if configured."""

    source = env if env is not None else os.environ
    return source.get("DEEPSEEK_API_KEY") or None


def get_deepseek_api_base(env: Dict[str, str] | None = None) -> str:
    source = env if env is not None else os.environ
    return (source.get("DEEPSEEK_API_BASE") or _DEFAULT_DEEPSEEK_API_BASE).rstrip("/")


def get_llm_timeout(env: Dict[str, str] | None = None) -> float:
    """Return the provider request timeout in seconds."""

    source = env if env is not None else os.environ
    raw = source.get("LLM_TIMEOUT_SECONDS")
    if raw is None:
        return _DEFAULT_LLM_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_LLM_TIMEOUT_SECONDS
    return value if value > 0 else _DEFAULT_LLM_TIMEOUT_SECONDS


# ---------------------------------------------------------------------------
# Storage locations
# ---------------------------------------------------------------------------
def get_settings_path(env: Dict[str, str] | None = None) -> Path:
    """Return the YAML file holding user settings and the provider selection."""

    source = env if env is not None else os.environ
    override = source.get("DUCKTAPE_CONFIG")
    return Path(override) if override else Path(_DEFAULT_SETTINGS_PATH)


def get_data_dir(env: Dict[str, str] | None = None) -> Path:
    """Return the directory used by the file-backed automation backend."""

    source = env if env is not None else os.environ
    override = source.get("DUCKTAPE_DATA_DIR")
    return Path(override) if override else Path(_DEFAULT_DATA_DIR)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def is_logging_enabled(env: Dict[str, str] | None = None) -> bool:
    """Determine whether the JSONL turn log is written."""

    source = env if env is not None else os.environ
    return _parse_bool(source.get("LOGGING_ENABLED"), _DEFAULT_LOGGING_ENABLED)


def get_log_level(env: Dict[str, str] | None = None) -> str:
    source = env if env is not None else os.environ
    return (source.get("LOG_LEVEL") or _DEFAULT_LOG_LEVEL).strip().upper()


def get_log_dir(env: Dict[str, str] | None = None) -> Path:
    source = env if env is not None else os.environ
    override = source.get("LOG_DIR")
    return Path(override) if override else Path(_DEFAULT_LOG_DIR)


def get_turn_log_path(env: Dict[str, str] | None = None) -> Path:
    """Return the full path for the turn log JSONL file."""

    return get_log_dir(env) / _TURN_LOG_FILENAME


def is_log_redaction_enabled(env: Dict[str, str] | None = None) -> bool:
    source = env if env is not None else os.environ
    return _parse_bool(source.get("LOG_REDACTION_ENABLED"), _DEFAULT_LOG_REDACTION_ENABLED)


def get_log_redaction_patterns(env: Dict[str, str] | None = None) -> List[str]:
    """Return the list of redaction pattern keys to apply."""

    source = env if env is not None else os.environ
    raw = source.get("LOG_REDACTION_PATTERNS")
    values = raw if raw is not None else _DEFAULT_LOG_REDACTION_PATTERNS
    return [segment.strip().lower() for segment in values.split(",") if segment.strip()]


def get_log_max_bytes(env: Dict[str, str] | None = None) -> int:
    source = env if env is not None else os.environ
    raw = source.get("LOG_MAX_BYTES")
    if raw is None:
        return _DEFAULT_LOG_MAX_BYTES
    try:
        value = int(raw)
    except ValueError:
        return _DEFAULT_LOG_MAX_BYTES
    return max(value, 0)


def get_log_backup_count(env: Dict[str, str] | None = None) -> int:
    source = env if env is not None else os.environ
    raw = source.get("LOG_BACKUP_COUNT")
    if raw is None:
        return _DEFAULT_LOG_BACKUP_COUNT
    try:
        value = int(raw)
    except ValueError:
        return _DEFAULT_LOG_BACKUP_COUNT
    return max(value, 0)


# ---------------------------------------------------------------------------
# Web API
# ---------------------------------------------------------------------------
def get_web_host(env: Dict[str, str] | None = None) -> str:
    source = env if env is not None else os.environ
    return source.get("WEB_HOST", _DEFAULT_WEB_HOST)


def get_web_port(env: Dict[str, str] | None = None) -> int:
    source = env if env is not None else os.environ
    raw = source.get("WEB_PORT")
    if raw is None:
        return _DEFAULT_WEB_PORT
    try:
        value = int(raw)
    except ValueError:
        return _DEFAULT_WEB_PORT
    return value if 0 < value <= 65535 else _DEFAULT_WEB_PORT
