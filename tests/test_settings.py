from pathlib import Path

import pytest

from app.config import get_data_dir, get_llm_timeout, get_log_redaction_patterns, get_settings_path, get_web_port
from core.settings import (
    ProviderSelection,
    Settings,
    get_setting,
    load_settings,
    read_provider,
    save_settings,
    update_setting,
)


def test_missing_file_yields_defaults(tmp_path: Path):
    settings = load_settings(tmp_path / "absent.yml")
    assert settings == Settings()
    assert settings.calendar.default_calendar == "Calendar"
    assert settings.provider is ProviderSelection.NONE


def test_yaml_file_is_read(tmp_path: Path):
    path = tmp_path / "ducktape.yml"
    path.write_text(
        "calendar:\n"
        "  default_calendar: Home\n"
        "  default_reminder_minutes: 30\n"
        "todo:\n"
        "  default_list: Work\n"
        "language_model:\n"
        "  provider: xai\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.calendar.default_calendar == "Home"
    assert settings.calendar.default_reminder_minutes == 30
    assert settings.calendar.default_duration_minutes == 60
    assert settings.todo.default_list == "Work"
    assert settings.provider is ProviderSelection.GROK


def test_broken_yaml_and_unknown_provider_fall_back(tmp_path: Path):
    broken = tmp_path / "broken.yml"
    broken.write_text("calendar: [unclosed\n", encoding="utf-8")
    assert load_settings(broken) == Settings()

    odd = tmp_path / "odd.yml"
    odd.write_text("language_model:\n  provider: gpt-9\n", encoding="utf-8")
    assert read_provider(odd) is ProviderSelection.NONE


def test_save_and_reload_round_trip(tmp_path: Path):
    path = tmp_path / "nested" / "ducktape.yml"
    settings = update_setting(Settings(), "language_model.provider", "deepseek")
    settings = update_setting(settings, "calendar.duration", "45")
    save_settings(settings, path)

    reloaded = load_settings(path)
    assert reloaded == settings
    assert get_setting(reloaded, "calendar.duration") == "45"
    assert read_provider(path) is ProviderSelection.DEEPSEEK


def test_update_setting_rejects_bad_input():
    with pytest.raises(KeyError):
        update_setting(Settings(), "calendar.colour", "blue")
    with pytest.raises(ValueError):
        update_setting(Settings(), "calendar.reminder", "-5")
    with pytest.raises(ValueError):
        ProviderSelection.parse("gpt")
    assert ProviderSelection.parse(None) is ProviderSelection.NONE
    assert ProviderSelection.parse("Terminal") is ProviderSelection.NONE


def test_env_getters_use_defaults_and_overrides():
    assert get_settings_path({}) == Path("config/ducktape.yml")
    assert get_settings_path({"DUCKTAPE_CONFIG": "/tmp/x.yml"}) == Path("/tmp/x.yml")
    assert get_data_dir({}) == Path("data")
    assert get_llm_timeout({}) == 30
    assert get_llm_timeout({"LLM_TIMEOUT_SECONDS": "nope"}) == 30
    assert get_web_port({"WEB_PORT": "8080"}) == 8080
    assert get_log_redaction_patterns({"LOG_REDACTION_PATTERNS": "email, url"}) == ["email", "url"]


def test_save_creates_parent_directory_and_leaves_no_temp_file(tmp_path: Path):
    path = tmp_path / "nested" / "config" / "ducktape.yml"
    save_settings(update_setting(Settings(), "language_model.provider", "grok"), path)

    assert read_provider(path) is ProviderSelection.GROK
    assert sorted(p.name for p in path.parent.iterdir()) == ["ducktape.yml"]
