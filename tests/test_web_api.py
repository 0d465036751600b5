from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.web_api import create_app
from core.automation import JsonAutomationBackend
from core.handler_registry import BaseHandler, HandlerKind, HandlerRegistry
from core.interpreter import Interpreter
from core.settings import ProviderSelection
from core.synthesis import TerminalSynthesizer
from handlers import load_all_handlers


class ExplodingHandler(BaseHandler):
    kind = HandlerKind.HELP
    names = frozenset({"boom"})

    async def execute(self, command):
        raise RuntimeError("handler crashed")


def _client(tmp_path: Path, registry=None) -> TestClient:
    backend = JsonAutomationBackend(tmp_path / "data")
    registry = registry or load_all_handlers(backend, settings_path=tmp_path / "ducktape.yml")
    interpreter = Interpreter(
        registry,
        synthesizer_factory=lambda selection, cache: TerminalSynthesizer(),
        provider_reader=lambda: ProviderSelection.NONE,
    )
    return TestClient(create_app(interpreter, backend=backend))


def test_health_and_status(tmp_path: Path):
    client = _client(tmp_path)
    assert client.get("/api/health").json()["status"] == "ok"

    status = client.get("/api/status").json()
    assert status["version"] == "0.1.0"
    assert status["provider"] == "none"
    assert status["cache_entries"] == 0


def test_calendars_endpoint_lists_backend_calendars(tmp_path: Path):
    client = _client(tmp_path)
    assert client.get("/api/calendars").json() == {"calendars": ["Calendar", "Work", "Home", "KIDS"]}


def test_command_creates_event(tmp_path: Path):
    client = _client(tmp_path)
    response = client.post(
        "/api/command",
        json={"message": 'calendar create "Team Meeting" 2025-04-15 10:00 11:00 Work'},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["handler"] == "calendar"
    assert body["command"] == 'ducktape calendar create "Team Meeting" 2025-04-15 10:00 11:00 Work'
    assert body["messages"][0] == "Event 'Team Meeting' created in Work on 2025-04-15 10:00-11:00"
    assert body["data"]["event"]["title"] == "Team Meeting"


def test_unknown_command_is_success(tmp_path: Path):
    body = _client(tmp_path).post("/api/command", json={"message": "frobnicate"}).json()
    assert body["ok"] is True
    assert body["status"] == "unrecognized"


def test_pipeline_error_maps_to_422(tmp_path: Path):
    response = _client(tmp_path).post("/api/command", json={"message": 'todo add "Buy milk'})
    assert response.status_code == 422
    body = response.json()
    assert body["ok"] is False
    assert body["error_type"] == "UnclosedQuoteError"
    assert body["error"] == "Unclosed quote in input"


def test_blank_message_is_rejected(tmp_path: Path):
    response = _client(tmp_path).post("/api/command", json={"message": "   "})
    assert response.status_code == 400


def test_unexpected_error_maps_to_500(tmp_path: Path):
    client = _client(tmp_path, registry=HandlerRegistry([ExplodingHandler()]))
    response = client.post("/api/command", json={"message": "boom"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal error while processing command."
