"""FastAPI application exposing the interpreter over HTTP."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.config import get_data_dir, get_web_host, get_web_port
from app.main import build_interpreter
from core.automation import AutomationBackend, AutomationError, JsonAutomationBackend
from core.interpreter import InterpretationResult, Interpreter
from handlers.system_handlers import VERSION

logger = logging.getLogger(__name__)


class CommandRequest(BaseModel):
    message: str


def _format_result(result: InterpretationResult) -> Dict[str, Any]:
    """WHAT: reshape ``InterpretationResult`` into the response schema.

    WHY: the CLI prints the same messages; the web client additionally gets
    the command that ran and a machine-readable error type.
    HOW: flatten the command into its canonical text and expose the handler
    messages untouched.
    """
    return {
        "ok": result.ok,
        "status": result.status,
        "command": result.command_text,
        "handler": result.handler.value if result.handler else None,
        "messages": result.messages,
        "data": result.data,
        "error": str(result.error) if result.error else None,
        "error_type": type(result.error).__name__ if result.error else None,
        "latency_ms": result.latency_ms,
    }


def create_app(
    interpreter: Optional[Interpreter] = None,
    *,
    backend: Optional[AutomationBackend] = None,
) -> FastAPI:
    """WHAT: instantiate FastAPI around a shared interpreter.

    WHY: the web surface must behave exactly like the CLI, so it reuses
    ``build_interpreter`` unless a test hands in its own instance.
    HOW: keep the interpreter and backend on ``app.state`` and map pipeline
    errors to 422 and anything unexpected to 500.
    """
    store = backend or JsonAutomationBackend(get_data_dir())
    interp = interpreter or build_interpreter(store)

    app = FastAPI(title="ducktape", version=VERSION)
    app.state.interpreter = interp
    app.state.backend = store
    app.state.started_at = datetime.now(tz=timezone.utc)

    @app.get("/api/health")
    def health_check() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    @app.get("/api/status")
    def status() -> Dict[str, Any]:
        uptime = datetime.now(tz=timezone.utc) - app.state.started_at
        return {
            "version": VERSION,
            "provider": app.state.interpreter.current_provider().value,
            "uptime_seconds": int(uptime.total_seconds()),
            "cache_entries": len(app.state.interpreter.cache),
        }

    @app.get("/api/calendars")
    async def calendars() -> Dict[str, Any]:
        try:
            names = await app.state.backend.list_calendars()
        except AutomationError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"calendars": names}

    @app.post("/api/command")
    async def command(payload: CommandRequest) -> JSONResponse:
        message = payload.message.strip()
        if not message:
            raise HTTPException(status_code=400, detail="Message cannot be empty.")
        try:
            result = await app.state.interpreter.handle(message)
        except Exception as exc:
            logger.exception("Command failed unexpectedly: %s", message)
            raise HTTPException(status_code=500, detail="Internal error while processing command.") from exc
        return JSONResponse(status_code=200 if result.ok else 422, content=_format_result(result))

    return app


def serve() -> None:
    import uvicorn

    uvicorn.run("app.web_api:app", host=get_web_host(), port=get_web_port(), reload=False)


app = create_app()


if __name__ == "__main__":
    serve()
