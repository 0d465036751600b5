"""Assemble the interpreter and run the interactive CLI loop."""

from __future__ import annotations

import asyncio
import logging
import shlex
import sys
from typing import List, Optional

from app.config import (
    get_data_dir,
    get_deepseek_api_base,
    get_deepseek_api_key,
    get_llm_timeout,
    get_log_backup_count,
    get_log_level,
    get_log_max_bytes,
    get_log_redaction_patterns,
    get_settings_path,
    get_turn_log_path,
    get_xai_api_base,
    get_xai_api_key,
    is_log_redaction_enabled,
    is_logging_enabled,
)
from core.automation import AutomationBackend, JsonAutomationBackend
from core.interpreter import InterpretationResult, Interpreter
from core.response_cache import ResponseCache
from core.settings import ProviderSelection, load_settings, read_provider
from core.synthesis import ProviderCredentials, Synthesizer, create_synthesizer
from core.turn_logger import TurnLogger
from handlers import load_all_handlers

PROMPT = "ducktape> "


# -- Interpreter construction --------------------------------------------------
def build_interpreter(backend: Optional[AutomationBackend] = None) -> Interpreter:
    """Wire up every dependency shared by the CLI and the web API.

    WHAT: build the automation backend, handler registry, provider credentials
    and turn logger.
    WHY: both entry points must interpret a line identically.
    HOW: pull runtime configuration from ``app.config`` helpers; the provider
    selection and default calendar are read from the settings file on every
    call so a ``config set`` takes effect on the next line.
    """
    settings_path = get_settings_path()
    if backend is None:
        backend = JsonAutomationBackend(get_data_dir())
    registry = load_all_handlers(backend, settings_path=settings_path)
    credentials = ProviderCredentials(
        xai_api_key=get_xai_api_key(),
        xai_api_base=get_xai_api_base(),
        deepseek_api_key=get_deepseek_api_key(),
        deepseek_api_base=get_deepseek_api_base(),
        timeout=get_llm_timeout(),
    )

    def synthesizer_factory(selection: ProviderSelection, cache: ResponseCache) -> Synthesizer:
        settings = load_settings(settings_path)
        return create_synthesizer(
            selection,
            cache=cache,
            credentials=credentials,
            calendar_source=backend.list_calendars,
            default_calendar=settings.calendar.default_calendar,
        )

    turn_logger = TurnLogger(
        log_path=get_turn_log_path(),
        enabled=is_logging_enabled(),
        redact=is_log_redaction_enabled(),
        patterns=get_log_redaction_patterns(),
        max_bytes=get_log_max_bytes(),
        backup_count=get_log_backup_count(),
    )
    return Interpreter(
        registry,
        synthesizer_factory=synthesizer_factory,
        provider_reader=lambda: read_provider(settings_path),
        turn_logger=turn_logger,
    )


def _print_result(result: InterpretationResult) -> None:
    stream = sys.stdout if result.ok else sys.stderr
    for message in result.messages:
        print(message, file=stream)


# -- Interactive CLI loop ------------------------------------------------------
async def _repl(interpreter: Interpreter) -> None:
    print("ducktape ready. Type 'help' for commands or 'exit' to stop.")
    while True:
        try:
            line = await asyncio.to_thread(input, PROMPT)
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break
        if not line.strip():
            continue
        result = await interpreter.handle(line)
        _print_result(result)
        if result.exit_requested:
            break


def main(argv: Optional[List[str]] = None) -> int:
    """Run one command given on the command line, or the interactive loop.

    Returns the process exit status: 1 when a one-shot command failed.
    """
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    interpreter = build_interpreter()

    if args:
        result = asyncio.run(interpreter.handle(shlex.join(args)))
        _print_result(result)
        return 0 if result.ok else 1

    try:
        asyncio.run(_repl(interpreter))
    except KeyboardInterrupt:
        print("\nExiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
