"""Turn command text into a ``Command``.

Two parsers are available. The grammar-validated parser in ``core.parsers``
knows every command family and rejects unknown flags or missing fields; the
legacy token parser accepts any shape and is used once as a fallback when the
grammar rejects the input.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from core.command import TOOL_NAME, Command
from core.errors import EmptyCommandError, GrammarError
from core.parsers import parse_with_grammar
from core.tokenizer import FLAG_MARKER, strip_wrapping_quotes, tokenize

logger = logging.getLogger(__name__)

_DATE_WORDS = {"today", "tomorrow"}


def parse_tokens(tokens: Sequence[str]) -> Command:
    """Legacy parser: positionals and ``--flag [value]`` pairs in any order."""

    remaining: List[str] = list(tokens)
    if remaining and remaining[0].lower() == TOOL_NAME:
        remaining = remaining[1:]
    if not remaining:
        raise EmptyCommandError()

    name = remaining[0]
    positionals: List[str] = []
    flags: Dict[str, Optional[str]] = {}
    index = 1
    while index < len(remaining):
        token = remaining[index]
        if token.startswith(FLAG_MARKER) and len(token) > len(FLAG_MARKER):
            value: Optional[str] = None
            following = remaining[index + 1] if index + 1 < len(remaining) else None
            if following is not None and not following.startswith(FLAG_MARKER):
                value = strip_wrapping_quotes(following)
                index += 1
            flags[token[len(FLAG_MARKER):]] = value
        else:
            positionals.append(strip_wrapping_quotes(token))
        index += 1

    if name.lower() == "calendar" and positionals and positionals[0].lower() == "create":
        positionals = _join_unquoted_title(positionals)
    return Command(name=name, positionals=positionals, flags=flags)


# WHAT: recover a multi-word calendar title typed without quotes.
# HOW: after "create", gather words until one looks like a date or a time.
def _join_unquoted_title(positionals: List[str]) -> List[str]:
    if len(positionals) < 2 or " " in positionals[1]:
        return positionals
    title_parts: List[str] = []
    for value in positionals[1:]:
        if "-" in value or ":" in value or value.lower() in _DATE_WORDS:
            break
        title_parts.append(value)
    if len(title_parts) < 2:
        return positionals
    rest = positionals[1 + len(title_parts):]
    return [positionals[0], " ".join(title_parts), *rest]


def parse_command_text(text: str) -> Command:
    """Tokenize ``text`` and parse it, preferring the grammar-validated parser."""

    tokens = tokenize(text)
    try:
        return parse_with_grammar(tokens)
    except EmptyCommandError:
        raise
    except GrammarError as exc:
        logger.debug("Grammar parser rejected %r (%s); using token parser", text, exc)
    return parse_tokens(tokens)


__all__ = ["parse_tokens", "parse_command_text"]
