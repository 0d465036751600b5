"""Split raw command lines into tokens.

The primary splitter follows POSIX shell-word rules through ``shlex``. When
``shlex`` rejects a line (an apostrophe in ``John's meeting`` or a trailing
backslash) a simpler scanner that only groups on double quotes gets a second
chance. Both splitters remember which words carried quotes in the raw line.
Free-text flags are then post-processed so that an unquoted value such as
``--location Room 4, Building B`` stays a single token, while a value the
user quoted is kept exactly as given.
"""

from __future__ import annotations

import logging
import re
import shlex
from typing import Iterable, List, Tuple

from core.errors import UnclosedQuoteError

logger = logging.getLogger(__name__)

FLAG_MARKER = "--"
FREE_TEXT_FLAGS = frozenset({"--location", "--notes", "--email", "--contacts"})

_NBSP = "\u00a0"
_QUOTE_CHARS = ('"', "'")
_UNSAFE_TOKEN = re.compile(r"[^\w@%+=:,./-]", re.ASCII)

# (token, quoted) pairs; ``quoted`` is true when the raw word contained quotes.
Word = Tuple[str, bool]


def tokenize(raw: str) -> List[str]:
    """Return the ordered tokens of ``raw``.

    Raises ``UnclosedQuoteError`` when a double quote is never closed.
    """

    text = (raw or "").replace(_NBSP, " ").strip()
    if not text:
        return []
    try:
        words = _split_shell_words(text)
    except ValueError as exc:
        logger.debug("shlex rejected input (%s); falling back to quote scanner", exc)
        words = _scan(text)
    return _merge_free_text_values(words)


def _split_shell_words(text: str) -> List[Word]:
    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    words: List[Word] = []
    start = 0
    while True:
        token = lexer.get_token()
        if token is None:
            break
        end = lexer.instream.tell()
        raw_word = text[start:end]
        words.append((token, any(quote in raw_word for quote in _QUOTE_CHARS)))
        start = end
    return words


def _scan(text: str) -> List[Word]:
    words: List[Word] = []
    current: List[str] = []
    in_quotes = False
    escaped = False
    pending = False
    quoted = False

    for char in text:
        if escaped:
            current.append(char)
            escaped = False
            pending = True
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"':
            in_quotes = not in_quotes
            pending = True
            quoted = True
            continue
        if char.isspace() and not in_quotes:
            if pending:
                words.append(("".join(current), quoted))
                current = []
                pending = False
                quoted = False
            continue
        current.append(char)
        pending = True

    if in_quotes:
        raise UnclosedQuoteError()
    if pending:
        words.append(("".join(current), quoted))
    return words


def _merge_free_text_values(words: List[Word]) -> List[str]:
    merged: List[str] = []
    index = 0
    while index < len(words):
        token, _ = words[index]
        merged.append(token)
        index += 1
        if token.lower() not in FREE_TEXT_FLAGS or index >= len(words):
            continue
        value, quoted = words[index]
        if quoted:
            merged.append(value)
            index += 1
            continue

        # gather unquoted words up to the next flag or quoted word
        run: List[str] = []
        while index < len(words):
            value, quoted = words[index]
            if quoted or value.startswith(FLAG_MARKER):
                break
            run.append(value)
            index += 1
        if len(run) > 1:
            merged.append('"' + " ".join(run) + '"')
        else:
            merged.extend(run)
    return merged


# --- Quoting helpers ---------------------------------------------------------
def is_fully_quoted(token: str) -> bool:
    return len(token) >= 2 and token[0] in _QUOTE_CHARS and token[-1] == token[0]


def strip_wrapping_quotes(token: str) -> str:
    """Remove one layer of matching quotes around ``token``."""

    if is_fully_quoted(token):
        return token[1:-1]
    return token


def quote_token(token: str, *, force: bool = False) -> str:
    if token and not force and not _UNSAFE_TOKEN.search(token):
        return token
    escaped = token.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def join_with_quoting(tokens: Iterable[str]) -> str:
    """Render ``tokens`` as a line that ``tokenize`` splits back into them.

    The value after a free-text flag is always quoted so it is not merged
    with the positionals that follow it.
    """

    rendered: List[str] = []
    previous = ""
    for token in tokens:
        force = previous.lower() in FREE_TEXT_FLAGS and not token.startswith(FLAG_MARKER)
        rendered.append(quote_token(token, force=force))
        previous = token
    return " ".join(rendered)


__all__ = [
    "FLAG_MARKER",
    "FREE_TEXT_FLAGS",
    "tokenize",
    "is_fully_quoted",
    "strip_wrapping_quotes",
    "quote_token",
    "join_with_quoting",
]
