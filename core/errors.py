"""Exception hierarchy shared by the interpretation pipeline.

Every failure that can be caused by the shape of user input (or by the
provider's reply to it) derives from ``AssistantError`` so the CLI and web
front ends can report it and keep serving the next request.
"""

from __future__ import annotations


class AssistantError(RuntimeError):
    """Root of all input-shaped pipeline failures."""


# --- Tokenizer ---------------------------------------------------------------
class TokenError(AssistantError):
    """Raised when a raw line cannot be split into tokens."""


class UnclosedQuoteError(TokenError):
    def __init__(self, message: str = "Unclosed quote in input") -> None:
        super().__init__(message)


# --- Parser ------------------------------------------------------------------
class ParseError(AssistantError):
    """Raised when tokens cannot be turned into a command."""


class EmptyCommandError(ParseError):
    def __init__(self, message: str = "Empty command") -> None:
        super().__init__(message)


class GrammarError(ParseError):
    """Raised by the grammar-validated parser for unknown or incomplete commands."""


# --- Synthesizer -------------------------------------------------------------
class SynthesisError(AssistantError):
    """Raised when natural language cannot be turned into command text."""


class InputTooLongError(SynthesisError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Input too long (max {limit} characters)")
        self.limit = limit


class ProviderUnavailableError(SynthesisError):
    def __init__(self, provider: str, reason: str, status: int | None = None) -> None:
        if status is not None:
            message = f"{provider} API error ({status}): {reason}"
        else:
            message = f"{provider} API request failed: {reason}"
        super().__init__(message)
        self.provider = provider
        self.status = status


class ProviderTimeoutError(SynthesisError):
    def __init__(self, provider: str, timeout: float) -> None:
        super().__init__(f"{provider} API request timed out after {timeout:g}s")
        self.provider = provider
        self.timeout = timeout


class MalformedResponseError(SynthesisError):
    def __init__(self, provider: str) -> None:
        super().__init__(f"Invalid response format from {provider} API")
        self.provider = provider


class MissingCredentialError(SynthesisError):
    def __init__(self, variable: str) -> None:
        super().__init__(
            f"{variable} environment variable not set. "
            f"Please set your API key using: export {variable}='your-key-here'"
        )
        self.variable = variable


# --- Validator ---------------------------------------------------------------
class ValidationError(AssistantError):
    """Raised when command text or a field fails a safety check."""


class UnsafeCharactersError(ValidationError):
    def __init__(self, message: str = "Generated command contains potentially unsafe characters") -> None:
        super().__init__(message)


class ValueOutOfRangeError(ValidationError):
    def __init__(self, flag: str, value: int, maximum: int) -> None:
        super().__init__(f"Invalid {flag} value: {value} (maximum is {maximum})")
        self.flag = flag
        self.value = value
        self.maximum = maximum


# --- Handlers ----------------------------------------------------------------
class ExecutionError(AssistantError):
    """Raised by handlers when the automation backend rejects a request."""


__all__ = [
    "AssistantError",
    "TokenError",
    "UnclosedQuoteError",
    "ParseError",
    "EmptyCommandError",
    "GrammarError",
    "SynthesisError",
    "InputTooLongError",
    "ProviderUnavailableError",
    "ProviderTimeoutError",
    "MalformedResponseError",
    "MissingCredentialError",
    "ValidationError",
    "UnsafeCharactersError",
    "ValueOutOfRangeError",
    "ExecutionError",
]
