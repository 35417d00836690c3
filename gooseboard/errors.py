"""
Errors - Exception hierarchy for the goose board engine.

Two families matter to callers:
- ProviderError: the question bank failed; recoverable, the session stays in SETUP
- InvalidStateError: a trigger arrived that the current state does not accept
"""

from __future__ import annotations


class GooseError(Exception):
    """Base class for all engine errors."""


class ProviderError(GooseError):
    """Question fetch failed (network, parse, or provider-side error)."""


class MalformedQuestionError(ProviderError):
    """A question record from the provider violates the question shape."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Question pool rejected with {len(errors)} error(s): {'; '.join(errors)}")


class InvalidStateError(GooseError):
    """A trigger is not valid in the current game state."""

    def __init__(self, message: str, error_code: str = "INVALID_STATE"):
        self.error_code = error_code
        super().__init__(message)


class InvalidSetupError(InvalidStateError):
    """Session start parameters are out of range."""

    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_SETUP")


class BoardValidationError(GooseError):
    """The special-tile table breaks one of its invariants."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Board validation failed with {len(errors)} error(s)")


class SessionNotFoundError(GooseError):
    """No session with the given id."""
