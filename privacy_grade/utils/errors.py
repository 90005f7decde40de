"""
Error types and helpers for consistent error message extraction.
"""


class PreconditionError(RuntimeError):
    """A caller broke an API precondition (programming error)."""


class SessionClosedError(PreconditionError):
    """A page session was used after it was closed."""


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Falls back to the exception class name when the exception
    carries no message.
    """
    if isinstance(error, Exception):
        return str(error) or type(error).__name__
    return "Unknown error"
