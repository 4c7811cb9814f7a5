"""Application error type shared by every layer of the store.

Errors carry a discriminant (``ErrorKind``) instead of relying on the Python
class of the exception. Callers branch on ``err.kind``; the HTTP layer maps
the kind to a status code.
"""

from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError


class ErrorKind(Enum):
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL = "INTERNAL_ERROR"


HTTP_STATUS = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


def format_validation_messages(exc: ValidationError) -> str:
    """Flatten Protean's ``{field: [messages]}`` into a single line."""
    messages = getattr(exc, "messages", None)
    if not isinstance(messages, dict):
        return str(exc)

    parts = []
    for field, errors in messages.items():
        if isinstance(errors, (list, tuple)):
            text = "; ".join(str(e) for e in errors)
        else:
            text = str(errors)
        parts.append(f"{field}: {text}")
    return ", ".join(parts)


class AppError(Exception):
    """An error with a kind, a human message and an optional wrapped cause."""

    def __init__(self, kind: ErrorKind, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.kind.value}: {self.message}: {self.cause}"
        return f"{self.kind.value}: {self.message}"

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.name}, message={self.message!r})"

    @property
    def http_status(self) -> int:
        return HTTP_STATUS.get(self.kind, 500)

    def is_kind(self, kind: ErrorKind) -> bool:
        return self.kind == kind

    @classmethod
    def invalid_input(cls, message: str) -> "AppError":
        return cls(ErrorKind.INVALID_INPUT, message)

    @classmethod
    def not_found(cls, message: str) -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def unauthorized(cls, message: str) -> "AppError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def internal(cls, message: str, cause: BaseException | None = None) -> "AppError":
        return cls(ErrorKind.INTERNAL, message, cause)

    @classmethod
    def from_storage(cls, exc: BaseException, operation: str) -> "AppError":
        """Reclassify an exception raised by a repository.

        Missing rows become NOT_FOUND, Protean validation failures become
        INVALID_INPUT, and everything else is an INTERNAL failure of
        ``operation``.
        """
        if isinstance(exc, AppError):
            return exc
        if isinstance(exc, ObjectNotFoundError):
            return cls(ErrorKind.NOT_FOUND, f"{operation}: not found", exc)
        if isinstance(exc, ValidationError):
            return cls(ErrorKind.INVALID_INPUT, format_validation_messages(exc), exc)
        return cls(ErrorKind.INTERNAL, f"failed to {operation}", exc)
