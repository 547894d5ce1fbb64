"""Domain errors raised by the data-access layer."""

from __future__ import annotations


class TrekError(Exception):
    """Base class for Trek errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TrekError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(TrekError):
    """Entity clashes with an existing row (e.g. duplicate email)."""

    status_code = 409


class ValidationError(TrekError):
    """Input was rejected by an application rule or a database constraint."""

    status_code = 400
