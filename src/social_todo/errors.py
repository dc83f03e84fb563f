"""
Domain errors raised by the services and translated to HTTP responses by the
handlers registered in main.
"""
from __future__ import annotations

from typing import Any, Optional


class TodoAppError(Exception):
    """Base class for errors surfaced to the web layer."""

    status_code = 400

    def __init__(self, message: str, detail: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotOwner(TodoAppError):
    """The caller is not the owner of the resource it tried to act on."""

    status_code = 403


class NotFound(TodoAppError):
    """A referenced Todo or User does not exist."""

    status_code = 404


class ValidationFailed(TodoAppError):
    """A required field is missing or empty."""

    status_code = 422


class Conflict(TodoAppError):
    """A unique value, such as a nickname, is already taken."""

    status_code = 409
