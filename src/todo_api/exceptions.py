"""
Error types raised by the todo core and its storage adapters.

Not-found is deliberately absent from this module: reads report it as
``None`` and writes as ``WriteResult.NOT_FOUND``.
"""
from __future__ import annotations


class TodoError(Exception):
    """Base exception for the todo API."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# PUBLIC_INTERFACE
class TodoValidationError(TodoError):
    """Raised when input would break a Todo invariant (e.g. a blank title)."""

    def __init__(self, message: str, field: str = "title"):
        self.field = field
        super().__init__(message)


# PUBLIC_INTERFACE
class RepositoryError(TodoError):
    """
    Raised by storage adapters for genuine backend failures
    (connectivity, serialization, unexpected backend errors).
    """

    def __init__(self, message: str, operation: str):
        self.operation = operation
        super().__init__(message)
