"""Failure kinds signalled by the ordering context.

Field-level input problems are reported with Protean's ``ValidationError``.
The classes below cover the remaining kinds; mapping them to transport
status codes is left to the API layer.
"""


class OrderingError(Exception):
    """Base class for ordering failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(OrderingError):
    """The requested order or cart does not exist."""


class NotAuthorizedError(OrderingError):
    """The caller does not own, or sell into, the requested order."""


class InvalidOperationError(OrderingError):
    """A state machine or business rule forbids the requested change."""
