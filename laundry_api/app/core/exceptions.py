"""
Domain exceptions raised by the service layer.

Services signal failures with the classes below and endpoints translate
them into HTTP responses::

    LaundryError (base)
    ├── InvalidInputError   - malformed or missing request fields    -> 400
    ├── NotFoundError       - unknown service, missing/foreign order -> 404
    ├── InvalidStateError   - operation illegal for the order status -> 400
    └── UnauthenticatedError - missing/malformed identity header     -> 401

The first three derive from ``ValueError`` like the other domain
failures raised by services.  Messages never contain more than the
identifier the caller supplied.
"""

from typing import Sequence, TypeVar

from .config import settings

T = TypeVar("T")


class LaundryError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(LaundryError, ValueError):
    """A request field is missing or invalid."""


class NotFoundError(LaundryError, ValueError):
    """The requested entity does not exist or is not visible to the caller."""


class InvalidStateError(LaundryError, ValueError):
    """The order's current status does not permit the operation."""


class UnauthenticatedError(LaundryError):
    """The caller's identity could not be established."""


def not_found_if_empty(items: Sequence[T], message: str) -> Sequence[T]:
    """Apply the empty-listing policy.

    Returns ``items`` unchanged, except that an empty sequence raises
    ``NotFoundError`` while ``settings.empty_list_as_not_found`` is on.
    """
    if not items and settings.empty_list_as_not_found:
        raise NotFoundError(message)
    return items
