"""Domain error kinds shared by every bounded context.

Each module subclasses one of the four kinds below.  The API layer maps
the kind (not the concrete class) to an HTTP status code, so new errors
only need to pick the right parent.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for business-rule violations.

    ``identifier`` carries the offending entity id (or value) so callers
    can report it without parsing the message.
    """

    code = "domain_error"

    def __init__(self, message: str, identifier: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class NotFound(DomainError):
    """A referenced entity does not exist."""

    code = "not_found"


class InvalidArgument(DomainError):
    """An input value is malformed or out of range."""

    code = "invalid_argument"


class Unavailable(DomainError):
    """The entity exists but cannot be used right now."""

    code = "unavailable"


class InvalidState(DomainError):
    """The operation is not allowed in the entity's current state."""

    code = "invalid_state"
