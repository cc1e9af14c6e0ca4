"""
Domain error taxonomy.

Every error carries the HTTP status it maps to and a client-safe message.
Store failures are wrapped in Unavailable; the original exception is kept as
``__cause__`` for server-side logging only.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain operation failures."""

    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(DomainError):
    """Required input fields are missing or malformed."""

    status_code = 400
    default_message = "Missing fields"


class Unauthenticated(DomainError):
    """Token missing, malformed, expired or badly signed."""

    status_code = 401
    default_message = "Invalid token"


class MissingToken(Unauthenticated):
    """No Authorization header at all."""

    status_code = 403
    default_message = "No token"


class Forbidden(DomainError):
    """Caller's role does not permit the operation."""

    status_code = 403
    default_message = "Forbidden"


class NotFound(DomainError):
    """Referenced entity does not exist."""

    status_code = 404
    default_message = "Not found"


class InvalidCredentials(DomainError):
    """Password does not match the stored digest."""

    status_code = 401
    default_message = "Invalid password"


class Unavailable(DomainError):
    """The graph store failed while serving the operation."""

    status_code = 500
    default_message = "Service unavailable"
