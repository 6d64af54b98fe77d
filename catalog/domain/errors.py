"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations


class DomainError(Exception):
    """Base for all domain errors."""

    kind = "domain"


class NotFoundError(DomainError):
    """Resource not found."""

    kind = "not_found"


class ValidationError(DomainError):
    """Invalid input or state."""

    kind = "validation"


class ConflictError(DomainError):
    """Resource conflict (e.g., duplicate id)."""

    kind = "conflict"


class AuthError(DomainError):
    """Missing, invalid or expired credential."""

    kind = "auth"


class ForbiddenError(AuthError):
    """Authenticated caller is not allowed to see the resource."""

    kind = "forbidden"


class UpstreamError(DomainError):
    """Store or external provider failure; keeps the underlying cause."""

    kind = "upstream"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
