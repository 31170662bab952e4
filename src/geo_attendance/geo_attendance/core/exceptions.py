from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        if code:
            self.code = code


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "invalid"


class ConfigurationError(DomainError):
    """Required configuration is missing (no active offices, no department policy)."""

    code = "configuration_missing"


class PolicyViolationError(ValidationError):
    """A department policy condition was not met; the message says which one."""

    code = "policy_violation"


class LocationRejectedError(ValidationError):
    """The location sample did not place the user at an office."""

    code = "location_rejected"

    def __init__(self, message: str, *, recommendations: Sequence[str] = (), code: Optional[str] = None):
        super().__init__(message, code=code)
        self.recommendations = list(recommendations)


class NotFoundError(DomainError):
    code = "not_found"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"
