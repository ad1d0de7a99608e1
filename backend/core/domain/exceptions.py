"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler
(``core.domain.exception_handler``) maps them to HTTP responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────┬───────────┐
│ Domain Exception    │ Code │ Retryable │
├─────────────────────┼──────┼───────────┤
│ InvalidArgument     │ 400  │ no        │
│ PermissionDenied    │ 403  │ no        │
│ NotFound            │ 404  │ no        │
│ InvalidState        │ 409  │ no        │
│ Conflict            │ 409  │ yes       │
│ Unavailable         │ 503  │ yes       │
└─────────────────────┴──────┴───────────┘

Only ``Conflict`` and ``Unavailable`` are worth retrying.  Every other
kind is permanent for the given input.

Recommended usage inside a service::

    from core.domain.exceptions import InvalidState

    if case.status != CaseStatus.PENDING:
        raise InvalidState(
            current=case.status,
            target=CaseStatus.APPROVED,
            reason="Only pending cases can be reviewed.",
        )
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    ``code`` is a stable machine-readable identifier surfaced in API
    error bodies; ``retryable`` tells the caller whether repeating the
    same call unchanged could succeed.
    """

    code = "domain_error"
    retryable = False

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class InvalidArgument(DomainError):
    """
    Caller-supplied data violates a required precondition, e.g. a
    rejection without a reason or an unknown role value.

    Maps to HTTP 400.
    """

    code = "invalid_argument"

    def __init__(self, message: str = "The request contains an invalid argument.") -> None:
        super().__init__(message)


class PermissionDenied(DomainError):
    """
    The authorization policy refused the action.

    ``reason`` carries the policy's stable reason code
    (``self-deactivation``, ``superadmin-peer-protection``,
    ``insufficient-role``, ...).  Maps to HTTP 403.
    """

    code = "permission_denied"

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        *,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason


class NotFound(DomainError):
    """
    The referenced case or user does not exist.

    Maps to HTTP 404.
    """

    code = "not_found"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class InvalidState(DomainError):
    """
    The requested transition is not valid from the entity's current
    status (e.g. reviewing a case that is no longer pending).

    Not a ``Conflict``: repeating the call will fail the same way.
    Maps to HTTP 409.

    Example::

        raise InvalidState(
            current="REJECTED",
            target="APPROVED",
            reason="Case has already been reviewed.",
        )
    """

    code = "invalid_state"

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class Conflict(DomainError):
    """
    Concurrent modification detected: another operation changed the
    entity between load and write.

    Maps to HTTP 409.
    """

    code = "conflict"
    retryable = True

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class Unavailable(DomainError):
    """
    Persistence failure or timeout.  The caller may retry with backoff.

    Maps to HTTP 503.
    """

    code = "unavailable"
    retryable = True

    def __init__(self, message: str = "The data store is temporarily unavailable.") -> None:
        super().__init__(message)
