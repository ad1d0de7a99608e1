"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain exceptions with stable codes and a retryable flag.
exception_handler  DRF handler mapping domain exceptions to responses.
access             The authorization policy (``decide`` / ``require``).
store              ``PortalStore``, the persistence collaborator.
transactions       Atomic blocks, statement timeouts, compare-and-set.
notifications      Fire-and-forget notification dispatch.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidState
    from core.domain.access import Action, require
    from core.domain.store import PortalStore
    from core.domain.notifications import NotificationService
"""
