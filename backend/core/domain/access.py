"""
core.domain.access — The authorization policy.

A stateless decision function that every lifecycle and account service
consults before mutating anything::

    decision = decide(actor, Action.CHANGE_USER_ACTIVE_STATUS, target, value=False)
    if not decision:
        ...  # decision.reason == "self-deactivation"

or, raising straight away::

    require(actor, Action.REVIEW_CASE, case)

Rule table
----------
┌───────────────────────────┬────────────────────────────────────────────┐
│ Action                    │ Allowed when                               │
├───────────────────────────┼────────────────────────────────────────────┤
│ SUBMIT_CASE               │ actor is active                            │
│ REVIEW_CASE (case)        │ actor is ADMIN/SUPERADMIN and active       │
│ ATTACH_TO_CASE (case)     │ actor owns the case and is active          │
│ CHANGE_USER_ROLE          │ actor is SUPERADMIN, target is not another │
│   (target, new role)      │ SUPERADMIN                                 │
│ CHANGE_USER_ACTIVE_STATUS │ actor is SUPERADMIN, not deactivating self │
│   (target, new flag)      │ or another SUPERADMIN                      │
│ VIEW_ALL_USERS            │ actor is ADMIN/SUPERADMIN                  │
│ VIEW_ALL_CASES            │ actor is ADMIN/SUPERADMIN                  │
│ VIEW_OWN_CASES (case)     │ actor owns the case                        │
└───────────────────────────┴────────────────────────────────────────────┘

Account changes are evaluated in a fixed order and the first failing
rule wins: (1) self-deactivation, (2) super-admin peer protection,
(3) the general role check.

Malformed calls (unknown action, no actor, missing target or value)
are caller bugs and raise ``InvalidArgument`` instead of returning a
decision.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from accounts.models import Role
from core.domain.exceptions import InvalidArgument, PermissionDenied


class Action(str, enum.Enum):
    SUBMIT_CASE = "submit_case"
    REVIEW_CASE = "review_case"
    ATTACH_TO_CASE = "attach_to_case"
    CHANGE_USER_ROLE = "change_user_role"
    CHANGE_USER_ACTIVE_STATUS = "change_user_active_status"
    VIEW_ALL_USERS = "view_all_users"
    VIEW_ALL_CASES = "view_all_cases"
    VIEW_OWN_CASES = "view_own_cases"


class DenyReason:
    """Stable reason codes attached to a denied decision."""

    SELF_DEACTIVATION = "self-deactivation"
    SUPERADMIN_PEER_PROTECTION = "superadmin-peer-protection"
    INSUFFICIENT_ROLE = "insufficient-role"
    INACTIVE_ACTOR = "inactive-actor"
    NOT_CASE_OWNER = "not-case-owner"


_DENY_MESSAGES: dict[str, str] = {
    DenyReason.SELF_DEACTIVATION: "You cannot deactivate your own account.",
    DenyReason.SUPERADMIN_PEER_PROTECTION: "Another Super Admin's account cannot be changed.",
    DenyReason.INSUFFICIENT_ROLE: "Your role does not allow this action.",
    DenyReason.INACTIVE_ACTOR: "Your account is not active.",
    DenyReason.NOT_CASE_OWNER: "Only the owner of this case can do this.",
}


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy evaluation.  Truthy when allowed."""

    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def message(self) -> str:
        return _DENY_MESSAGES.get(self.reason or "", "Permission denied.")


ALLOW = Decision(True)


def _deny(reason: str) -> Decision:
    return Decision(False, reason)


# ── Per-action rules ────────────────────────────────────────────────


def _is_reviewer(actor: Any) -> bool:
    return actor.role in Role.reviewer_roles()


def _same_user(a: Any, b: Any) -> bool:
    return a.pk == b.pk


def _decide_submit(actor, target, value) -> Decision:
    return ALLOW if actor.is_active else _deny(DenyReason.INACTIVE_ACTOR)


def _decide_review(actor, target, value) -> Decision:
    if not _is_reviewer(actor):
        return _deny(DenyReason.INSUFFICIENT_ROLE)
    if not actor.is_active:
        return _deny(DenyReason.INACTIVE_ACTOR)
    return ALLOW


def _decide_attach(actor, target, value) -> Decision:
    if actor.pk != target.user_id:
        return _deny(DenyReason.NOT_CASE_OWNER)
    if not actor.is_active:
        return _deny(DenyReason.INACTIVE_ACTOR)
    return ALLOW


def _decide_change_role(actor, target, value) -> Decision:
    if target.role == Role.SUPERADMIN and not _same_user(actor, target):
        return _deny(DenyReason.SUPERADMIN_PEER_PROTECTION)
    if actor.role != Role.SUPERADMIN:
        return _deny(DenyReason.INSUFFICIENT_ROLE)
    return ALLOW


def _decide_change_active(actor, target, value) -> Decision:
    deactivating = value is False
    if deactivating and _same_user(actor, target):
        return _deny(DenyReason.SELF_DEACTIVATION)
    if deactivating and target.role == Role.SUPERADMIN:
        return _deny(DenyReason.SUPERADMIN_PEER_PROTECTION)
    if actor.role != Role.SUPERADMIN:
        return _deny(DenyReason.INSUFFICIENT_ROLE)
    return ALLOW


def _decide_view_all(actor, target, value) -> Decision:
    return ALLOW if _is_reviewer(actor) else _deny(DenyReason.INSUFFICIENT_ROLE)


def _decide_view_own(actor, target, value) -> Decision:
    return ALLOW if actor.pk == target.user_id else _deny(DenyReason.NOT_CASE_OWNER)


# action → (rule, needs_target, needs_value)
_RULES = {
    Action.SUBMIT_CASE: (_decide_submit, False, False),
    Action.REVIEW_CASE: (_decide_review, True, False),
    Action.ATTACH_TO_CASE: (_decide_attach, True, False),
    Action.CHANGE_USER_ROLE: (_decide_change_role, True, True),
    Action.CHANGE_USER_ACTIVE_STATUS: (_decide_change_active, True, True),
    Action.VIEW_ALL_USERS: (_decide_view_all, False, False),
    Action.VIEW_ALL_CASES: (_decide_view_all, False, False),
    Action.VIEW_OWN_CASES: (_decide_view_own, True, False),
}


def decide(actor: Any, action: Action | str, target: Any = None, *, value: Any = None) -> Decision:
    """
    Evaluate ``action`` for ``actor`` against ``target``.

    Args:
        actor:  The authenticated user (anything exposing ``pk``, ``role``
                and ``is_active``).
        action: An ``Action`` member or its string value.
        target: The case or user acted upon, where the action has one.
        value:  The requested new value for account changes (the new role,
                or the new ``is_active`` flag).

    Returns:
        A ``Decision``; never raises for well-formed input.

    Raises:
        InvalidArgument: unknown action, missing actor, missing target or
            missing value for an action that requires one.
    """
    if actor is None:
        raise InvalidArgument("An actor is required for an authorization decision.")
    try:
        action = Action(action)
    except ValueError:
        raise InvalidArgument(f"Unknown action: {action!r}.") from None

    rule, needs_target, needs_value = _RULES[action]
    if needs_target and target is None:
        raise InvalidArgument(f"Action '{action.value}' requires a target.")
    if needs_value and value is None:
        raise InvalidArgument(f"Action '{action.value}' requires a new value.")
    return rule(actor, target, value)


def require(actor: Any, action: Action | str, target: Any = None, *, value: Any = None) -> None:
    """
    Like ``decide`` but raises ``PermissionDenied`` on a deny.

    The raised exception carries the decision's reason code.
    """
    decision = decide(actor, action, target, value=value)
    if not decision:
        raise PermissionDenied(decision.message, reason=decision.reason)
