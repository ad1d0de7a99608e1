"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the result
wrapped in a DRF ``Response``.

Architecture
------------
- ``UserManagementService``       — role changes, activate / deactivate,
                                    user listing (super-admin governance).
- ``SuperAdminBootstrapService``  — one-off seeding of the first
                                    SUPERADMIN account.
- ``CurrentUserService``          — "Me" endpoint helpers.

Accounts themselves are created by the external identity provider; the
portal only changes ``role`` and ``is_active`` (plus the user's own
profile fields through the "Me" endpoint).
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import QuerySet

from core.domain.access import Action, require
from core.domain.exceptions import InvalidArgument, InvalidState
from core.domain.notifications import NotificationService
from core.domain.store import PortalStore
from core.domain.transactions import bounded_atomic
from core.models import NotificationType

from .models import Role

User = get_user_model()

logger = logging.getLogger(__name__)


def _parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidArgument(
            f"Unknown role {value!r}. Must be one of: {', '.join(Role.values)}."
        ) from None


# ═══════════════════════════════════════════════════════════════════
#  User Management Service
# ═══════════════════════════════════════════════════════════════════


class UserManagementService:
    """
    Super-admin governance over accounts.

    Every mutation follows the same sequence: validate the requested
    value, load the target (``NotFound``), consult the authorization
    policy (``PermissionDenied`` with a reason code), persist through
    the store, then notify the target user.  Notification failures are
    logged and never undo the change.

    ``store`` and ``notifier`` default to ``PortalStore()`` and
    ``NotificationService``.
    """

    def __init__(self, store: PortalStore | None = None, notifier: type[NotificationService] | None = None) -> None:
        self.store = store or PortalStore()
        self.notifier = notifier or NotificationService

    def list_users(
        self,
        actor: User,
        *,
        role: str | None = None,
        is_active: bool | None = None,
    ) -> QuerySet[User]:
        """
        Return all users, optionally filtered by ``role`` and
        ``is_active``.  ADMIN and SUPERADMIN only.
        """
        require(actor, Action.VIEW_ALL_USERS)
        qs = User.objects.order_by("date_joined", "pk")
        if role is not None:
            qs = qs.filter(role=_parse_role(role))
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        return qs

    def get_user(self, actor: User, user_id: Any) -> User:
        require(actor, Action.VIEW_ALL_USERS)
        return self.store.load_actor(user_id)

    def change_user_role(
        self,
        actor: User,
        target_user_id: Any,
        new_role: Any,
        *,
        timeout: float | None = None,
    ) -> User:
        """
        Set ``target.role`` to ``new_role``.

        A SUPERADMIN may change its own role (including demoting itself);
        it may not change another SUPERADMIN's role.

        Raises
        ------
        InvalidArgument   ``new_role`` is not a known role.
        NotFound          No such user.
        PermissionDenied  Policy refused (``insufficient-role`` or
                          ``superadmin-peer-protection``).
        Unavailable       Storage failure.
        """
        role = _parse_role(new_role)
        target = self.store.load_actor(target_user_id, timeout=timeout)
        require(actor, Action.CHANGE_USER_ROLE, target, value=role)

        updated = self.store.save_actor(target.pk, {"role": role}, timeout=timeout)
        logger.info(
            "User %s role changed %s -> %s by %s",
            updated.pk, target.role, role, actor.pk,
        )
        self.notifier.dispatch(
            actor_id=actor.pk,
            target_id=updated.pk,
            event_kind=NotificationType.ROLE_CHANGED,
            recipients=updated,
            related_object=updated,
        )
        return updated

    def change_user_active_status(
        self,
        actor: User,
        target_user_id: Any,
        new_active: Any,
        *,
        timeout: float | None = None,
    ) -> User:
        """
        Activate or deactivate ``target``.

        Nobody can deactivate their own account, and no SUPERADMIN can
        deactivate another SUPERADMIN.

        Raises
        ------
        InvalidArgument   ``new_active`` is not a bool.
        NotFound          No such user.
        PermissionDenied  ``self-deactivation``,
                          ``superadmin-peer-protection`` or
                          ``insufficient-role``.
        Unavailable       Storage failure.
        """
        if not isinstance(new_active, bool):
            raise InvalidArgument("is_active must be a boolean.")
        target = self.store.load_actor(target_user_id, timeout=timeout)
        require(actor, Action.CHANGE_USER_ACTIVE_STATUS, target, value=new_active)

        updated = self.store.save_actor(target.pk, {"is_active": new_active}, timeout=timeout)
        logger.info(
            "User %s %s by %s",
            updated.pk, "activated" if new_active else "deactivated", actor.pk,
        )
        self.notifier.dispatch(
            actor_id=actor.pk,
            target_id=updated.pk,
            event_kind=NotificationType.STATUS_CHANGED,
            recipients=updated,
            related_object=updated,
        )
        return updated


# ═══════════════════════════════════════════════════════════════════
#  Super-admin Bootstrap Service
# ═══════════════════════════════════════════════════════════════════


class SuperAdminBootstrapService:
    """
    Seeds the very first SUPERADMIN.

    Allowed only while no SUPERADMIN exists, so it cannot be used to
    mint additional super-admins once the portal is governed.
    """

    REQUIRED_FIELDS = ("phone_number", "full_name", "address")

    def __init__(self, store: PortalStore | None = None) -> None:
        self.store = store or PortalStore()

    def superadmin_exists(self) -> bool:
        return self.store.superadmin_exists()

    def seed_first_superadmin(
        self,
        *,
        phone_number: str,
        full_name: str,
        address: str,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        """
        Create the first SUPERADMIN account.

        ``password`` is optional: the portal authenticates through the
        identity provider, so an unusable password is set by default.

        Raises
        ------
        InvalidState     A SUPERADMIN already exists.
        InvalidArgument  A required field is blank, or the phone number
                         is already registered.
        """
        values = {"phone_number": phone_number, "full_name": full_name, "address": address}
        missing = [name for name in self.REQUIRED_FIELDS if not (values[name] or "").strip()]
        if missing:
            raise InvalidArgument(f"Missing required field(s): {', '.join(missing)}.")
        phone_number = phone_number.strip()

        with bounded_atomic():
            self.store.lock_superadmin_seeding()
            if self.superadmin_exists():
                raise InvalidState(reason="A Super Admin already exists.")
            if User.objects.filter(phone_number=phone_number).exists():
                raise InvalidArgument("A user with this phone number already exists.")
            try:
                user = User.objects.create_user(
                    username=phone_number,
                    password=password,
                    email=email or "",
                    phone_number=phone_number,
                    full_name=full_name.strip(),
                    address=address.strip(),
                    role=Role.SUPERADMIN,
                    is_staff=True,
                )
            except IntegrityError:
                raise InvalidArgument("A user with this phone number already exists.") from None

        logger.info("Seeded first Super Admin user %s", user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """Helpers for the "Me" endpoint."""

    #: Profile fields a user may edit on their own account.
    EDITABLE_FIELDS = frozenset({"full_name", "email", "address", "profile_picture_url"})

    @staticmethod
    def get_profile(user: User) -> User:
        return User.objects.get(pk=user.pk)

    @classmethod
    def update_profile(cls, user: User, validated_data: dict[str, Any]) -> User:
        """
        Update the authenticated user's own profile fields.

        ``role``, ``is_active`` and ``phone_number`` can never be
        changed through this path.
        """
        changes = {k: v for k, v in validated_data.items() if k in cls.EDITABLE_FIELDS}
        if not changes:
            return cls.get_profile(user)
        return PortalStore().save_actor(user.pk, changes)
