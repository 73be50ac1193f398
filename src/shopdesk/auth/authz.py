"""
shopdesk.auth.authz

Authorization gate: identity resolution and permission checks.

Responsibilities:
- Identity gate: resolve a token subject to an active, non-deleted user.
- Permission gate: decide whether the user's role grants a permission string.

Rules:
- No user attached -> UNAUTHORIZED (never PERMISSION_DENIED).
- Missing/deleted/inactive role -> PERMISSION_DENIED (fail closed).
- `*` grants everything; otherwise exact string membership.
- The role is read fresh for every check; nothing is cached between calls.
"""

from __future__ import annotations

import uuid
from typing import Protocol

from shopdesk.auth.permissions import PermissionSet
from shopdesk.directory import RoleDirectory, RoleRecord, UserDirectory, UserRecord
from shopdesk.errors import PermissionDenied, Unauthorized
from shopdesk.observability.logging import get_logger

log = get_logger(__name__)


class _AuthzDirectory(UserDirectory, RoleDirectory, Protocol):
    pass


class Authz:
    """
    Stateless apart from its directory handle; one instance is built by the app
    factory and shared by reference (see `shopdesk.api.app.create_app`).
    """

    def __init__(self, directory: _AuthzDirectory) -> None:
        self._directory = directory

    async def authenticate(self, subject: str) -> UserRecord:
        try:
            user_id = uuid.UUID(subject)
        except ValueError as e:
            raise Unauthorized("User not found", cause=e) from e

        # DirectoryUnavailable propagates as-is; store outages are not auth failures.
        user = await self._directory.lookup_user_by_id(user_id)
        if user is None or user.is_deleted:
            raise Unauthorized("User not found")
        if not user.is_active:
            raise Unauthorized("User is inactive")
        return user

    async def _active_role(self, user: UserRecord) -> RoleRecord | None:
        if user.role_id is None:
            return None
        role = await self._directory.lookup_role_by_id(user.role_id)
        if role is None or role.is_deleted or not role.is_active:
            return None
        return role

    async def check_permission(self, user: UserRecord | None, permission: str) -> None:
        if user is None:
            raise Unauthorized("Unauthorized")

        role = await self._active_role(user)
        if role is None:
            log.warning("permission_denied", reason="role_not_found", permission=permission)
            raise PermissionDenied("Role not found")

        if not PermissionSet.from_strings(role.permissions).grants(permission):
            log.warning(
                "permission_denied",
                reason="missing_permission",
                permission=permission,
                role=role.key,
            )
            raise PermissionDenied("Permission required")

    async def has_permission(self, user: UserRecord | None, permission: str) -> bool:
        try:
            await self.check_permission(user, permission)
        except PermissionDenied:
            return False
        return True

    async def holds_wildcard(self, user: UserRecord) -> bool:
        role = await self._active_role(user)
        return role is not None and PermissionSet.from_strings(role.permissions).wildcard

    async def permissions_for(self, user: UserRecord) -> list[str]:
        role = await self._active_role(user)
        return list(role.permissions) if role is not None else []


# --- Module Notes -----------------------------------------------------------
# Permission checks are tenant-agnostic: the tenant context never participates
# in the decision, so tenant resolution and checks may run in either order.
