"""
shopdesk.api.routers.roles

Role administration and the permission catalog.

Responsibilities:
- CRUD (soft delete) for roles, each route guarded by `hr.roles.<action>`.
- Serve the grouped permission catalog for role editors.
- Run advisory catalog validation on authored permission lists.
- Keep the `superadmin` role and platform-level permissions out of reach of
  callers that do not already hold the wildcard.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from shopdesk.api.deps import db_session
from shopdesk.auth.authz import Authz
from shopdesk.auth.deps import authz_from_app, require_permission
from shopdesk.auth.permissions import (
    ACTIONS,
    PERMISSION_GROUPS,
    WILDCARD_TOKEN,
    default_catalog,
    is_reserved,
    unknown_permissions,
)
from shopdesk.db.models import Role
from shopdesk.db.repositories.roles import RoleRepo
from shopdesk.db.seed import SUPERADMIN_ROLE_KEY
from shopdesk.directory import UserRecord
from shopdesk.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from shopdesk.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["roles"])


class RoleView(BaseModel):
    id: uuid.UUID
    name: str
    key: str
    description: str
    permissions: list[str]
    # Entries outside the catalog (custom or stale). Informational only.
    unknown_permissions: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RolePage(BaseModel):
    items: list[RoleView]
    total: int


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    key: str = Field(min_length=1, max_length=64)
    description: str = ""
    permissions: list[str] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    key: str | None = Field(default=None, min_length=1, max_length=64)
    description: str | None = None
    permissions: list[str] | None = None
    is_active: bool | None = None


class PermissionItemView(BaseModel):
    key: str
    name: str


class PermissionGroupView(BaseModel):
    key: str
    name: str
    items: list[PermissionItemView]


class PermissionCatalogView(BaseModel):
    actions: list[str]
    groups: list[PermissionGroupView]


def _view(role: Role) -> RoleView:
    perms = list(role.permissions or [])
    return RoleView(
        id=role.id,
        name=role.name,
        key=role.key,
        description=role.description,
        permissions=perms,
        unknown_permissions=unknown_permissions(perms, default_catalog()),
        is_active=role.is_active,
        created_at=role.created_at,
        updated_at=role.updated_at,
    )


async def _check_authored(
    authz: Authz,
    user: UserRecord,
    *,
    key: str,
    permissions: list[str],
    previous: list[str] | None = None,
) -> None:
    if WILDCARD_TOKEN in permissions and key != SUPERADMIN_ROLE_KEY:
        raise ValidationFailed(f"'{WILDCARD_TOKEN}' is reserved for the {SUPERADMIN_ROLE_KEY} role")

    # Only newly granted entries count; a role may keep what a superadmin gave it.
    kept = set(previous or [])
    granted = [p for p in permissions if p not in kept and is_reserved(p)]
    if granted and not await authz.holds_wildcard(user):
        log.warning("role_reserved_grant_denied", key=key, permissions=granted)
        raise PermissionDenied("Wildcard required to grant platform permissions")

    unknown = unknown_permissions(permissions, default_catalog())
    if unknown:
        # Advisory: custom permissions are accepted for forward compatibility.
        log.warning("role_unknown_permissions", key=key, unknown=unknown)


@router.get(
    "/permissions",
    response_model=PermissionCatalogView,
    dependencies=[Depends(require_permission("hr.roles.access"))],
)
async def list_permissions() -> PermissionCatalogView:
    return PermissionCatalogView(
        actions=list(ACTIONS),
        groups=[
            PermissionGroupView(
                key=g.key,
                name=g.name,
                items=[PermissionItemView(key=i.key, name=i.name) for i in g.items],
            )
            for g in PERMISSION_GROUPS
        ],
    )


@router.get(
    "/roles",
    response_model=RolePage,
    dependencies=[Depends(require_permission("hr.roles.access"))],
)
async def list_roles(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str = "",
    is_active: bool | None = None,
    session: AsyncSession = Depends(db_session),
) -> RolePage:
    items, total = await RoleRepo(session).list(
        search=search, is_active=is_active, offset=(page - 1) * limit, limit=limit
    )
    return RolePage(items=[_view(r) for r in items], total=total)


@router.get(
    "/roles/{role_id}",
    response_model=RoleView,
    dependencies=[Depends(require_permission("hr.roles.access"))],
)
async def get_role(role_id: uuid.UUID, session: AsyncSession = Depends(db_session)) -> RoleView:
    role = await RoleRepo(session).get(role_id)
    if role is None:
        raise NotFound("Role not found")
    return _view(role)


@router.post("/roles", response_model=RoleView, status_code=HTTP_201_CREATED)
async def create_role(
    body: RoleCreate,
    user: UserRecord = Depends(require_permission("hr.roles.create")),
    authz: Authz = Depends(authz_from_app),
    session: AsyncSession = Depends(db_session),
) -> RoleView:
    if body.key == SUPERADMIN_ROLE_KEY:
        raise ValidationFailed(f"Role key '{SUPERADMIN_ROLE_KEY}' is reserved")
    await _check_authored(authz, user, key=body.key, permissions=body.permissions)
    repo = RoleRepo(session)
    if await repo.get_by_key(body.key) is not None:
        raise Conflict("Role key already exists")
    try:
        role = await repo.create(
            name=body.name,
            key=body.key,
            description=body.description,
            permissions=body.permissions,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise Conflict("Role key already exists", cause=e) from e
    log.info("role_created", key=role.key, permissions=len(role.permissions))
    return _view(role)


async def _check_superadmin_edit(authz: Authz, user: UserRecord, body: RoleUpdate) -> None:
    if not await authz.holds_wildcard(user):
        log.warning("superadmin_edit_denied", user_id=str(user.id))
        raise PermissionDenied("Wildcard required to edit the superadmin role")
    # The superadmin role always holds the wildcard and stays active.
    if body.permissions is not None and WILDCARD_TOKEN not in body.permissions:
        raise ValidationFailed(f"The {SUPERADMIN_ROLE_KEY} role must keep '{WILDCARD_TOKEN}'")
    if body.is_active is False:
        raise ValidationFailed(f"The {SUPERADMIN_ROLE_KEY} role cannot be deactivated")


@router.patch("/roles/{role_id}", response_model=RoleView)
async def update_role(
    role_id: uuid.UUID,
    body: RoleUpdate,
    user: UserRecord = Depends(require_permission("hr.roles.update")),
    authz: Authz = Depends(authz_from_app),
    session: AsyncSession = Depends(db_session),
) -> RoleView:
    repo = RoleRepo(session)
    current = await repo.get(role_id)
    if current is None:
        raise NotFound("Role not found")

    renamed = body.key is not None and body.key != current.key
    if renamed and SUPERADMIN_ROLE_KEY in (body.key, current.key):
        raise ValidationFailed(f"Role key '{SUPERADMIN_ROLE_KEY}' cannot be reassigned")
    if current.key == SUPERADMIN_ROLE_KEY:
        await _check_superadmin_edit(authz, user, body)
    if body.permissions is not None or renamed:
        previous = list(current.permissions or [])
        await _check_authored(
            authz,
            user,
            key=body.key if body.key is not None else current.key,
            permissions=body.permissions if body.permissions is not None else previous,
            previous=previous,
        )

    try:
        role = await repo.update(
            role_id,
            name=body.name,
            key=body.key,
            description=body.description,
            permissions=body.permissions,
            is_active=body.is_active,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise Conflict("Role key already exists", cause=e) from e
    if role is None:
        raise NotFound("Role not found")
    log.info("role_updated", key=role.key)
    return _view(role)


@router.delete(
    "/roles/{role_id}",
    status_code=HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("hr.roles.delete"))],
)
async def delete_role(role_id: uuid.UUID, session: AsyncSession = Depends(db_session)) -> None:
    repo = RoleRepo(session)
    role = await repo.get(role_id)
    if role is None:
        raise NotFound("Role not found")
    if role.key == SUPERADMIN_ROLE_KEY:
        raise ValidationFailed(f"The {SUPERADMIN_ROLE_KEY} role cannot be deleted")
    await repo.soft_delete(role_id)
    await session.commit()
    log.info("role_deleted", role_id=str(role_id))


# --- Module Notes -----------------------------------------------------------
# Permission changes take effect on the next request: the gate re-reads the
# role on every check.
