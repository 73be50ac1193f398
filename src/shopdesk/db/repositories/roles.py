"""
shopdesk.db.repositories.roles

Repository for `Role` entities.

Responsibilities:
- Read live (non-deleted) roles by id or key.
- Create/update/soft-delete roles for the administration API.
- Merge permissions additively (seeding).
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopdesk.auth.permissions import merge_permissions
from shopdesk.db.models import Role


class RoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, role_id: uuid.UUID, *, for_update: bool = False) -> Role | None:
        stmt = select(Role).where(Role.id == role_id, Role.is_deleted.is_(False))
        if for_update:
            stmt = stmt.with_for_update()
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_key(self, key: str) -> Role | None:
        stmt = select(Role).where(Role.key == key, Role.is_deleted.is_(False))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list(
        self,
        *,
        search: str = "",
        is_active: bool | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Role], int]:
        conds = [Role.is_deleted.is_(False)]
        if search:
            pattern = f"%{search}%"
            conds.append(or_(Role.name.ilike(pattern), Role.key.ilike(pattern)))
        if is_active is not None:
            conds.append(Role.is_active.is_(is_active))

        total = (
            await self._session.execute(select(func.count()).select_from(Role).where(*conds))
        ).scalar_one()
        stmt = (
            select(Role).where(*conds).order_by(Role.created_at.desc()).offset(offset).limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all()), int(total)

    async def create(
        self,
        *,
        name: str,
        key: str,
        description: str = "",
        permissions: Iterable[str] = (),
    ) -> Role:
        role = Role(
            name=name,
            key=key,
            description=description,
            permissions=list(dict.fromkeys(permissions)),
            is_active=True,
            is_deleted=False,
        )
        self._session.add(role)
        await self._session.flush()
        return role

    async def update(
        self,
        role_id: uuid.UUID,
        *,
        name: str | None = None,
        key: str | None = None,
        description: str | None = None,
        permissions: Iterable[str] | None = None,
        is_active: bool | None = None,
    ) -> Role | None:
        role = await self.get(role_id, for_update=True)
        if role is None:
            return None
        if name is not None:
            role.name = name
        if key is not None:
            role.key = key
        if description is not None:
            role.description = description
        if permissions is not None:
            # Explicit replacement by an administrator (unlike add_permissions).
            role.permissions = list(dict.fromkeys(permissions))
        if is_active is not None:
            role.is_active = is_active
        await self._session.flush()
        return role

    async def soft_delete(self, role_id: uuid.UUID) -> bool:
        role = await self.get(role_id, for_update=True)
        if role is None:
            return False
        role.is_deleted = True
        role.is_active = False
        await self._session.flush()
        return True

    async def add_permissions(self, role: Role, permissions: Iterable[str]) -> Role:
        merged = merge_permissions(role.permissions or [], permissions)
        if merged != list(role.permissions or []):
            # Reassign (not mutate) so SQLAlchemy detects the JSON change.
            role.permissions = merged
            await self._session.flush()
        return role


# --- Module Notes -----------------------------------------------------------
# add_permissions is a union: reseeding never removes permissions a role holds.
