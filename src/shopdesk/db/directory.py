"""
shopdesk.db.directory

SQLAlchemy-backed implementation of the `shopdesk.directory` lookups.

Responsibilities:
- Answer user/role/tenant lookups with immutable snapshot records.
- Use one short-lived session per lookup (no shared session, no caching).
- Translate store failures into `DirectoryUnavailable`.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shopdesk.db.models import Role, Tenant, User
from shopdesk.db.repositories.roles import RoleRepo
from shopdesk.db.repositories.tenants import TenantRepo
from shopdesk.db.repositories.users import UserRepo
from shopdesk.directory import RoleRecord, TenantRecord, UserRecord
from shopdesk.errors import DirectoryUnavailable


def tenant_record(row: Tenant) -> TenantRecord:
    return TenantRecord(
        id=row.id,
        subdomain=row.subdomain,
        company_name=row.company_name,
        status=str(row.status),
        plan=str(row.plan),
        settings=dict(row.settings or {}),
    )


def role_record(row: Role) -> RoleRecord:
    return RoleRecord(
        id=row.id,
        key=row.key,
        name=row.name,
        permissions=tuple(row.permissions or ()),
        is_active=row.is_active,
        is_deleted=row.is_deleted,
    )


def user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        name=row.name,
        role_id=row.role_id,
        is_active=row.is_active,
        is_deleted=row.is_deleted,
    )


class SqlDirectory:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, what: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            raise DirectoryUnavailable(f"{what} lookup failed", cause=e) from e

    async def lookup_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        async with self._session("user") as session:
            row = await UserRepo(session).get(user_id)
            return user_record(row) if row is not None else None

    async def lookup_role_by_id(self, role_id: uuid.UUID) -> RoleRecord | None:
        async with self._session("role") as session:
            row = await RoleRepo(session).get(role_id)
            return role_record(row) if row is not None else None

    async def lookup_tenant_by_id(self, tenant_id: uuid.UUID) -> TenantRecord | None:
        async with self._session("tenant") as session:
            row = await TenantRepo(session).get(tenant_id)
            return tenant_record(row) if row is not None else None

    async def lookup_tenant_by_subdomain(self, subdomain: str) -> TenantRecord | None:
        async with self._session("tenant") as session:
            row = await TenantRepo(session).get_by_subdomain(subdomain)
            return tenant_record(row) if row is not None else None


# --- Module Notes -----------------------------------------------------------
# Records are built inside the session scope, so no lazy load can happen after
# the session closes.
