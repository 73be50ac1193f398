"""
shopdesk.directory

Read-only lookup interfaces consumed by the auth and tenancy core.

Responsibilities:
- Define immutable snapshot records for tenants, roles and users.
- Define the lookup protocols the core depends on (implemented by
  `shopdesk.db.directory.SqlDirectory` and by in-memory fakes in tests).

Contract:
- Every lookup is a pure read: it returns a record or None.
- A store failure raises `shopdesk.errors.DirectoryUnavailable`; it must never be
  reported as "not found".
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class TenantRecord:
    id: uuid.UUID
    subdomain: str
    company_name: str
    status: str
    plan: str
    settings: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True, slots=True)
class RoleRecord:
    id: uuid.UUID
    key: str
    name: str
    permissions: tuple[str, ...]
    is_active: bool = True
    is_deleted: bool = False


@dataclass(frozen=True, slots=True)
class UserRecord:
    id: uuid.UUID
    email: str
    name: str
    role_id: uuid.UUID | None
    is_active: bool = True
    is_deleted: bool = False


class UserDirectory(Protocol):
    async def lookup_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None: ...


class RoleDirectory(Protocol):
    async def lookup_role_by_id(self, role_id: uuid.UUID) -> RoleRecord | None: ...


class TenantDirectory(Protocol):
    async def lookup_tenant_by_id(self, tenant_id: uuid.UUID) -> TenantRecord | None: ...

    async def lookup_tenant_by_subdomain(self, subdomain: str) -> TenantRecord | None: ...


class Directory(UserDirectory, RoleDirectory, TenantDirectory, Protocol):
    """Everything the request path needs to read."""


# --- Module Notes -----------------------------------------------------------
# Records are snapshots taken per lookup. The core never holds on to them beyond
# a single request, so role/tenant changes are visible on the next request.
