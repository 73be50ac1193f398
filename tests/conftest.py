"""
tests.conftest

Shared fixtures.

Responsibilities:
- In-memory `Directory` fake for unit tests of the auth/tenancy core.
- App fixtures that boot the real FastAPI app on in-memory SQLite.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from shopdesk.api.app import create_app
from shopdesk.auth.passwords import PasswordVerifier
from shopdesk.directory import RoleRecord, TenantRecord, UserRecord
from shopdesk.errors import DirectoryUnavailable
from shopdesk.settings import Settings


@dataclass
class InMemoryDirectory:
    users: dict[uuid.UUID, UserRecord] = field(default_factory=dict)
    roles: dict[uuid.UUID, RoleRecord] = field(default_factory=dict)
    tenants: dict[uuid.UUID, TenantRecord] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    broken: bool = False

    def _track(self, op: str, arg: object) -> None:
        self.calls.append((op, str(arg)))
        if self.broken:
            raise DirectoryUnavailable(f"{op} failed")

    async def lookup_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        self._track("user_by_id", user_id)
        return self.users.get(user_id)

    async def lookup_role_by_id(self, role_id: uuid.UUID) -> RoleRecord | None:
        self._track("role_by_id", role_id)
        return self.roles.get(role_id)

    async def lookup_tenant_by_id(self, tenant_id: uuid.UUID) -> TenantRecord | None:
        self._track("tenant_by_id", tenant_id)
        return self.tenants.get(tenant_id)

    async def lookup_tenant_by_subdomain(self, subdomain: str) -> TenantRecord | None:
        self._track("tenant_by_subdomain", subdomain)
        return next((t for t in self.tenants.values() if t.subdomain == subdomain), None)

    # Builders -------------------------------------------------------------

    def add_role(self, key: str, permissions: list[str], **kw: object) -> RoleRecord:
        role = RoleRecord(
            id=uuid.uuid4(), key=key, name=key.title(), permissions=tuple(permissions), **kw
        )
        self.roles[role.id] = role
        return role

    def add_user(self, role: RoleRecord | None, **kw: object) -> UserRecord:
        uid = uuid.uuid4()
        user = UserRecord(
            id=uid,
            email=f"{uid.hex[:8]}@example.com",
            name="User",
            role_id=role.id if role is not None else None,
            **kw,
        )
        self.users[user.id] = user
        return user

    def add_tenant(self, subdomain: str) -> TenantRecord:
        tenant = TenantRecord(
            id=uuid.uuid4(),
            subdomain=subdomain,
            company_name=subdomain.title(),
            status="active",
            plan="starter",
        )
        self.tenants[tenant.id] = tenant
        return tenant

    def set_permissions(self, role: RoleRecord, permissions: list[str]) -> RoleRecord:
        updated = replace(role, permissions=tuple(permissions))
        self.roles[role.id] = updated
        return updated


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory()


def make_settings(**overrides: object) -> Settings:
    base: dict[str, object] = {
        "env": "test",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "token_scheme": "opaque",
        "jwt_secret": "test-secret-with-enough-length-for-hs256",
    }
    base.update(overrides)
    return Settings(**base)  # type: ignore[arg-type]


class PlainVerifier:
    """Test-only verifier: a stored hash of `plain$<pw>` matches password `<pw>`."""

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"plain${password}"


@asynccontextmanager
async def running_app(
    settings: Settings, *, password_verifier: PasswordVerifier | None = None
) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    app = create_app(settings=settings, password_verifier=password_verifier)
    # httpx ASGITransport does not drive lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://api.test") as client:
            yield app, client


@pytest_asyncio.fixture
async def api() -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    async with running_app(make_settings()) as pair:
        yield pair


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# --- Module Notes -----------------------------------------------------------
# base_url "http://api.test" has two labels, so host-based tenant resolution
# never kicks in unless a test sets the Host header itself.
