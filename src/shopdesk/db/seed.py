"""
shopdesk.db.seed

Bootstrap seeding of default reference data.

Responsibilities:
- Ensure the fallback tenant exists.
- Ensure the `admin` role exists and holds the full permission catalog
  (additive merge, so reseeding never drops permissions).
- Ensure the `superadmin` role exists with the wildcard.
- Ensure one user per default role.

Idempotent: running it again changes nothing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shopdesk.auth.permissions import WILDCARD_TOKEN, default_catalog
from shopdesk.db.models import TenantPlan, TenantStatus
from shopdesk.db.repositories.roles import RoleRepo
from shopdesk.db.repositories.tenants import TenantRepo
from shopdesk.db.repositories.users import UserRepo
from shopdesk.observability.logging import get_logger
from shopdesk.settings import Settings

log = get_logger(__name__)

ADMIN_ROLE_KEY = "admin"
SUPERADMIN_ROLE_KEY = "superadmin"


@dataclass(frozen=True, slots=True)
class SeedResult:
    tenant_id: uuid.UUID | None
    admin_role_id: uuid.UUID
    superadmin_role_id: uuid.UUID
    admin_user_id: uuid.UUID
    superadmin_user_id: uuid.UUID


async def seed_defaults(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> SeedResult:
    async with session_factory() as session:
        tenants = TenantRepo(session)
        roles = RoleRepo(session)
        users = UserRepo(session)

        tenant_id: uuid.UUID | None = None
        if settings.fallback_tenant_subdomain:
            tenant = await tenants.get_by_subdomain(settings.fallback_tenant_subdomain)
            if tenant is None:
                tenant = await tenants.create(
                    subdomain=settings.fallback_tenant_subdomain,
                    company_name=settings.fallback_tenant_subdomain.capitalize(),
                    email=f"{settings.fallback_tenant_subdomain}@example.com",
                    status=TenantStatus.active,
                    plan=TenantPlan.starter,
                )
                log.info("seeded_tenant", subdomain=tenant.subdomain)
            tenant_id = tenant.id

        admin = await roles.get_by_key(ADMIN_ROLE_KEY)
        if admin is None:
            admin = await roles.create(name="Administrator", key=ADMIN_ROLE_KEY)
            log.info("seeded_role", key=ADMIN_ROLE_KEY)
        before = len(admin.permissions or [])
        admin = await roles.add_permissions(admin, default_catalog())
        if len(admin.permissions) != before:
            log.info("merged_permissions", key=ADMIN_ROLE_KEY, added=len(admin.permissions) - before)

        superadmin = await roles.get_by_key(SUPERADMIN_ROLE_KEY)
        if superadmin is None:
            superadmin = await roles.create(
                name="SuperAdmin", key=SUPERADMIN_ROLE_KEY, permissions=[WILDCARD_TOKEN]
            )
            log.info("seeded_role", key=SUPERADMIN_ROLE_KEY)

        admin_user = await users.get_by_email(settings.admin_email)
        if admin_user is None:
            admin_user = await users.create(name="Admin", email=settings.admin_email, role_id=admin.id)
            log.info("seeded_user", email=admin_user.email, role=ADMIN_ROLE_KEY)

        super_user = await users.get_by_email(settings.superadmin_email)
        if super_user is None:
            super_user = await users.create(
                name="Super Admin", email=settings.superadmin_email, role_id=superadmin.id
            )
            log.info("seeded_user", email=super_user.email, role=SUPERADMIN_ROLE_KEY)

        await session.commit()
        return SeedResult(
            tenant_id=tenant_id,
            admin_role_id=admin.id,
            superadmin_role_id=superadmin.id,
            admin_user_id=admin_user.id,
            superadmin_user_id=super_user.id,
        )


# --- Module Notes -----------------------------------------------------------
# Seeded users carry no password hash: credentials are provisioned by the
# external password collaborator. In dev/test, `/api/dev/token` mints tokens.
