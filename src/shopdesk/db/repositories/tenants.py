"""
shopdesk.db.repositories.tenants

Repository for `Tenant` entities.

Responsibilities:
- Fetch tenants by id or subdomain for the directory and the admin API.
- List tenants (newest first) and create new ones.
- Validate subdomain shape before a tenant is created.
"""

from __future__ import annotations

import re
import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopdesk.db.models import Tenant, TenantPlan, TenantStatus, default_tenant_settings

_SUBDOMAIN_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{1,18})[a-z0-9]$")


def is_valid_subdomain(subdomain: str) -> bool:
    # 3-20 chars of [a-z0-9-], no leading/trailing hyphen.
    return bool(_SUBDOMAIN_RE.fullmatch(subdomain))


class TenantRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, tenant_id: uuid.UUID) -> Tenant | None:
        return await self._session.get(Tenant, tenant_id)

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        stmt = select(Tenant).where(Tenant.subdomain == subdomain)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list(self, *, offset: int = 0, limit: int = 50) -> tuple[list[Tenant], int]:
        total = (await self._session.execute(select(func.count()).select_from(Tenant))).scalar_one()
        stmt = select(Tenant).order_by(Tenant.created_at.desc()).offset(offset).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all()), int(total)

    async def create(
        self,
        *,
        subdomain: str,
        company_name: str,
        email: str = "",
        phone: str = "",
        status: TenantStatus = TenantStatus.active,
        plan: TenantPlan = TenantPlan.starter,
        settings: dict[str, Any] | None = None,
    ) -> Tenant:
        tenant = Tenant(
            subdomain=subdomain,
            company_name=company_name,
            email=email,
            phone=phone,
            status=status,
            plan=plan,
            settings=settings if settings is not None else default_tenant_settings(),
        )
        self._session.add(tenant)
        await self._session.flush()
        return tenant


# --- Module Notes -----------------------------------------------------------
# Tenants are never created implicitly; resolution only reads through this repo.
