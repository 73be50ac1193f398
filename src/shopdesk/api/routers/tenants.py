"""
shopdesk.api.routers.tenants

Tenant endpoints.

Responsibilities:
- Global provisioning for platform operators (`tenants.*` permissions are not
  part of the catalog, so only the wildcard role reaches them).
- The tenant-scoped "current tenant" view, resolved through `tenant_context`.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from shopdesk.api.deps import db_session
from shopdesk.auth.deps import require_permission
from shopdesk.db.directory import tenant_record
from shopdesk.db.models import TenantPlan, TenantStatus
from shopdesk.db.repositories.tenants import TenantRepo, is_valid_subdomain
from shopdesk.directory import TenantRecord
from shopdesk.errors import Conflict, ValidationFailed
from shopdesk.observability.logging import get_logger
from shopdesk.tenancy.context import TenantContext
from shopdesk.tenancy.deps import tenant_context

log = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["tenants"])


class TenantView(BaseModel):
    id: uuid.UUID
    subdomain: str
    company_name: str
    status: str
    plan: str
    settings: dict[str, Any]


class TenantPage(BaseModel):
    items: list[TenantView]
    total: int


class TenantCreate(BaseModel):
    subdomain: str = Field(min_length=3, max_length=20)
    company_name: str = Field(min_length=1, max_length=256)
    email: str = ""
    phone: str = ""
    plan: TenantPlan = TenantPlan.starter
    status: TenantStatus = TenantStatus.active


class CurrentTenantResponse(BaseModel):
    tenant: TenantView
    store_id: str | None


def _view(t: TenantRecord) -> TenantView:
    return TenantView(
        id=t.id,
        subdomain=t.subdomain,
        company_name=t.company_name,
        status=t.status,
        plan=t.plan,
        settings=t.settings,
    )


@router.get(
    "/tenants",
    response_model=TenantPage,
    dependencies=[Depends(require_permission("tenants.access"))],
)
async def list_tenants(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    session: AsyncSession = Depends(db_session),
) -> TenantPage:
    rows, total = await TenantRepo(session).list(offset=(page - 1) * limit, limit=limit)
    return TenantPage(items=[_view(tenant_record(r)) for r in rows], total=total)


@router.post(
    "/tenants",
    response_model=TenantView,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(require_permission("tenants.create"))],
)
async def create_tenant(body: TenantCreate, session: AsyncSession = Depends(db_session)) -> TenantView:
    if not is_valid_subdomain(body.subdomain):
        raise ValidationFailed("Invalid subdomain")
    repo = TenantRepo(session)
    if await repo.get_by_subdomain(body.subdomain) is not None:
        raise Conflict("Subdomain already taken")
    try:
        row = await repo.create(
            subdomain=body.subdomain,
            company_name=body.company_name,
            email=body.email,
            phone=body.phone,
            status=body.status,
            plan=body.plan,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise Conflict("Subdomain already taken", cause=e) from e
    log.info("tenant_created", subdomain=row.subdomain)
    return _view(tenant_record(row))


@router.get(
    "/tenant/current",
    response_model=CurrentTenantResponse,
    dependencies=[Depends(require_permission("settings.company.access"))],
)
async def current_tenant(ctx: TenantContext = Depends(tenant_context)) -> CurrentTenantResponse:
    return CurrentTenantResponse(tenant=_view(ctx.tenant), store_id=ctx.store_id)
