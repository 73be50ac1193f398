"""
shopdesk.tenancy.deps

FastAPI dependencies for tenant-scoped routes.

Responsibilities:
- Resolve the request's tenant after identity has been established.
- Attach a `TenantContext` to `request.state` and to the log context.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request

from shopdesk.auth.deps import current_user
from shopdesk.directory import UserRecord
from shopdesk.tenancy.context import TenantContext
from shopdesk.tenancy.resolver import TenantResolver

TENANT_HEADER = "X-Tenant-ID"
STORE_HEADER = "X-Store-ID"


def tenant_resolver_from_app(request: Request) -> TenantResolver:
    return request.app.state.tenant_resolver  # type: ignore[attr-defined]


async def tenant_context(
    request: Request,
    # Depending on current_user orders identity before tenant resolution.
    user: UserRecord = Depends(current_user),
    resolver: TenantResolver = Depends(tenant_resolver_from_app),
) -> TenantContext:
    tenant = await resolver.resolve(
        tenant_header=request.headers.get(TENANT_HEADER),
        host=request.headers.get("host"),
    )
    ctx = TenantContext(
        tenant=tenant,
        user=user,
        store_id=request.headers.get(STORE_HEADER) or None,
    )
    request.state.tenant_context = ctx
    structlog.contextvars.bind_contextvars(tenant=tenant.subdomain, store_id=ctx.store_id)
    return ctx
