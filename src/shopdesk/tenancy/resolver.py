"""
shopdesk.tenancy.resolver

Tenant resolution for tenant-scoped requests.

Responsibilities:
- Pick exactly one tenant per request from, in order:
  1. the `X-Tenant-ID` header (tenant id first, then subdomain key),
  2. the request host's leftmost label (hosts with 3+ labels),
  3. the configured fallback subdomain.
- Fail with TENANT_REQUIRED when every step misses.

Resolution is read-only: it never creates a tenant.
"""

from __future__ import annotations

import ipaddress
import uuid

from shopdesk.directory import TenantDirectory, TenantRecord
from shopdesk.errors import TenantRequired
from shopdesk.observability.logging import get_logger

log = get_logger(__name__)


def _strip_port(host: str) -> str:
    host = host.strip()
    if host.startswith("["):
        # Bracketed IPv6 literal, optionally followed by :port.
        return host[1 : host.find("]")] if "]" in host else host
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def extract_subdomain(host: str | None) -> str | None:
    """Leftmost label of a host with at least three labels, else None."""

    if not host:
        return None
    hostname = _strip_port(host).rstrip(".").lower()
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        return None
    labels = hostname.split(".")
    if len(labels) >= 3 and labels[0]:
        return labels[0]
    return None


class TenantResolver:
    def __init__(self, tenants: TenantDirectory, *, fallback_subdomain: str | None = "demo") -> None:
        self._tenants = tenants
        self._fallback_subdomain = fallback_subdomain

    async def _from_header(self, value: str) -> TenantRecord | None:
        # Same value, two readings: id first, subdomain key second.
        try:
            tenant_id = uuid.UUID(value)
        except ValueError:
            tenant = None
        else:
            tenant = await self._tenants.lookup_tenant_by_id(tenant_id)
        if tenant is None:
            tenant = await self._tenants.lookup_tenant_by_subdomain(value)
        return tenant

    async def resolve(self, *, tenant_header: str | None, host: str | None) -> TenantRecord:
        if tenant_header:
            tenant = await self._from_header(tenant_header)
            if tenant is not None:
                log.debug("tenant_resolved", source="header", tenant=tenant.subdomain)
                return tenant

        sub = extract_subdomain(host)
        if sub is not None:
            tenant = await self._tenants.lookup_tenant_by_subdomain(sub)
            if tenant is not None:
                log.debug("tenant_resolved", source="host", tenant=tenant.subdomain)
                return tenant

        if self._fallback_subdomain:
            tenant = await self._tenants.lookup_tenant_by_subdomain(self._fallback_subdomain)
            if tenant is not None:
                log.debug("tenant_resolved", source="fallback", tenant=tenant.subdomain)
                return tenant

        raise TenantRequired("Tenant not resolved")


# --- Module Notes -----------------------------------------------------------
# Tenant status (suspended/expired/...) is not evaluated here; plan and status
# enforcement belongs to the domain services that consume the tenant context.
