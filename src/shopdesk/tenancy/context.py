from __future__ import annotations

from dataclasses import dataclass

from shopdesk.directory import TenantRecord, UserRecord


@dataclass(frozen=True, slots=True)
class TenantContext:
    """
    Per-request tenant scope. Lives on `request.state.tenant_context` only for
    the duration of the request.
    """

    tenant: TenantRecord
    user: UserRecord
    # Opaque passthrough from X-Store-ID; validated by domain services, not here.
    store_id: str | None = None

    @property
    def tenant_id(self) -> str:
        return str(self.tenant.id)
