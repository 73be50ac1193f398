"""
shopdesk.tenancy

Tenant resolution package.

Responsibilities:
- Header/host/fallback tenant resolution.
- The per-request `TenantContext` and its FastAPI dependency.
"""

# Package marker.
