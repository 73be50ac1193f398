"""
shopdesk.db.models

Persistence schema for the tenancy/authorization reference data.

Responsibilities:
- Define ORM models:
  - Tenant: customer partition keyed by an immutable subdomain
  - Role: named permission bundle
  - User: login identity bound to exactly one role
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text, Uuid as SAUuid, text
from sqlalchemy.orm import Mapped, mapped_column

from shopdesk.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps keep SQLite and Postgres behavior identical.
    return datetime.now(UTC).replace(tzinfo=None)


class TenantStatus(enum.StrEnum):
    active = "active"
    suspended = "suspended"
    trial = "trial"
    expired = "expired"
    canceled = "canceled"


class TenantPlan(enum.StrEnum):
    free = "free"
    starter = "starter"
    business = "business"
    enterprise = "enterprise"


def default_tenant_settings() -> dict[str, Any]:
    return {
        "language": "ru",
        "timezone": "UTC+5",
        "currency": "UZS",
        "date_format": "DD.MM.YYYY",
        "logo": "",
        "brand_colors": {"primary": "#3b82f6", "secondary": "#10b981", "accent": "#f59e0b"},
        "features": ["products", "customers", "sales", "reports"],
        "integrations": {"telegram": False, "instagram": False, "email": True},
        "notifications": {"email": True, "sms": False, "push": True, "telegram": False},
    }


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Immutable after creation; repositories expose no way to change it.
    subdomain: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    company_name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    status: Mapped[TenantStatus] = mapped_column(Enum(TenantStatus), nullable=False, index=True)
    plan: Mapped[TenantPlan] = mapped_column(Enum(TenantPlan), nullable=False)
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)
    expires_at: Mapped[datetime | None] = mapped_column(nullable=True)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        # Key is unique among live roles only; soft-deleted keys may be reused.
        Index(
            "ux_roles_key",
            "key",
            unique=True,
            sqlite_where=text("is_deleted = 0"),
            postgresql_where=text("is_deleted = false"),
        ),
        Index("ix_roles_active_created", "is_active", "created_at"),
    )


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    # Produced by the external password hashing collaborator; None = no password login.
    password_hash: Mapped[str | None] = mapped_column(String(256), nullable=True)
    role_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("roles.id"), nullable=True, index=True
    )

    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index(
            "ux_users_email",
            "email",
            unique=True,
            sqlite_where=text("is_deleted = 0"),
            postgresql_where=text("is_deleted = false"),
        ),
    )


# --- Module Notes -----------------------------------------------------------
# Nothing here is ever hard-deleted: tenants change status, roles/users flip
# `is_deleted`. The request path only reads these tables.
