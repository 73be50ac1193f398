"""
shopdesk.api.routers.auth

Login and current-identity endpoints.

Responsibilities:
- Exchange email + password for a bearer credential (`/api/auth/login`).
- Return the authenticated user and the effective permission list (`/api/auth/me`),
  which clients use to shape navigation.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from shopdesk.api.deps import db_session, settings_from_app
from shopdesk.auth.authz import Authz
from shopdesk.auth.deps import authz_from_app, current_user, password_verifier_from_app
from shopdesk.auth.passwords import PasswordVerifier
from shopdesk.auth.tokens import TokenConfig, issue_token
from shopdesk.db.directory import user_record
from shopdesk.db.repositories.users import UserRepo
from shopdesk.directory import UserRecord
from shopdesk.errors import Unauthorized
from shopdesk.observability.logging import get_logger
from shopdesk.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class UserView(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role_id: uuid.UUID | None
    is_active: bool


class MeResponse(BaseModel):
    user: UserView
    permissions: list[str]


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserView


def _user_view(user: UserRecord) -> UserView:
    return UserView(
        id=user.id,
        name=user.name,
        email=user.email,
        role_id=user.role_id,
        is_active=user.is_active,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    settings: Settings = Depends(settings_from_app),
    verifier: PasswordVerifier | None = Depends(password_verifier_from_app),
    session: AsyncSession = Depends(db_session),
) -> LoginResponse:
    row = await UserRepo(session).get_by_email(body.email)

    reason: str | None = None
    if verifier is None:
        reason = "password_login_disabled"
    elif row is None:
        reason = "unknown_email"
    elif not row.is_active:
        reason = "user_inactive"
    elif not row.password_hash or not verifier.verify(body.password, row.password_hash):
        reason = "bad_password"
    if reason is not None or row is None:
        # One message for every failure; the reason stays in the logs.
        log.warning("login_failed", reason=reason, email=body.email)
        raise Unauthorized("Invalid email or password")

    user = user_record(row)
    token = issue_token(cfg=TokenConfig.from_settings(settings), subject=str(user.id))
    log.info("login_succeeded", user_id=str(user.id))
    return LoginResponse(access_token=token, user=_user_view(user))


@router.get("/me", response_model=MeResponse)
async def me(
    user: UserRecord = Depends(current_user),
    authz: Authz = Depends(authz_from_app),
) -> MeResponse:
    return MeResponse(
        user=_user_view(user),
        # Empty when the role is missing; the permission gate would deny anyway.
        permissions=await authz.permissions_for(user),
    )
