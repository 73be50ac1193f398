"""
shopdesk.api.routers.dev_auth

Local token issuing for development and tests.

Responsibilities:
- Issue a bearer credential for an existing, active user id (`/api/dev/token`).
- Stay hidden (404) when the service runs with `env=prod`.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from shopdesk.api.deps import settings_from_app
from shopdesk.auth.authz import Authz
from shopdesk.auth.deps import authz_from_app
from shopdesk.auth.tokens import TokenConfig, issue_token
from shopdesk.errors import NotFound
from shopdesk.settings import Settings

router = APIRouter(prefix="/api/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    user_id: uuid.UUID
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_from_app),
    authz: Authz = Depends(authz_from_app),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise NotFound("Not found")

    # Only mint for users the identity gate would accept anyway.
    user = await authz.authenticate(str(body.user_id))
    token = issue_token(
        cfg=TokenConfig.from_settings(settings),
        subject=str(user.id),
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)


# --- Module Notes -----------------------------------------------------------
# Production credentials come from `/api/auth/login`; this route is for local use.
