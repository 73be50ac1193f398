"""
shopdesk.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer credential into a `UserRecord` attached to `request.state`.
- Enforce permissions via a reusable dependency factory.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request

from shopdesk.auth.authz import Authz
from shopdesk.auth.passwords import PasswordVerifier
from shopdesk.auth.tokens import TokenParser
from shopdesk.directory import UserRecord


def authz_from_app(request: Request) -> Authz:
    # Built once in `shopdesk.api.app.create_app`; never a module global.
    return request.app.state.authz  # type: ignore[attr-defined]


def token_parser_from_app(request: Request) -> TokenParser:
    return request.app.state.token_parser  # type: ignore[attr-defined]


def password_verifier_from_app(request: Request) -> PasswordVerifier | None:
    # None when the deployment did not configure password login.
    return request.app.state.password_verifier  # type: ignore[attr-defined]


async def current_user(
    request: Request,
    parser: TokenParser = Depends(token_parser_from_app),
    authz: Authz = Depends(authz_from_app),
) -> UserRecord:
    # Authn: header -> subject -> user. Runs before any tenant or permission logic.
    subject = parser.parse(request.headers.get("Authorization"))
    user = await authz.authenticate(subject)
    request.state.user = user
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


def require_permission(permission: str):
    async def _dep(
        user: UserRecord = Depends(current_user),
        authz: Authz = Depends(authz_from_app),
    ) -> UserRecord:
        # Authz: role is re-read on every check.
        await authz.check_permission(user, permission)
        return user

    return _dep


# --- Module Notes -----------------------------------------------------------
# FastAPI caches `current_user` per request, so stacking several
# `require_permission` dependencies on one route authenticates only once.
