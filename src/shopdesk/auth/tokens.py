"""
shopdesk.auth.tokens

Bearer credential issuing and parsing.

Responsibilities:
- Extract the caller's subject (user id) from an `Authorization` header.
- Issue credentials for login/dev flows in the configured scheme.

Schemes:
- "signed": HS256 JWT with strict claim requirements (iss/aud/exp/iat/sub).
- "opaque": legacy `<subject-id>.<suffix>` credential. It is a lookup key, not a
  trust mechanism: nothing is verified. Kept for compatibility only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import jwt
from fastapi.security.utils import get_authorization_scheme_param
from jwt import InvalidTokenError

from shopdesk.errors import Unauthorized
from shopdesk.settings import Settings

TokenScheme = Literal["signed", "opaque"]


@dataclass(frozen=True, slots=True)
class TokenConfig:
    scheme: TokenScheme
    # Algorithm/issuer/audience are enforced during decoding of signed tokens.
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(hours=12)

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenConfig:
        return cls(
            scheme=settings.token_scheme,
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=timedelta(minutes=settings.token_ttl_minutes),
        )


def issue_token(*, cfg: TokenConfig, subject: str, ttl: timedelta | None = None) -> str:
    now = datetime.now(tz=UTC)
    if cfg.scheme == "opaque":
        return f"{subject}.{now:%Y%m%d%H%M%S}"

    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + (ttl or cfg.ttl)).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


class TokenParser:
    """
    Turns a raw `Authorization` header into a subject id, or raises Unauthorized.

    Only the subject is returned; resolving it to a user is the identity gate's job.
    """

    def __init__(self, cfg: TokenConfig) -> None:
        self._cfg = cfg

    def parse(self, authorization: str | None) -> str:
        if not authorization:
            raise Unauthorized("Missing token")
        scheme, credentials = get_authorization_scheme_param(authorization)
        if scheme.lower() != "bearer" or not credentials:
            raise Unauthorized("Invalid authorization scheme")

        if self._cfg.scheme == "opaque":
            subject = credentials.strip().split(".", 1)[0]
        else:
            subject = self._decode_subject(credentials.strip())

        if not subject:
            raise Unauthorized("Invalid token")
        return subject

    def _decode_subject(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token,
                self._cfg.secret,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                audience=self._cfg.audience,
                options={"require": ["exp", "iat", "iss", "aud", "sub"]},
            )
        except InvalidTokenError as e:
            raise Unauthorized("Invalid token", cause=e) from e
        return str(payload.get("sub") or "")


# --- Module Notes -----------------------------------------------------------
# Both schemes share the same behavioral contract downstream:
# subject -> user lookup -> role lookup -> permission set evaluation.
