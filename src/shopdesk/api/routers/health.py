"""
shopdesk.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide the liveness check (`/healthz`).
- Provide the readiness check (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from shopdesk.api.deps import db_session

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Readiness: the lookup store answers every authenticated request.
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}


# --- Module Notes -----------------------------------------------------------
# /readyz goes through the same sessionmaker as the directory, so a failing
# store shows up here before requests start returning DIRECTORY_UNAVAILABLE.
