"""
shopdesk.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Fetch live (non-deleted) users by id, or by email for login and seeding.
- Create users, optionally with a password hash produced elsewhere.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopdesk.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> User | None:
        stmt = select(User).where(User.id == user_id, User.is_deleted.is_(False))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email, User.is_deleted.is_(False))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        name: str,
        email: str,
        role_id: uuid.UUID | None,
        password_hash: str | None = None,
    ) -> User:
        user = User(
            name=name,
            email=email,
            role_id=role_id,
            password_hash=password_hash,
            is_active=True,
            is_deleted=False,
        )
        self._session.add(user)
        await self._session.flush()
        return user


# --- Module Notes -----------------------------------------------------------
# Email lookups ignore soft-deleted rows, so a deleted account can neither log in
# nor block re-registration of its address.
