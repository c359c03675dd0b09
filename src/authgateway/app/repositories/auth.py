# src/authgateway/app/repositories/auth.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authgateway.app.core.errors import AppError
from authgateway.app.db.models import AuthUser

_UPDATABLE = {
    "cognito_sub",
    "username",
    "email",
    "phone_number",
    "name",
    "user_confirmed",
}


class AuthRepository:
    """
    Persistence for the local user mirror.

    Every method owns its session and commits before returning, so no
    transaction ever spans an identity provider call.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def create(self, data: Dict[str, Any]) -> AuthUser:
        user = AuthUser(**data)
        async with self._sessionmaker() as db:
            db.add(user)
            await db.commit()
            await db.refresh(user)
        return user

    async def find_by_id(self, user_id: str) -> Optional[AuthUser]:
        async with self._sessionmaker() as db:
            return await db.get(AuthUser, user_id)

    async def find_by_username(self, username: str) -> Optional[AuthUser]:
        async with self._sessionmaker() as db:
            result = await db.execute(
                select(AuthUser).where(AuthUser.username == username).limit(1)
            )
            return result.scalar_one_or_none()

    async def update(self, user_id: str, data: Dict[str, Any]) -> AuthUser:
        unknown = set(data) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown user fields: {', '.join(sorted(unknown))}")

        async with self._sessionmaker() as db:
            user = await db.get(AuthUser, user_id)
            if user is None:
                raise AppError("User not found", 404)
            for key, value in data.items():
                setattr(user, key, value)
            user.updated_at = datetime.now(timezone.utc)
            await db.commit()
            await db.refresh(user)
            return user

    async def delete(self, user_id: str) -> AuthUser:
        async with self._sessionmaker() as db:
            user = await db.get(AuthUser, user_id)
            if user is None:
                raise AppError("User not found", 404)
            await db.delete(user)
            await db.commit()
            return user

    async def update_user_confirmation_status(self, username: str, user_confirmed: bool) -> AuthUser:
        async with self._sessionmaker() as db:
            result = await db.execute(
                select(AuthUser).where(AuthUser.username == username).limit(1)
            )
            user: AuthUser | None = result.scalar_one_or_none()
            if user is None:
                raise AppError("User not found", 404)
            user.user_confirmed = user_confirmed
            user.updated_at = datetime.now(timezone.utc)
            await db.commit()
            await db.refresh(user)
            return user


__all__ = ["AuthRepository"]
