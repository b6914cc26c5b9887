from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workflow_web.models.base_models import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, user_id: str) -> User | None:
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_ids(self, user_ids: list[str]) -> list[User]:
        if not user_ids:
            return []
        result = await self._session.execute(select(User).where(User.id.in_(user_ids)))
        by_id = {user.id: user for user in result.scalars()}
        return [by_id[user_id] for user_id in user_ids if user_id in by_id]
