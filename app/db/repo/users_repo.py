from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, user_id: int) -> User | None:
        stmt = select(User).where(User.id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_player_key(session: AsyncSession, player_key: str) -> User | None:
        stmt = select(User).where(User.player_key == player_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        player_key: str,
        display_name: str | None,
        coins: int,
    ) -> User:
        user = User(
            player_key=player_key,
            display_name=display_name,
            coins=coins,
            status="ACTIVE",
        )
        session.add(user)
        await session.flush()
        return user
