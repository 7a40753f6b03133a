from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.daily_reward_state import DailyRewardState


class DailyRewardRepo:
    @staticmethod
    async def get_by_user_id_for_update(session: AsyncSession, user_id: int) -> DailyRewardState | None:
        stmt = select(DailyRewardState).where(DailyRewardState.user_id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_state(
        session: AsyncSession,
        *,
        user_id: int,
        payload: dict[str, object],
        now_utc: datetime,
    ) -> DailyRewardState:
        state = DailyRewardState(
            user_id=user_id,
            payload=payload,
            version=0,
            updated_at=now_utc,
        )
        session.add(state)
        await session.flush()
        return state

    @staticmethod
    async def insert_state_if_absent(
        session: AsyncSession,
        *,
        user_id: int,
        payload: dict[str, object],
        now_utc: datetime,
    ) -> bool:
        stmt = (
            insert(DailyRewardState)
            .values(
                user_id=user_id,
                payload=payload,
                version=0,
                updated_at=now_utc,
            )
            .on_conflict_do_nothing(index_elements=[DailyRewardState.user_id])
            .returning(DailyRewardState.user_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
