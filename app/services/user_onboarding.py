from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.repo.users_repo import UsersRepo
from app.economy.daily_reward.service import DailyRewardService

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class PlayerSnapshot:
    user_id: int
    player_key: str
    display_name: str | None
    coins: int
    created: bool


class UserOnboardingService:
    @staticmethod
    async def register_player(
        session: AsyncSession,
        *,
        player_key: str,
        display_name: str | None,
        now_utc: datetime,
    ) -> PlayerSnapshot:
        user = await UsersRepo.get_by_player_key(session, player_key)
        created = user is None
        if user is None:
            user = await UsersRepo.create(
                session,
                player_key=player_key,
                display_name=display_name,
                coins=get_settings().starting_coins,
            )
            await DailyRewardService.initialize_user_state(session, user_id=user.id, now_utc=now_utc)
            logger.info("player_registered", user_id=user.id, coins=user.coins)

        return PlayerSnapshot(
            user_id=user.id,
            player_key=user.player_key,
            display_name=user.display_name,
            coins=user.coins,
            created=created,
        )
