from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import DailyRewardConfig, get_daily_reward_config
from app.db.models.daily_reward_state import DailyRewardState
from app.db.repo.daily_reward_repo import DailyRewardRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.coins.service import CoinsService
from app.economy.daily_reward.codec import default_state, load_state_or_default, to_state_record
from app.economy.daily_reward.constants import LEDGER_ENTRY_TYPE_DAILY_REWARD, LEDGER_SOURCE_DAILY_REWARD
from app.economy.daily_reward.errors import DailyRewardUserNotFoundError
from app.economy.daily_reward.rules import build_status, claim_block_reason, claim_reward
from app.economy.daily_reward.types import DailyRewardClaimResult, DailyRewardSnapshot, DailyRewardStatus

logger = structlog.get_logger(__name__)


class DailyRewardService:
    @staticmethod
    def _apply_snapshot_to_model(state: DailyRewardState, snapshot: DailyRewardSnapshot, now_utc: datetime) -> None:
        state.payload = to_state_record(snapshot)
        state.updated_at = now_utc
        state.version += 1

    @staticmethod
    def _idempotency_key(user_id: int, snapshot: DailyRewardSnapshot) -> str:
        return f"daily_reward:{user_id}:{snapshot.last_claim_local_date.isoformat()}"

    @staticmethod
    async def _get_or_create_state(
        session: AsyncSession,
        *,
        user_id: int,
        now_utc: datetime,
        config: DailyRewardConfig,
    ) -> DailyRewardState:
        state = await DailyRewardRepo.get_by_user_id_for_update(session, user_id)
        if state is not None:
            return state

        user = await UsersRepo.get_by_id(session, user_id)
        if user is None:
            raise DailyRewardUserNotFoundError

        # A concurrent first request may insert the row first; both then read the same row.
        created = await DailyRewardRepo.insert_state_if_absent(
            session,
            user_id=user_id,
            payload=to_state_record(default_state(now_utc=now_utc, config=config)),
            now_utc=now_utc,
        )
        if created:
            logger.info("daily_reward_state_created", user_id=user_id)

        state = await DailyRewardRepo.get_by_user_id_for_update(session, user_id)
        if state is None:
            raise DailyRewardUserNotFoundError
        return state

    @staticmethod
    async def _load_snapshot(
        session: AsyncSession,
        state: DailyRewardState,
        *,
        user_id: int,
        now_utc: datetime,
        config: DailyRewardConfig,
    ) -> DailyRewardSnapshot:
        snapshot, recovered = load_state_or_default(state.payload, now_utc=now_utc, config=config, user_id=user_id)
        if recovered:
            # Later polls and the next claim must see the same reward table.
            DailyRewardService._apply_snapshot_to_model(state, snapshot, now_utc)
            await session.flush()
        return snapshot

    @staticmethod
    async def initialize_user_state(session: AsyncSession, *, user_id: int, now_utc: datetime) -> DailyRewardState:
        config = get_daily_reward_config()
        return await DailyRewardRepo.create_state(
            session,
            user_id=user_id,
            payload=to_state_record(default_state(now_utc=now_utc, config=config)),
            now_utc=now_utc,
        )

    @staticmethod
    async def get_status(session: AsyncSession, *, user_id: int, now_utc: datetime) -> DailyRewardStatus:
        config = get_daily_reward_config()
        state = await DailyRewardService._get_or_create_state(
            session,
            user_id=user_id,
            now_utc=now_utc,
            config=config,
        )
        snapshot = await DailyRewardService._load_snapshot(
            session,
            state,
            user_id=user_id,
            now_utc=now_utc,
            config=config,
        )
        return build_status(snapshot, now_utc=now_utc, config=config)

    @staticmethod
    async def claim(
        session: AsyncSession,
        *,
        user_id: int,
        now_utc: datetime,
    ) -> DailyRewardClaimResult | None:
        config = get_daily_reward_config()
        state = await DailyRewardService._get_or_create_state(
            session,
            user_id=user_id,
            now_utc=now_utc,
            config=config,
        )
        snapshot = await DailyRewardService._load_snapshot(
            session,
            state,
            user_id=user_id,
            now_utc=now_utc,
            config=config,
        )

        block_reason = claim_block_reason(snapshot, now_utc=now_utc, config=config)
        if block_reason is not None:
            logger.info("daily_reward_claim_blocked", user_id=user_id, reason=block_reason.value)
            return None

        updated, claim = claim_reward(snapshot, now_utc=now_utc, config=config)
        if claim is None:
            return None

        credit = await CoinsService.credit_coins(
            session,
            user_id=user_id,
            amount=claim.coins,
            idempotency_key=DailyRewardService._idempotency_key(user_id, updated),
            entry_type=LEDGER_ENTRY_TYPE_DAILY_REWARD,
            source=LEDGER_SOURCE_DAILY_REWARD,
            now_utc=now_utc,
            metadata={"day_index": claim.day_index, "streak": claim.streak},
        )

        DailyRewardService._apply_snapshot_to_model(state, updated, now_utc)
        await session.flush()

        if credit.idempotent_replay:
            # Today's credit already exists; the stored record was behind the ledger.
            logger.warning("daily_reward_credit_replayed", user_id=user_id, day=claim.claimed_local_date.isoformat())
            return None

        if claim.rotated:
            logger.info(
                "daily_reward_rotated",
                user_id=user_id,
                rotation_seed=updated.rotation_seed,
                active_rewards=list(updated.active_rewards),
            )
        logger.info(
            "daily_reward_claimed",
            user_id=user_id,
            coins=claim.coins,
            day_index=claim.day_index,
            streak=claim.streak,
            balance_after=credit.balance_after,
        )
        return DailyRewardClaimResult(
            coins=claim.coins,
            day_index=claim.day_index,
            streak=claim.streak,
            active_rewards=claim.active_rewards,
            claimed_local_date=claim.claimed_local_date,
            rotated=claim.rotated,
            balance_after=credit.balance_after,
        )
