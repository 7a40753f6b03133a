from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.ledger_entries import LedgerEntry
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.users_repo import UsersRepo
from app.economy.coins.errors import CoinAccountNotFoundError
from app.economy.coins.types import CoinCreditResult

logger = structlog.get_logger(__name__)


class CoinsService:
    @staticmethod
    async def get_balance(session: AsyncSession, *, user_id: int) -> int:
        user = await UsersRepo.get_by_id(session, user_id)
        if user is None:
            raise CoinAccountNotFoundError
        return user.coins

    @staticmethod
    async def credit_coins(
        session: AsyncSession,
        *,
        user_id: int,
        amount: int,
        idempotency_key: str,
        entry_type: str,
        source: str,
        now_utc: datetime,
        metadata: dict[str, object] | None = None,
    ) -> CoinCreditResult:
        if amount <= 0:
            raise ValueError("amount must be positive")

        existing_entry = await LedgerRepo.get_by_idempotency_key(session, idempotency_key)
        if existing_entry is not None:
            return CoinCreditResult(
                amount=existing_entry.amount,
                balance_after=existing_entry.balance_after,
                idempotent_replay=True,
            )

        user = await UsersRepo.get_by_id_for_update(session, user_id)
        if user is None:
            raise CoinAccountNotFoundError

        user.coins += amount
        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                user_id=user_id,
                entry_type=entry_type,
                direction="CREDIT",
                amount=amount,
                balance_after=user.coins,
                source=source,
                idempotency_key=idempotency_key,
                metadata_=dict(metadata or {}),
                created_at=now_utc,
            ),
        )
        await session.flush()

        logger.info(
            "coins_credited",
            user_id=user_id,
            amount=amount,
            balance_after=user.coins,
            source=source,
        )
        return CoinCreditResult(
            amount=amount,
            balance_after=user.coins,
            idempotent_replay=False,
        )
