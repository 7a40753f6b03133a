from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from app.db.session import SessionLocal
from app.economy.coins.errors import CoinAccountNotFoundError
from app.economy.daily_reward.errors import DailyRewardUserNotFoundError
from app.economy.daily_reward.service import DailyRewardService
from app.economy.daily_reward.time import to_epoch_ms
from app.economy.daily_reward.types import DailyRewardClaimResult, DailyRewardStatus
from app.services.internal_auth import require_internal_access

router = APIRouter(
    tags=["internal", "daily-reward"],
    dependencies=[Depends(require_internal_access)],
)


class DailyRewardStatusResponse(BaseModel):
    available: bool
    next_open_at: datetime
    next_open_ms: int
    streak: int = Field(ge=0, le=7)
    upcoming_day_index: int = Field(ge=0, le=7)
    upcoming_reward: int | None = None
    active_rewards: list[int]
    state: str


class DailyRewardClaimResponse(BaseModel):
    coins: int = Field(gt=0)
    day_index: int = Field(ge=1, le=7)
    streak: int = Field(ge=1, le=7)
    active_rewards: list[int]
    claimed_local_date: date
    rotated: bool
    balance_after: int = Field(ge=0)


class DailyRewardClaimEnvelope(BaseModel):
    granted: bool
    claim: DailyRewardClaimResponse | None = None


def _status_response(status: DailyRewardStatus) -> DailyRewardStatusResponse:
    return DailyRewardStatusResponse(
        available=status.available,
        next_open_at=status.next_open_at,
        next_open_ms=to_epoch_ms(status.next_open_at),
        streak=status.streak,
        upcoming_day_index=status.upcoming_day_index,
        upcoming_reward=status.upcoming_reward,
        active_rewards=list(status.active_rewards),
        state=status.state.value,
    )


def _claim_response(result: DailyRewardClaimResult) -> DailyRewardClaimResponse:
    return DailyRewardClaimResponse(
        coins=result.coins,
        day_index=result.day_index,
        streak=result.streak,
        active_rewards=list(result.active_rewards),
        claimed_local_date=result.claimed_local_date,
        rotated=result.rotated,
        balance_after=result.balance_after,
    )


@router.get("/internal/daily-reward/{user_id}/status", response_model=DailyRewardStatusResponse)
async def get_daily_reward_status(user_id: int = Path(gt=0)) -> DailyRewardStatusResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            status = await DailyRewardService.get_status(session, user_id=user_id, now_utc=now_utc)
    except DailyRewardUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc

    return _status_response(status)


@router.post("/internal/daily-reward/{user_id}/claim", response_model=DailyRewardClaimEnvelope)
async def claim_daily_reward(user_id: int = Path(gt=0)) -> DailyRewardClaimEnvelope:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await DailyRewardService.claim(session, user_id=user_id, now_utc=now_utc)
    except (DailyRewardUserNotFoundError, CoinAccountNotFoundError) as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc

    if result is None:
        return DailyRewardClaimEnvelope(granted=False, claim=None)
    return DailyRewardClaimEnvelope(granted=True, claim=_claim_response(result))
