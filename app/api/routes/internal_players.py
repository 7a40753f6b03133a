from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from app.db.session import SessionLocal
from app.economy.coins.errors import CoinAccountNotFoundError
from app.economy.coins.service import CoinsService
from app.services.internal_auth import require_internal_access
from app.services.user_onboarding import UserOnboardingService

router = APIRouter(
    tags=["internal", "players"],
    dependencies=[Depends(require_internal_access)],
)


class PlayerRegisterRequest(BaseModel):
    player_key: str = Field(min_length=1, max_length=64)
    display_name: str | None = Field(default=None, max_length=64)


class PlayerResponse(BaseModel):
    user_id: int
    player_key: str
    display_name: str | None = None
    coins: int = Field(ge=0)
    created: bool


class PlayerBalanceResponse(BaseModel):
    user_id: int
    coins: int = Field(ge=0)


@router.post("/internal/players", response_model=PlayerResponse)
async def register_player(payload: PlayerRegisterRequest) -> PlayerResponse:
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        snapshot = await UserOnboardingService.register_player(
            session,
            player_key=payload.player_key,
            display_name=payload.display_name,
            now_utc=now_utc,
        )

    return PlayerResponse(
        user_id=snapshot.user_id,
        player_key=snapshot.player_key,
        display_name=snapshot.display_name,
        coins=snapshot.coins,
        created=snapshot.created,
    )


@router.get("/internal/players/{user_id}/balance", response_model=PlayerBalanceResponse)
async def get_player_balance(user_id: int = Path(gt=0)) -> PlayerBalanceResponse:
    try:
        async with SessionLocal() as session:
            coins = await CoinsService.get_balance(session, user_id=user_id)
    except CoinAccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc

    return PlayerBalanceResponse(user_id=user_id, coins=coins)
