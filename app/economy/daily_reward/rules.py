from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

from app.core.config import DailyRewardConfig
from app.economy.daily_reward.constants import DAILY_REWARD_CYCLE_DAYS
from app.economy.daily_reward.rewards import fallback_reward, generate_weekly_rewards, is_valid_reward_table
from app.economy.daily_reward.time import days_between, local_date, next_window_open_at, window_open_at
from app.economy.daily_reward.types import (
    ClaimBlockReason,
    DailyRewardClaim,
    DailyRewardSnapshot,
    DailyRewardStateLabel,
    DailyRewardStatus,
)


def _today_and_window(now_utc: datetime, config: DailyRewardConfig) -> tuple[date, datetime]:
    today = local_date(now_utc, utc_offset_minutes=config.utc_offset_minutes)
    return today, window_open_at(
        today,
        utc_offset_minutes=config.utc_offset_minutes,
        window_hour=config.window_hour,
    )


def is_reward_available(snapshot: DailyRewardSnapshot, *, now_utc: datetime, config: DailyRewardConfig) -> bool:
    today, window_open = _today_and_window(now_utc, config)
    return now_utc >= window_open and snapshot.last_claim_local_date != today


def classify_daily_reward_state(
    snapshot: DailyRewardSnapshot,
    *,
    now_utc: datetime,
    config: DailyRewardConfig,
) -> DailyRewardStateLabel:
    today, window_open = _today_and_window(now_utc, config)
    if snapshot.last_claim_local_date == today:
        return DailyRewardStateLabel.CLAIMED_TODAY
    if snapshot.last_claim_local_date is None:
        return DailyRewardStateLabel.NO_PRIOR_CLAIM
    if now_utc < window_open:
        return DailyRewardStateLabel.WINDOW_NOT_YET_OPEN
    return DailyRewardStateLabel.WINDOW_OPEN_UNCLAIMED


def reward_for_day(active_rewards: tuple[int, ...], day_index: int, *, config: DailyRewardConfig) -> int:
    if not is_valid_reward_table(active_rewards) or not 1 <= day_index <= DAILY_REWARD_CYCLE_DAYS:
        return fallback_reward(config)
    return active_rewards[day_index - 1]


def build_status(
    snapshot: DailyRewardSnapshot,
    *,
    now_utc: datetime,
    config: DailyRewardConfig,
) -> DailyRewardStatus:
    available = is_reward_available(snapshot, now_utc=now_utc, config=config)
    next_open_at = (
        now_utc
        if available
        else next_window_open_at(
            now_utc,
            utc_offset_minutes=config.utc_offset_minutes,
            window_hour=config.window_hour,
        )
    )
    upcoming_day_index = min(DAILY_REWARD_CYCLE_DAYS, snapshot.streak + (1 if available else 0))
    upcoming_reward = (
        reward_for_day(snapshot.active_rewards, upcoming_day_index, config=config)
        if upcoming_day_index >= 1
        else None
    )
    return DailyRewardStatus(
        available=available,
        next_open_at=next_open_at,
        streak=snapshot.streak,
        upcoming_day_index=upcoming_day_index,
        upcoming_reward=upcoming_reward,
        active_rewards=snapshot.active_rewards,
        state=classify_daily_reward_state(snapshot, now_utc=now_utc, config=config),
    )


def claim_block_reason(
    snapshot: DailyRewardSnapshot,
    *,
    now_utc: datetime,
    config: DailyRewardConfig,
) -> ClaimBlockReason | None:
    today, window_open = _today_and_window(now_utc, config)
    if now_utc < window_open:
        return ClaimBlockReason.WINDOW_NOT_OPEN
    if snapshot.last_claim_local_date == today:
        return ClaimBlockReason.ALREADY_CLAIMED
    return None


def next_streak(snapshot: DailyRewardSnapshot, *, today: date) -> int:
    if snapshot.last_claim_local_date is None:
        return 1
    if days_between(snapshot.last_claim_local_date, today) == 1:
        return min(DAILY_REWARD_CYCLE_DAYS, snapshot.streak + 1)
    return 1


def claim_reward(
    snapshot: DailyRewardSnapshot,
    *,
    now_utc: datetime,
    config: DailyRewardConfig,
) -> tuple[DailyRewardSnapshot, DailyRewardClaim | None]:
    if claim_block_reason(snapshot, now_utc=now_utc, config=config) is not None:
        return snapshot, None

    today = local_date(now_utc, utc_offset_minutes=config.utc_offset_minutes)
    new_streak = next_streak(snapshot, today=today)
    coins = reward_for_day(snapshot.active_rewards, new_streak, config=config)

    updated = replace(snapshot, last_claim_local_date=today, streak=new_streak)
    rotated = new_streak == DAILY_REWARD_CYCLE_DAYS
    if rotated:
        # Stored streak restarts at 0; the claim still reports day 7.
        rotation_seed = snapshot.rotation_seed + 1
        updated = replace(
            updated,
            streak=0,
            rotation_seed=rotation_seed,
            active_rewards=generate_weekly_rewards(rotation_seed, config),
        )

    return updated, DailyRewardClaim(
        coins=coins,
        day_index=new_streak,
        streak=new_streak,
        active_rewards=updated.active_rewards,
        claimed_local_date=today,
        rotated=rotated,
    )
