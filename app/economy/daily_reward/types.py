from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class DailyRewardStateLabel(str, Enum):
    NO_PRIOR_CLAIM = "D_NO_PRIOR_CLAIM"
    CLAIMED_TODAY = "D_CLAIMED_TODAY"
    WINDOW_OPEN_UNCLAIMED = "D_WINDOW_OPEN_UNCLAIMED"
    WINDOW_NOT_YET_OPEN = "D_WINDOW_NOT_YET_OPEN"


class ClaimBlockReason(str, Enum):
    WINDOW_NOT_OPEN = "WINDOW_NOT_OPEN"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"


@dataclass(slots=True)
class DailyRewardSnapshot:
    last_claim_local_date: date | None
    streak: int
    active_rewards: tuple[int, ...]
    rotation_seed: int


@dataclass(slots=True)
class DailyRewardStatus:
    available: bool
    next_open_at: datetime
    streak: int
    upcoming_day_index: int
    upcoming_reward: int | None
    active_rewards: tuple[int, ...]
    state: DailyRewardStateLabel


@dataclass(slots=True)
class DailyRewardClaim:
    coins: int
    day_index: int
    streak: int
    active_rewards: tuple[int, ...]
    claimed_local_date: date
    rotated: bool


@dataclass(slots=True)
class DailyRewardClaimResult:
    coins: int
    day_index: int
    streak: int
    active_rewards: tuple[int, ...]
    claimed_local_date: date
    rotated: bool
    balance_after: int
