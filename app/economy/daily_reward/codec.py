"""Conversion between the persisted daily reward record and snapshots.

The stored record keeps the layout the game client has always written::

    {"lastClaimDay": "YYYY-MM-DD" | null,
     "streak": 0..7,
     "activeRewards": [int x 7],
     "rotationSeed": int}

Parsing is strict and raises ``DailyRewardStateParseError``; only
``load_state_or_default`` turns a broken record into a fresh default state.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import date, datetime

import structlog

from app.core.config import DailyRewardConfig
from app.economy.daily_reward.constants import DAILY_REWARD_CYCLE_DAYS
from app.economy.daily_reward.errors import DailyRewardStateParseError
from app.economy.daily_reward.rewards import generate_weekly_rewards, is_valid_reward_table
from app.economy.daily_reward.time import to_epoch_ms
from app.economy.daily_reward.types import DailyRewardSnapshot

logger = structlog.get_logger(__name__)

_LOCAL_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

KEY_LAST_CLAIM_DAY = "lastClaimDay"
KEY_STREAK = "streak"
KEY_ACTIVE_REWARDS = "activeRewards"
KEY_ROTATION_SEED = "rotationSeed"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_local_day(raw: object) -> date | None:
    if raw is None:
        return None
    if not isinstance(raw, str) or _LOCAL_DAY_RE.fullmatch(raw) is None:
        raise DailyRewardStateParseError(f"invalid {KEY_LAST_CLAIM_DAY}: {raw!r}")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise DailyRewardStateParseError(f"invalid {KEY_LAST_CLAIM_DAY}: {raw!r}") from exc


def default_state(*, now_utc: datetime, config: DailyRewardConfig) -> DailyRewardSnapshot:
    seed = to_epoch_ms(now_utc)
    return DailyRewardSnapshot(
        last_claim_local_date=None,
        streak=0,
        active_rewards=generate_weekly_rewards(seed, config),
        rotation_seed=seed,
    )


def to_state_record(snapshot: DailyRewardSnapshot) -> dict[str, object]:
    return {
        KEY_LAST_CLAIM_DAY: (
            snapshot.last_claim_local_date.isoformat()
            if snapshot.last_claim_local_date is not None
            else None
        ),
        KEY_STREAK: snapshot.streak,
        KEY_ACTIVE_REWARDS: list(snapshot.active_rewards),
        KEY_ROTATION_SEED: snapshot.rotation_seed,
    }


def parse_state_record(payload: object, *, config: DailyRewardConfig) -> DailyRewardSnapshot:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise DailyRewardStateParseError("record is not valid JSON") from exc

    if not isinstance(payload, Mapping):
        raise DailyRewardStateParseError("record must be a JSON object")

    rotation_seed = payload.get(KEY_ROTATION_SEED)
    if not _is_int(rotation_seed):
        raise DailyRewardStateParseError(f"invalid {KEY_ROTATION_SEED}: {rotation_seed!r}")

    streak = payload.get(KEY_STREAK, 0)
    if not _is_int(streak) or not 0 <= streak <= DAILY_REWARD_CYCLE_DAYS:
        raise DailyRewardStateParseError(f"invalid {KEY_STREAK}: {streak!r}")

    raw_rewards = payload.get(KEY_ACTIVE_REWARDS)
    if raw_rewards is None:
        # Older records may omit the table; it is derivable from the seed.
        active_rewards = generate_weekly_rewards(rotation_seed, config)
    elif is_valid_reward_table(raw_rewards):
        active_rewards = tuple(raw_rewards)
    else:
        raise DailyRewardStateParseError(f"invalid {KEY_ACTIVE_REWARDS}: {raw_rewards!r}")

    return DailyRewardSnapshot(
        last_claim_local_date=_parse_local_day(payload.get(KEY_LAST_CLAIM_DAY)),
        streak=streak,
        active_rewards=active_rewards,
        rotation_seed=rotation_seed,
    )


def load_state_or_default(
    payload: object,
    *,
    now_utc: datetime,
    config: DailyRewardConfig,
    user_id: int | None = None,
) -> tuple[DailyRewardSnapshot, bool]:
    """Returns the parsed snapshot and whether it had to be recovered."""
    if payload is None:
        return default_state(now_utc=now_utc, config=config), False

    try:
        return parse_state_record(payload, config=config), False
    except DailyRewardStateParseError as exc:
        logger.warning("daily_reward_state_recovered", user_id=user_id, error=str(exc))
        return default_state(now_utc=now_utc, config=config), True
