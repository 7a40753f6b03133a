from __future__ import annotations

from app.core.config import DailyRewardConfig
from app.economy.daily_reward.constants import (
    DAILY_REWARD_CYCLE_DAYS,
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    SEED_MODULUS,
)


def generate_weekly_rewards(seed: int, config: DailyRewardConfig) -> tuple[int, ...]:
    """Builds the 7-day reward table.

    A static override from configuration is returned as is. Otherwise the
    values are drawn from a linear congruential sequence started at
    ``seed mod 10**6`` and scaled into ``[min_coins, max_coins]``, so the
    same seed always yields the same table.
    """
    if config.rewards is not None and len(config.rewards) == DAILY_REWARD_CYCLE_DAYS:
        return tuple(config.rewards)

    span = config.max_coins - config.min_coins + 1
    state = seed % SEED_MODULUS
    values: list[int] = []
    for _ in range(DAILY_REWARD_CYCLE_DAYS):
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        # floor(state / 2**32 * span) without float rounding
        values.append(config.min_coins + (state * span) // LCG_MODULUS)
    return tuple(values)


def fallback_reward(config: DailyRewardConfig) -> int:
    return (config.min_coins + config.max_coins) // 2


def is_valid_reward_table(rewards: object) -> bool:
    if not isinstance(rewards, (list, tuple)) or len(rewards) != DAILY_REWARD_CYCLE_DAYS:
        return False
    return all(isinstance(value, int) and not isinstance(value, bool) and value > 0 for value in rewards)
