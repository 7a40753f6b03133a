from __future__ import annotations

from app.core.config import DAILY_REWARD_CYCLE_DAYS

DEFAULT_MIN_COINS = 50
DEFAULT_MAX_COINS = 300
DEFAULT_UTC_OFFSET_MINUTES = 5 * 60
DEFAULT_WINDOW_HOUR = 12

# Linear congruential generator used for weekly reward tables.
SEED_MODULUS = 1_000_000
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2**32

LEDGER_ENTRY_TYPE_DAILY_REWARD = "DAILY_REWARD_CREDIT"
LEDGER_SOURCE_DAILY_REWARD = "DAILY_REWARD"

__all__ = [
    "DAILY_REWARD_CYCLE_DAYS",
    "DEFAULT_MAX_COINS",
    "DEFAULT_MIN_COINS",
    "DEFAULT_UTC_OFFSET_MINUTES",
    "DEFAULT_WINDOW_HOUR",
    "LCG_INCREMENT",
    "LCG_MODULUS",
    "LCG_MULTIPLIER",
    "LEDGER_ENTRY_TYPE_DAILY_REWARD",
    "LEDGER_SOURCE_DAILY_REWARD",
    "SEED_MODULUS",
]
