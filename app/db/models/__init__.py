from app.db.models.daily_reward_state import DailyRewardState
from app.db.models.ledger_entries import LedgerEntry
from app.db.models.users import User

__all__ = [
    "DailyRewardState",
    "LedgerEntry",
    "User",
]
