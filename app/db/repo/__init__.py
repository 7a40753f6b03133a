from app.db.repo.daily_reward_repo import DailyRewardRepo
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.users_repo import UsersRepo

__all__ = [
    "DailyRewardRepo",
    "LedgerRepo",
    "UsersRepo",
]
