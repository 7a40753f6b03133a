from app.economy.coins import CoinsService
from app.economy.daily_reward import DailyRewardService

__all__ = [
    "CoinsService",
    "DailyRewardService",
]
