from app.economy.daily_reward.service import DailyRewardService

__all__ = ["DailyRewardService"]
