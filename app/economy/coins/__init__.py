from app.economy.coins.service import CoinsService

__all__ = ["CoinsService"]
