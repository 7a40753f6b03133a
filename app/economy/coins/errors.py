class CoinsError(Exception):
    pass


class CoinAccountNotFoundError(CoinsError):
    pass
