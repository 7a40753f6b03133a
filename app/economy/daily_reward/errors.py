class DailyRewardError(Exception):
    pass


class DailyRewardUserNotFoundError(DailyRewardError):
    pass


class DailyRewardStateParseError(DailyRewardError):
    pass
