from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DAILY_REWARD_CYCLE_DAYS = 7


@dataclass(frozen=True, slots=True)
class DailyRewardConfig:
    min_coins: int = 50
    max_coins: int = 300
    rewards: tuple[int, ...] | None = None
    utc_offset_minutes: int = 300
    window_hour: int = 12


def _parse_rewards_override(raw: str) -> tuple[int, ...] | None:
    value = raw.strip()
    if not value:
        return None
    return tuple(int(part.strip()) for part in value.split(",") if part.strip())


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    internal_api_token: str = Field(
        default="dev_internal_token_change_me",
        alias="INTERNAL_API_TOKEN",
    )
    internal_api_allowlist: str = Field(
        default="127.0.0.1/32,::1/128",
        alias="INTERNAL_API_ALLOWLIST",
    )
    internal_api_trusted_proxies: str = Field(default="", alias="INTERNAL_API_TRUSTED_PROXIES")

    database_url: str = Field(alias="DATABASE_URL")

    starting_coins: int = Field(default=1500, ge=0, alias="STARTING_COINS")

    daily_reward_min_coins: int = Field(default=50, ge=1, alias="DAILY_REWARD_MIN_COINS")
    daily_reward_max_coins: int = Field(default=300, ge=1, alias="DAILY_REWARD_MAX_COINS")
    # Comma separated list of exactly 7 amounts; empty means seeded generation.
    daily_reward_rewards: str = Field(default="", alias="DAILY_REWARD_REWARDS")
    daily_reward_utc_offset_minutes: int = Field(
        default=300,
        ge=-14 * 60,
        le=14 * 60,
        alias="DAILY_REWARD_UTC_OFFSET_MINUTES",
    )
    daily_reward_window_hour: int = Field(default=12, ge=0, le=23, alias="DAILY_REWARD_WINDOW_HOUR")

    @model_validator(mode="after")
    def _validate_daily_reward(self) -> "Settings":
        if self.daily_reward_min_coins > self.daily_reward_max_coins:
            raise ValueError("DAILY_REWARD_MIN_COINS must not exceed DAILY_REWARD_MAX_COINS")

        try:
            rewards = _parse_rewards_override(self.daily_reward_rewards)
        except ValueError as exc:
            raise ValueError("DAILY_REWARD_REWARDS must be a comma separated list of integers") from exc
        if rewards is not None:
            if len(rewards) != DAILY_REWARD_CYCLE_DAYS:
                raise ValueError(f"DAILY_REWARD_REWARDS must contain exactly {DAILY_REWARD_CYCLE_DAYS} values")
            if any(amount <= 0 for amount in rewards):
                raise ValueError("DAILY_REWARD_REWARDS values must be positive")
        return self

    def daily_reward_config(self) -> DailyRewardConfig:
        return DailyRewardConfig(
            min_coins=self.daily_reward_min_coins,
            max_coins=self.daily_reward_max_coins,
            rewards=_parse_rewards_override(self.daily_reward_rewards),
            utc_offset_minutes=self.daily_reward_utc_offset_minutes,
            window_hour=self.daily_reward_window_hour,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def get_daily_reward_config() -> DailyRewardConfig:
    return get_settings().daily_reward_config()
