from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache

from app.economy.daily_reward.constants import DEFAULT_UTC_OFFSET_MINUTES, DEFAULT_WINDOW_HOUR

UTC = timezone.utc
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@lru_cache(maxsize=8)
def reward_timezone(utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES) -> timezone:
    """Fixed-offset zone for daily boundaries. No DST transitions."""
    return timezone(timedelta(minutes=utc_offset_minutes))


def _require_aware(instant: datetime) -> None:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError("instant must be timezone-aware")


def local_date(now_utc: datetime, *, utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES) -> date:
    """Converts an absolute instant to the reward-local calendar date."""
    _require_aware(now_utc)
    return now_utc.astimezone(reward_timezone(utc_offset_minutes)).date()


def window_open_at(
    day: date,
    *,
    utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES,
    window_hour: int = DEFAULT_WINDOW_HOUR,
) -> datetime:
    """Returns the UTC instant at which the claim window of a local day opens."""
    local_open = datetime.combine(day, time(hour=window_hour), tzinfo=reward_timezone(utc_offset_minutes))
    return local_open.astimezone(UTC)


def next_window_open_at(
    now_utc: datetime,
    *,
    utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES,
    window_hour: int = DEFAULT_WINDOW_HOUR,
) -> datetime:
    today = local_date(now_utc, utc_offset_minutes=utc_offset_minutes)
    today_open = window_open_at(today, utc_offset_minutes=utc_offset_minutes, window_hour=window_hour)
    if now_utc < today_open:
        return today_open
    return window_open_at(
        today + timedelta(days=1),
        utc_offset_minutes=utc_offset_minutes,
        window_hour=window_hour,
    )


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def to_epoch_ms(instant: datetime) -> int:
    _require_aware(instant)
    return (instant - _EPOCH) // timedelta(milliseconds=1)


def from_epoch_ms(epoch_ms: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=epoch_ms)
