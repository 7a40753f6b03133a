from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from typing import Any

from app.core.config import DailyRewardConfig
from app.economy.daily_reward.constants import (
    DEFAULT_MAX_COINS,
    DEFAULT_MIN_COINS,
    DEFAULT_UTC_OFFSET_MINUTES,
    DEFAULT_WINDOW_HOUR,
)
from app.economy.daily_reward.rewards import generate_weekly_rewards
from app.economy.daily_reward.time import from_epoch_ms, next_window_open_at, to_epoch_ms


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print reward tables for consecutive rotation seeds.")
    parser.add_argument("--seed", type=int, default=None, help="Rotation seed; defaults to now in epoch ms.")
    parser.add_argument("--cycles", type=int, default=1)
    parser.add_argument("--min-coins", type=int, default=DEFAULT_MIN_COINS)
    parser.add_argument("--max-coins", type=int, default=DEFAULT_MAX_COINS)
    parser.add_argument("--utc-offset-minutes", type=int, default=DEFAULT_UTC_OFFSET_MINUTES)
    parser.add_argument("--window-hour", type=int, default=DEFAULT_WINDOW_HOUR)
    return parser.parse_args()


def build_preview(*, seed: int, cycles: int, config: DailyRewardConfig, now_utc: datetime) -> dict[str, Any]:
    if config.min_coins < 1 or config.min_coins > config.max_coins:
        raise ValueError("PREVIEW_FAIL: require 1 <= min-coins <= max-coins")
    if cycles < 1:
        raise ValueError("PREVIEW_FAIL: cycles must be positive")

    next_open = next_window_open_at(
        now_utc,
        utc_offset_minutes=config.utc_offset_minutes,
        window_hour=config.window_hour,
    )
    return {
        "next_window_open_at": next_open.isoformat(),
        "next_window_open_ms": to_epoch_ms(next_open),
        "seed_as_instant": from_epoch_ms(seed).isoformat() if seed >= 0 else None,
        "cycles": [
            {"rotation_seed": seed + offset, "rewards": list(generate_weekly_rewards(seed + offset, config))}
            for offset in range(cycles)
        ],
    }


def main() -> int:
    args = _parse_args()
    now_utc = datetime.now(timezone.utc)
    config = DailyRewardConfig(
        min_coins=args.min_coins,
        max_coins=args.max_coins,
        utc_offset_minutes=args.utc_offset_minutes,
        window_hour=args.window_hour,
    )
    try:
        report = build_preview(
            seed=args.seed if args.seed is not None else to_epoch_ms(now_utc),
            cycles=args.cycles,
            config=config,
            now_utc=now_utc,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    print(json.dumps(report, indent=2))  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
