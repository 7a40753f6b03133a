from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.core.config import DailyRewardConfig
from app.economy.daily_reward.rewards import generate_weekly_rewards
from scripts.daily_reward_preview import build_preview

NOW_UTC = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


def test_build_preview_lists_consecutive_rotation_seeds() -> None:
    config = DailyRewardConfig()

    report = build_preview(seed=41, cycles=3, config=config, now_utc=NOW_UTC)

    assert [cycle["rotation_seed"] for cycle in report["cycles"]] == [41, 42, 43]
    assert report["cycles"][1]["rewards"] == list(generate_weekly_rewards(42, config))
    assert report["next_window_open_at"] == "2026-03-02T07:00:00+00:00"
    assert report["seed_as_instant"] == "1970-01-01T00:00:00.041000+00:00"


def test_build_preview_hides_instant_for_negative_seed() -> None:
    report = build_preview(seed=-5, cycles=1, config=DailyRewardConfig(), now_utc=NOW_UTC)
    assert report["seed_as_instant"] is None


@pytest.mark.parametrize(
    ("config", "cycles"),
    [
        (DailyRewardConfig(min_coins=0, max_coins=10), 1),
        (DailyRewardConfig(min_coins=20, max_coins=10), 1),
        (DailyRewardConfig(), 0),
    ],
)
def test_build_preview_rejects_invalid_arguments(config: DailyRewardConfig, cycles: int) -> None:
    with pytest.raises(ValueError, match="PREVIEW_FAIL"):
        build_preview(seed=1, cycles=cycles, config=config, now_utc=NOW_UTC)
