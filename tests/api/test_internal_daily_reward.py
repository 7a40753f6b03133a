from __future__ import annotations

from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.api.routes import internal_daily_reward, internal_players
from app.economy.daily_reward.errors import DailyRewardUserNotFoundError
from app.economy.daily_reward.types import DailyRewardClaimResult, DailyRewardStateLabel, DailyRewardStatus
from app.main import app
from app.services.internal_auth import require_internal_access
from app.services.user_onboarding import PlayerSnapshot

UTC = timezone.utc


class _FakeSessionContext:
    async def __aenter__(self):
        return SimpleNamespace()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _FakeSessionLocal:
    def __call__(self) -> _FakeSessionContext:
        return _FakeSessionContext()

    def begin(self) -> _FakeSessionContext:
        return _FakeSessionContext()


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(internal_daily_reward, "SessionLocal", _FakeSessionLocal())
    monkeypatch.setattr(internal_players, "SessionLocal", _FakeSessionLocal())
    app.dependency_overrides[require_internal_access] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_status_returns_preview_of_next_claim(client, monkeypatch) -> None:
    next_open_at = datetime(2026, 3, 2, 7, 0, tzinfo=UTC)

    async def _fake_get_status(session, *, user_id: int, now_utc):
        del session, now_utc
        assert user_id == 11
        return DailyRewardStatus(
            available=False,
            next_open_at=next_open_at,
            streak=2,
            upcoming_day_index=2,
            upcoming_reward=20,
            active_rewards=(10, 20, 30, 40, 50, 60, 70),
            state=DailyRewardStateLabel.CLAIMED_TODAY,
        )

    monkeypatch.setattr(internal_daily_reward.DailyRewardService, "get_status", _fake_get_status)

    response = client.get("/internal/daily-reward/11/status")

    assert response.status_code == 200
    payload = response.json()
    assert payload["available"] is False
    assert payload["next_open_ms"] == 1_772_434_800_000
    assert payload["streak"] == 2
    assert payload["upcoming_day_index"] == 2
    assert payload["upcoming_reward"] == 20
    assert payload["active_rewards"] == [10, 20, 30, 40, 50, 60, 70]
    assert payload["state"] == "D_CLAIMED_TODAY"


def test_claim_returns_granted_reward(client, monkeypatch) -> None:
    async def _fake_claim(session, *, user_id: int, now_utc):
        del session, user_id, now_utc
        return DailyRewardClaimResult(
            coins=70,
            day_index=7,
            streak=7,
            active_rewards=(90, 80, 70, 60, 50, 100, 200),
            claimed_local_date=date(2026, 3, 7),
            rotated=True,
            balance_after=1870,
        )

    monkeypatch.setattr(internal_daily_reward.DailyRewardService, "claim", _fake_claim)

    response = client.post("/internal/daily-reward/11/claim")

    assert response.status_code == 200
    assert response.json() == {
        "granted": True,
        "claim": {
            "coins": 70,
            "day_index": 7,
            "streak": 7,
            "active_rewards": [90, 80, 70, 60, 50, 100, 200],
            "claimed_local_date": "2026-03-07",
            "rotated": True,
            "balance_after": 1870,
        },
    }


def test_ineligible_claim_is_not_an_error(client, monkeypatch) -> None:
    async def _fake_claim(session, *, user_id: int, now_utc):
        del session, user_id, now_utc
        return None

    monkeypatch.setattr(internal_daily_reward.DailyRewardService, "claim", _fake_claim)

    response = client.post("/internal/daily-reward/11/claim")

    assert response.status_code == 200
    assert response.json() == {"granted": False, "claim": None}


def test_unknown_user_maps_to_404(client, monkeypatch) -> None:
    async def _fake_claim(session, *, user_id: int, now_utc):
        raise DailyRewardUserNotFoundError

    monkeypatch.setattr(internal_daily_reward.DailyRewardService, "claim", _fake_claim)

    response = client.post("/internal/daily-reward/404/claim")

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_USER_NOT_FOUND"}}


def test_register_player_returns_starting_balance(client, monkeypatch) -> None:
    async def _fake_register(session, *, player_key: str, display_name, now_utc):
        del session, now_utc
        return PlayerSnapshot(
            user_id=3,
            player_key=player_key,
            display_name=display_name,
            coins=1500,
            created=True,
        )

    monkeypatch.setattr(internal_players.UserOnboardingService, "register_player", _fake_register)

    response = client.post("/internal/players", json={"player_key": "device-abc", "display_name": "Player"})

    assert response.status_code == 200
    assert response.json() == {
        "user_id": 3,
        "player_key": "device-abc",
        "display_name": "Player",
        "coins": 1500,
        "created": True,
    }


def test_daily_reward_routes_reject_missing_token() -> None:
    client = TestClient(app)

    response = client.get("/internal/daily-reward/11/status")

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}


def test_daily_reward_routes_reject_disallowed_ip(monkeypatch) -> None:
    from app.services import internal_auth

    monkeypatch.setattr(
        internal_auth,
        "get_settings",
        lambda: SimpleNamespace(
            internal_api_token="internal-secret",
            internal_api_allowlist="192.168.0.0/16",
            internal_api_trusted_proxies="",
        ),
    )

    client = TestClient(app)
    response = client.post(
        "/internal/daily-reward/11/claim",
        headers={"X-Internal-Token": "internal-secret", "X-Forwarded-For": "10.0.0.25"},
    )

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}
