from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.services.internal_auth import (
    extract_client_ip,
    is_client_ip_allowed,
    is_valid_internal_token,
)


def test_internal_token_must_match_exactly() -> None:
    assert is_valid_internal_token(expected_token="secret", received_token="secret") is True
    assert is_valid_internal_token(expected_token="secret", received_token="secret ") is False
    assert is_valid_internal_token(expected_token="secret", received_token=None) is False
    assert is_valid_internal_token(expected_token="", received_token="") is False


@pytest.mark.parametrize(
    ("client_ip", "expected"),
    [
        ("127.0.0.1", True),
        ("10.40.2.9", True),
        ("::1", True),
        ("192.168.1.5", False),
        ("garbage", False),
        (None, False),
    ],
)
def test_client_ip_allowlist_accepts_addresses_and_networks(client_ip: str | None, expected: bool) -> None:
    allowlist = "127.0.0.1, 10.0.0.0/8, ::1/128, not-a-network"
    assert is_client_ip_allowed(client_ip=client_ip, allowlist=allowlist) is expected


def test_forwarded_for_is_honored_only_behind_trusted_proxy() -> None:
    trusted = SimpleNamespace(
        headers={"X-Forwarded-For": "10.1.1.8, 127.0.0.1"},
        client=SimpleNamespace(host="127.0.0.1"),
    )
    untrusted = SimpleNamespace(
        headers={"X-Forwarded-For": "10.1.1.8"},
        client=SimpleNamespace(host="198.51.100.10"),
    )

    assert extract_client_ip(trusted, trusted_proxies="127.0.0.1/32") == "10.1.1.8"
    assert extract_client_ip(untrusted, trusted_proxies="127.0.0.1/32") == "198.51.100.10"


def test_invalid_forwarded_for_yields_no_client_ip() -> None:
    request = SimpleNamespace(
        headers={"X-Forwarded-For": "not-an-ip"},
        client=SimpleNamespace(host="127.0.0.1"),
    )
    assert extract_client_ip(request, trusted_proxies="127.0.0.1/32") is None


def test_missing_client_falls_back_to_none() -> None:
    request = SimpleNamespace(headers={}, client=None)
    assert extract_client_ip(request) is None
