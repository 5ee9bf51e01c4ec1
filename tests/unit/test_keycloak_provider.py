"""Tests for Keycloak token introspection."""

import time
from unittest.mock import patch

import pytest
from keycloak.exceptions import KeycloakConnectionError

from protoledger.infrastructure.auth.keycloak_provider import KeycloakProvider, OIDCUser


@pytest.fixture
def client():
    with patch("protoledger.infrastructure.auth.keycloak_provider.KeycloakOpenID") as cls:
        yield cls.return_value


def _provider(**kwargs) -> KeycloakProvider:
    return KeycloakProvider("http://kc", "realm", "protoledger", "secret", **kwargs)


def test_active_token_resolves_actor(client) -> None:
    client.introspect.return_value = {
        "active": True,
        "sub": "kc-1",
        "email": "a@example.com",
        "preferred_username": "alice",
    }
    assert _provider().decode_token("t") == OIDCUser("kc-1", "a@example.com", "alice")


def test_inactive_token(client) -> None:
    client.introspect.return_value = {"active": False}
    assert _provider().decode_token("t") is None


def test_token_without_subject(client) -> None:
    client.introspect.return_value = {"active": True}
    assert _provider().decode_token("t") is None


def test_introspection_error_returns_none(client) -> None:
    client.introspect.side_effect = KeycloakConnectionError("down")
    assert _provider().decode_token("t") is None


def test_active_result_is_cached(client) -> None:
    client.introspect.return_value = {"active": True, "sub": "kc-1"}
    provider = _provider(cache_ttl=60)

    provider.decode_token("t")
    provider.decode_token("t")

    assert client.introspect.call_count == 1


def test_cache_honours_token_expiry(client) -> None:
    client.introspect.return_value = {"active": True, "sub": "kc-1", "exp": time.time() - 1}
    provider = _provider(cache_ttl=60)

    provider.decode_token("t")
    provider.decode_token("t")

    assert client.introspect.call_count == 2


def test_cache_disabled(client) -> None:
    client.introspect.return_value = {"active": True, "sub": "kc-1"}
    provider = _provider(cache_ttl=0)

    provider.decode_token("t")
    provider.decode_token("t")

    assert client.introspect.call_count == 2


def _introspect_by_token(clock):
    def introspect(token):
        return {"active": True, "sub": token, "exp": clock.time.return_value + 1}

    return introspect


def test_expired_tokens_do_not_accumulate(client) -> None:
    with patch("protoledger.infrastructure.auth.keycloak_provider.time") as clock:
        clock.time.return_value = 1000.0
        client.introspect.side_effect = _introspect_by_token(clock)
        provider = _provider(cache_ttl=60)

        for i in range(500):
            provider.decode_token(f"t{i}")
        assert provider.cached_tokens() == 500

        clock.time.return_value = 2000.0
        provider.decode_token("fresh")

    assert provider.cached_tokens() == 1


def test_cache_size_is_capped(client) -> None:
    with patch("protoledger.infrastructure.auth.keycloak_provider.time") as clock:
        clock.time.return_value = 1000.0
        client.introspect.side_effect = _introspect_by_token(clock)
        provider = _provider(cache_ttl=60, max_entries=10)

        for i in range(50):
            provider.decode_token(f"t{i}")

        assert provider.cached_tokens() == 10
        # Oldest entries were evicted; the newest is still served from cache
        calls = client.introspect.call_count
        provider.decode_token("t49")
        assert client.introspect.call_count == calls
        provider.decode_token("t0")
        assert client.introspect.call_count == calls + 1
