"""Tests for the provider client helpers."""

from urllib.parse import parse_qs, urlparse

import pytest
import requests

import auth
from auth import ProviderError, TokenSet
from conftest import FakeResponse


def test_new_state_is_random():
    states = {auth.new_state() for _ in range(50)}
    assert len(states) == 50
    assert all(len(s) >= 32 for s in states)


def test_auth_url_encodes_parameters(config):
    url = auth.auth_url(config, "abc")
    q = parse_qs(urlparse(url).query)
    assert q["redirect_uri"] == ["https://relay.example.com/"]
    assert q["state"] == ["abc"]
    assert "https%3A%2F%2Frelay.example.com%2F" in url


def test_auth_url_keeps_existing_query(config):
    from dataclasses import replace

    cfg = replace(config, authorize_url="https://provider.example.com/auth?tenant=x", extra_params={})
    q = parse_qs(urlparse(auth.auth_url(cfg, "abc")).query)
    assert q["tenant"] == ["x"]
    assert q["response_type"] == ["code"]


def test_token_set_from_response_relative_expiry(monkeypatch):
    monkeypatch.setattr("time_helpers.now", lambda: 1000)
    tokens = TokenSet.from_response({"access_token": "A", "refresh_token": "R", "expires_in": 60, "scope": "x"})
    assert tokens.expires == 1060
    assert tokens.to_dict() == {"access_token": "A", "refresh_token": "R", "expires": 1060, "scope": "x"}


def test_token_set_requires_access_token():
    with pytest.raises(ValueError):
        TokenSet.from_response({"refresh_token": "R", "expires": 1})


def test_exchange_rejects_malformed_json(config, provider):
    provider.response = FakeResponse(200, None, text="<html>oops</html>")
    with pytest.raises(ProviderError) as exc:
        auth.exchange_code_for_token(config, "abc")
    assert "Invalid JSON" in exc.value.message
    assert exc.value.status_code == 200


def test_exchange_rejects_error_body_with_200(config, provider):
    provider.response = FakeResponse(200, {"error": "invalid_client"})
    with pytest.raises(ProviderError) as exc:
        auth.exchange_code_for_token(config, "abc")
    assert exc.value.message == "invalid_client"


def test_exchange_without_expiry_is_error(config, provider):
    provider.response = FakeResponse(200, {"access_token": "A"})
    with pytest.raises(ProviderError, match="no expiry"):
        auth.exchange_code_for_token(config, "abc")


def test_error_message_falls_back_to_status(config, provider):
    provider.response = FakeResponse(500, None)
    with pytest.raises(ProviderError) as exc:
        auth.exchange_code_for_token(config, "abc")
    assert exc.value.message == "HTTP 500 Bad Request"
    assert exc.value.status_code == 500


def test_fault_body_message(config, provider):
    provider.response = FakeResponse(401, {"fault": {"faultstring": "Invalid client identifier"}})
    with pytest.raises(ProviderError, match="Invalid client identifier"):
        auth.refresh_with_refresh_token(config, "RT0")


def test_connection_error_is_provider_error(config, provider):
    provider.exc = requests.exceptions.ConnectionError("refused")
    with pytest.raises(ProviderError) as exc:
        auth.refresh_with_refresh_token(config, "RT0")
    assert isinstance(exc.value.__cause__, requests.exceptions.ConnectionError)


def test_provider_error_does_not_leak_secret(config, provider, caplog):
    provider.response = FakeResponse(400, {"error": "invalid_grant"})
    with pytest.raises(ProviderError) as exc:
        auth.exchange_code_for_token(config, "abc")
    assert "secret456" not in str(exc.value)
    assert "secret456" not in caplog.text
    assert "abc" not in caplog.text


@pytest.mark.parametrize("expires", [[1], {"at": 1}, "soon"])
def test_exchange_with_invalid_expiry_is_error(config, provider, expires):
    provider.response = FakeResponse(200, {"access_token": "A", "expires": expires})
    with pytest.raises(ProviderError, match="invalid expiry"):
        auth.exchange_code_for_token(config, "abc")
