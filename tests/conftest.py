"""Shared test fixtures for the token relay."""

from typing import Any, Dict, List

import pytest
import requests

import auth
from app import create_app
from config import OAuthClientConfig


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = None):
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Bad Request"
        self._payload = payload
        self.text = text if text is not None else ""

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeProvider:
    """Records token endpoint calls and answers with a canned response."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.response = FakeResponse(200, {
            "access_token": "AT1",
            "refresh_token": "RT1",
            "expires": 1700000000,
            "token_type": "Bearer",
        })
        self.exc = None

    def post(self, url, data=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "data": data, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response

    def calls_to(self, url: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["url"] == url]


@pytest.fixture
def config() -> OAuthClientConfig:
    return OAuthClientConfig(
        client_id="client123",
        client_secret="secret456",
        redirect_uri="https://relay.example.com/",
        authorize_url="https://provider.example.com/oauth2/auth",
        token_url="https://provider.example.com/oauth2/token",
        refresh_url="https://provider.example.com/oauth2/refresh",
        extra_params={"appid": "poshue", "deviceid": "poshue1", "devicename": "poshue"},
        timeout=5,
        secret_key="test-secret",
    )


@pytest.fixture
def provider(monkeypatch) -> FakeProvider:
    fake = FakeProvider()
    monkeypatch.setattr(auth._SESSION, "post", fake.post)
    return fake


@pytest.fixture
def client(config, provider):
    app = create_app(config)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def timeout_error() -> Exception:
    return requests.exceptions.ConnectTimeout("timed out")
