#!/usr/bin/env python3
# src/auth.py
# OAuth2 authorization-code and refresh grants against the provider.

import os
import secrets
import logging
import requests
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from config import OAuthClientConfig
from json_helpers import parse_token_response
from time_helpers import expires_from_response, has_expired

LOG = logging.getLogger("auth")
_SESSION = requests.Session()
_SESSION.headers.update({"User-Agent": os.getenv("RELAY_USER_AGENT", "hue-token-relay/1.0")})

# Keys that TokenSet stores as attributes; everything else goes to ``values``.
_KNOWN_KEYS = {"access_token", "refresh_token", "expires", "expires_in", "access_token_expires_in"}


class ProviderError(RuntimeError):
    """The identity provider rejected a grant or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class TokenSet:
    access_token: str
    refresh_token: Optional[str]
    expires: int
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "TokenSet":
        if not payload.get("access_token"):
            raise ValueError("token response is missing access_token")
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires=expires_from_response(payload),
            values={k: v for k, v in payload.items() if k not in _KNOWN_KEYS},
        )

    def has_expired(self) -> bool:
        return has_expired(self.expires)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires": self.expires,
        }
        data.update(self.values)
        return data


def new_state() -> str:
    return secrets.token_urlsafe(32)


def auth_url(config: OAuthClientConfig, state: str) -> str:
    q = {
        "response_type": "code",
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "state": state,
    }
    q.update(config.extra_params)
    return requests.Request("GET", config.authorize_url, params=q).prepare().url


def _error_message(resp: requests.Response) -> str:
    """Pull the provider's own error text out of a failed token response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            # {"error": {"message": ...}}
            err = err.get("message") or err.get("description")
        desc = body.get("error_description")
        if err and desc:
            return f"{err}: {desc}"
        if err:
            return str(err)
        fault = body.get("fault")
        if isinstance(fault, dict) and fault.get("faultstring"):
            return str(fault["faultstring"])
    return f"HTTP {resp.status_code} {resp.reason or ''}".strip()


def _token_request(url: str, data: Dict[str, str], timeout: int) -> TokenSet:
    try:
        r = _SESSION.post(url, data=data, timeout=timeout)
    except requests.exceptions.Timeout as e:
        LOG.error("Token request to %s timed out after %ss", url, timeout)
        raise ProviderError(f"Provider did not respond within {timeout}s") from e
    except requests.exceptions.RequestException as e:
        LOG.error("Token request to %s failed: %s", url, type(e).__name__)
        raise ProviderError(f"Request failed: {e}") from e

    if r.status_code >= 400:
        msg = _error_message(r)
        LOG.warning("Provider rejected %s grant with HTTP %s", data["grant_type"], r.status_code)
        raise ProviderError(msg, status_code=r.status_code)

    try:
        payload = parse_token_response(r)
        if payload.get("error"):
            raise ProviderError(_error_message(r), status_code=r.status_code)
        tokens = TokenSet.from_response(payload)
    except ValueError as e:
        LOG.error("Malformed token response from %s: %s", url, e)
        raise ProviderError(str(e), status_code=r.status_code) from e

    LOG.info("Provider issued tokens for %s grant", data["grant_type"])
    return tokens


def exchange_code_for_token(config: OAuthClientConfig, code: str) -> TokenSet:
    """Exchange authorization code for tokens (authorization_code grant)."""
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "redirect_uri": config.redirect_uri,
    }
    return _token_request(config.token_url, data, config.timeout)


def refresh_with_refresh_token(config: OAuthClientConfig, refresh_token: str) -> TokenSet:
    data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": config.client_id,
        "client_secret": config.client_secret,
    }
    tokens = _token_request(config.refresh_url, data, config.timeout)
    # Providers that do not rotate refresh tokens omit it from the response.
    if not tokens.refresh_token:
        tokens.refresh_token = refresh_token
    return tokens
