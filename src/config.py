#!/usr/bin/env python3
# src/config.py

import os
import secrets
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional
from dotenv import load_dotenv

LOG = logging.getLogger("config")

HUE_AUTHORIZE_URL = "https://api.meethue.com/oauth2/auth"
HUE_TOKEN_URL = "https://api.meethue.com/oauth2/token"
HUE_REFRESH_URL = "https://api.meethue.com/oauth2/refresh"
DEFAULT_REDIRECT_URI = "http://localhost:5000/"
DEFAULT_TIMEOUT = 10

# env var -> query parameter name expected by the Hue authorize page
EXTRA_PARAM_ENV = {
    "OAUTH_APP_ID": "appid",
    "OAUTH_DEVICE_ID": "deviceid",
    "OAUTH_DEVICE_NAME": "devicename",
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class OAuthClientConfig:
    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str = DEFAULT_REDIRECT_URI
    authorize_url: str = HUE_AUTHORIZE_URL
    token_url: str = HUE_TOKEN_URL
    refresh_url: str = HUE_REFRESH_URL
    extra_params: Dict[str, str] = field(default_factory=dict)
    timeout: int = DEFAULT_TIMEOUT
    secret_key: str = field(default_factory=lambda: secrets.token_hex(24), repr=False)


# -------------------- _env helpers --------------------
def _env(k: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(k, default)


def _env_int(k: str, default: int) -> int:
    """
    Read integer environment var (or return default).
    A malformed value is logged and ignored.
    """
    val = os.getenv(k)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        LOG.warning("Ignoring non-integer %s=%r", k, val)
        return default


def load_config(dotenv: bool = True) -> OAuthClientConfig:
    """
    Build the client config from the environment (and ``.env`` when present).
    Raises ConfigError if the client credentials are missing.
    """
    if dotenv:
        load_dotenv()

    client_id = _env("OAUTH_CLIENT_ID")
    client_secret = _env("OAUTH_CLIENT_SECRET")
    if not all([client_id, client_secret]):
        raise ConfigError("Missing OAUTH_CLIENT_ID / OAUTH_CLIENT_SECRET in env")

    extra = {param: _env(k) for k, param in EXTRA_PARAM_ENV.items() if _env(k)}

    timeout = _env_int("OAUTH_TIMEOUT", DEFAULT_TIMEOUT)
    if timeout <= 0:
        raise ConfigError(f"OAUTH_TIMEOUT must be positive, got {timeout}")

    return OAuthClientConfig(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=_env("OAUTH_REDIRECT_URI", DEFAULT_REDIRECT_URI),
        authorize_url=_env("OAUTH_AUTHORIZE_URL", HUE_AUTHORIZE_URL),
        token_url=_env("OAUTH_TOKEN_URL", HUE_TOKEN_URL),
        refresh_url=_env("OAUTH_REFRESH_URL", HUE_REFRESH_URL),
        extra_params=extra,
        timeout=timeout,
        secret_key=_env("FLASK_SECRET") or secrets.token_hex(24),
    )
