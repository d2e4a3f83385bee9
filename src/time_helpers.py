#!/usr/bin/env python3
# src/time_helpers.py

import time
from typing import Dict, Any, Optional
from datetime import datetime, timezone

EXPIRED = "EXPIRED!"
VALID = "Valid (not expired)"

# Relative lifetimes, in order of preference. Hue answers with
# access_token_expires_in instead of the standard expires_in.
_RELATIVE_KEYS = ("expires_in", "access_token_expires_in")


def now() -> int:
    return int(time.time())


def has_expired(expires_at: int, current: Optional[int] = None) -> bool:
    """A token is expired once its expiry timestamp is at or before now."""
    if current is None:
        current = now()
    return expires_at <= current


def expiry_status(expires_at: int) -> str:
    return EXPIRED if has_expired(expires_at) else VALID


def to_human(expires_at: int) -> str:
    """
    Format a unix timestamp for display, e.g. 1700000000 -> "2023-11-14 22:13:20 UTC".
    Timestamps outside the platform's range come back as the bare number.
    """
    try:
        dt = datetime.fromtimestamp(expires_at, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(expires_at)
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError("token response has an invalid expiry") from e


def expires_from_response(payload: Dict[str, Any], current: Optional[int] = None) -> int:
    """
    Return the absolute expiry timestamp for a token endpoint response.

    An absolute ``expires`` wins; otherwise a relative lifetime is added to now.
    Raises ValueError when the response carries no usable expiry.
    """
    if current is None:
        current = now()
    if payload.get("expires") not in (None, ""):
        return _to_int(payload["expires"])
    for key in _RELATIVE_KEYS:
        if payload.get(key) not in (None, ""):
            return current + _to_int(payload[key])
    raise ValueError("token response has no expiry")
