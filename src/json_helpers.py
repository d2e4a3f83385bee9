#!/usr/bin/env python3
# src/json_helpers.py

import json
from typing import Any, Dict

import requests


def dump_pretty(data: Any) -> str:
    return json.dumps(data, indent=2)


def parse_token_response(resp: requests.Response) -> Dict[str, Any]:
    """
    Decode a token endpoint body into a dict.
    Raises ValueError if the body is not a JSON object.
    """
    try:
        data = resp.json()
    except ValueError:
        raise ValueError(f"Invalid JSON from token endpoint (HTTP {resp.status_code})")
    if not isinstance(data, dict):
        raise ValueError("Token endpoint response must be a JSON object.")
    return data
