#!/usr/bin/env python3
# src/app.py

import re
import secrets
import logging
from flask import Flask, Response, current_app, redirect, request, session

from auth import ProviderError, TokenSet, auth_url, exchange_code_for_token, new_state, refresh_with_refresh_token
from config import OAuthClientConfig
from json_helpers import dump_pretty
from pages import render_token_page

LOG = logging.getLogger("app")

STATE_KEY = "oauth2state"
TOKEN_RE = re.compile(r"[a-zA-Z0-9]+")
EXPIRES_RE = re.compile(r"[0-9]+")


def _json(data, status: int = 200) -> Response:
    return Response(dump_pretty(data), status=status, mimetype="application/json")


def _text(body: str, status: int) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def _config() -> OAuthClientConfig:
    return current_app.config["OAUTH_CLIENT"]


def index():
    code = request.args.get("code")
    error = request.args.get("error")

    # First visit: send the browser to the provider.
    if code is None and error is None:
        state = new_state()
        session[STATE_KEY] = state
        LOG.info("Redirecting to provider for authorization")
        return redirect(auth_url(_config(), state))

    expected = session.pop(STATE_KEY, None)
    returned = request.args.get("state")

    if error:
        LOG.info("Provider returned authorization error: %s", error)
        return _text(f"Authorization failed: {error} {request.args.get('error_description', '')}".strip(), 400)

    if not returned or expected is None or not secrets.compare_digest(returned.encode(), expected.encode()):
        LOG.warning("Rejected callback with invalid state")
        return _text("Invalid state", 400)

    try:
        tokens = exchange_code_for_token(_config(), code)
    except ProviderError as e:
        return _text(f"Token exchange failed: {e.message}", 502)

    if request.accept_mimetypes.best_match(["text/html", "application/json"]) == "application/json":
        return _json(tokens.to_dict())
    return render_token_page(tokens)


def refresh():
    access_token = request.form.get("access_token")
    refresh_token = request.form.get("refresh_token")
    expires = request.form.get("expires")

    if (
        access_token is None
        or refresh_token is None
        or expires is None
        or not TOKEN_RE.fullmatch(access_token)
        or not TOKEN_RE.fullmatch(refresh_token)
        or not EXPIRES_RE.fullmatch(expires)
    ):
        return _json({"error": "bad request"}, 400)

    try:
        expires_at = int(expires)
    except ValueError:
        # Too many digits to convert; no such timestamp is in the past.
        return _json({"error": "not expired"}, 424)

    existing = TokenSet(access_token=access_token, refresh_token=refresh_token, expires=expires_at)
    if not existing.has_expired():
        return _json({"error": "not expired"}, 424)

    try:
        tokens = refresh_with_refresh_token(_config(), existing.refresh_token)
    except ProviderError as e:
        return _json({"error": e.message}, 502)
    return _json(tokens.to_dict())


def create_app(config: OAuthClientConfig) -> Flask:
    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config["OAUTH_CLIENT"] = config
    app.add_url_rule("/", "index", index, methods=["GET"])
    app.add_url_rule("/refresh", "refresh", refresh, methods=["POST"])
    return app
