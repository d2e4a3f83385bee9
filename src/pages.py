#!/usr/bin/env python3
# src/pages.py
# HTML shown after a successful code exchange.

from flask import render_template_string

from auth import TokenSet
from json_helpers import dump_pretty
from time_helpers import expiry_status, to_human

TOKEN_PAGE = """
<html>
<head>
<title>Hue Remote API Access Tokens</title>
<style>
  body { font-family: sans-serif; max-width: 48em; margin: 2em auto; }
  label { display: block; margin-top: 1em; font-weight: bold; }
  input { width: 80%; font-family: monospace; }
  pre { background: #f4f4f4; padding: 1em; }
</style>
<script>
  function copyField(id) {
    navigator.clipboard.writeText(document.getElementById(id).value);
  }
</script>
</head>
<body>
<h1>Your token...</h1>
<p>Record everything below. You need the refresh token and the expiration
timestamp (a unix timestamp) to refresh the access token when it expires.</p>
<p><b>No information</b> about your tokens is retained by this site.</p>
<p>To disable the access token, visit the
<a id="revoke" href="https://account.meethue.com/apps">Hue account apps</a> page and deactivate this application.</p>

<form id="tokens" onsubmit="return false">
  <label for="accesstoken">Access Token:</label>
  <input id="accesstoken" value="{{ tokens.access_token }}" readonly>
  <button type="button" onclick="copyField('accesstoken')">Copy</button>

  <label for="refreshtoken">Refresh Token:</label>
  <input id="refreshtoken" value="{{ tokens.refresh_token or '' }}" readonly>
  <button type="button" onclick="copyField('refreshtoken')">Copy</button>

  <label for="expiredate">Expiration Date:</label>
  <input id="expiredate" value="{{ tokens.expires }} ({{ expires_human }})" readonly>

  <label for="expirestatus">Expiration Status:</label>
  <input id="expirestatus" value="{{ status }}" readonly>
</form>

<h1>JSON</h1>
<p>The same information as a JSON object.</p>
<pre>{{ as_json }}</pre>
</body>
</html>
"""


def render_token_page(tokens: TokenSet) -> str:
    return render_template_string(
        TOKEN_PAGE,
        tokens=tokens,
        expires_human=to_human(tokens.expires),
        status=expiry_status(tokens.expires),
        as_json=dump_pretty(tokens.to_dict()),
    )
