"""
Google OAuth 2.0 (authorization code flow).

The callback exchanges the `code` for tokens and verifies the returned ID Token
with `google.oauth2.id_token.verify_oauth2_token`, using `google_client_id` as
the audience.
"""
import logging
from typing import Dict, Any
from urllib.parse import urlencode

import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import id_token
from google.auth.transport import requests as grequests

from notiq.core.config import settings

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
SCOPES = ["openid", "profile", "email"]


class OAuthError(Exception):
    pass


_log = logging.getLogger("notiq.oauth.google")


def authorization_url(state: str) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.oauth_callback_url("google"),
        "response_type": "code",
        "scope": " ".join(SCOPES),
        "state": state,
        "prompt": "select_account",
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def verify_id_token(id_token_str: str) -> Dict[str, Any]:
    """
    Verify a Google ID Token and return its claims when valid.
    """
    try:
        req = grequests.Request()
        # Tolerate small clock drift (up to 5 min)
        claims = id_token.verify_oauth2_token(
            id_token_str,
            req,
            settings.google_client_id,
            clock_skew_in_seconds=300,
        )
    except (ValueError, GoogleAuthError) as e:
        _log.warning("Google ID token rejected: %s", e)
        raise OAuthError("Invalid Google token") from e
    if claims.get("iss") not in {"https://accounts.google.com", "accounts.google.com"}:
        raise OAuthError("Invalid issuer")
    return claims


def fetch_identity(code: str) -> Dict[str, Any]:
    """Exchange the authorization code and return `{id, email}`."""
    r = requests.post(
        TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "redirect_uri": settings.oauth_callback_url("google"),
            "grant_type": "authorization_code",
        },
        timeout=10,
    )
    if r.status_code != 200:
        raise OAuthError(f"Token exchange failed ({r.status_code})")
    raw = r.json().get("id_token")
    if not raw:
        raise OAuthError("Token response without id_token")
    claims = verify_id_token(raw)
    email = str(claims.get("email") or "").strip().lower()
    if not claims.get("sub") or not email:
        raise OAuthError("Incomplete Google profile")
    return {"id": str(claims["sub"]), "email": email}
