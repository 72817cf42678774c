"""
GitHub OAuth (authorization code flow) over the REST API.

GitHub users may hide their email; the primary verified address is read from
`/user/emails` and, failing that, `<login>@github.com` is used.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from notiq.core.config import settings
from notiq.infrastructure.http.google_oauth_client import OAuthError

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
API_URL = "https://api.github.com"

_log = logging.getLogger("notiq.oauth.github")


def authorization_url(state: str) -> str:
    params = {
        "client_id": settings.github_client_id,
        "redirect_uri": settings.oauth_callback_url("github"),
        "scope": "user:email",
        "state": state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def _exchange_code(code: str) -> str:
    r = requests.post(
        TOKEN_URL,
        data={
            "client_id": settings.github_client_id,
            "client_secret": settings.github_client_secret,
            "code": code,
            "redirect_uri": settings.oauth_callback_url("github"),
        },
        headers={"Accept": "application/json"},
        timeout=10,
    )
    data = r.json() if r.content else {}
    token = data.get("access_token")
    if r.status_code != 200 or not token:
        # GitHub answers 200 with an `error` field on bad codes
        raise OAuthError(f"Token exchange failed: {data.get('error') or r.status_code}")
    return token


def _primary_email(session: requests.Session) -> Optional[str]:
    r = session.get(f"{API_URL}/user/emails", timeout=10)
    if r.status_code != 200:
        return None
    emails = r.json() or []
    for e in emails:
        if e.get("primary") and e.get("verified"):
            return e.get("email")
    for e in emails:
        if e.get("verified"):
            return e.get("email")
    return None


def fetch_identity(code: str) -> Dict[str, Any]:
    """Exchange the code and return `{id, email}` for the GitHub account."""
    token = _exchange_code(code)
    with requests.Session() as s:
        s.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        })
        r = s.get(f"{API_URL}/user", timeout=10)
        if r.status_code != 200:
            raise OAuthError(f"GitHub profile request failed ({r.status_code})")
        profile = r.json()
        email = profile.get("email") or _primary_email(s)
    if not email:
        _log.info("GitHub user %s has no public email, using fallback", profile.get("login"))
        email = f"{profile.get('login')}@github.com"
    return {"id": str(profile["id"]), "email": str(email).strip().lower()}
