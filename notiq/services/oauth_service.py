"""
Federated login: builds the provider redirect and completes the callback.

Both providers end the same way: the external identity is resolved to a local
user and the client is redirected to `{client_url}/login` with the bearer token.
"""
import logging
from types import ModuleType
from typing import Dict
from urllib.parse import urlencode

import jwt
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from requests import RequestException

from notiq.core.config import settings
from notiq.core.exceptions import AppError, NotFound, ServiceUnavailable
from notiq.infrastructure.http import github_oauth_client, google_oauth_client
from notiq.infrastructure.http.google_oauth_client import OAuthError
from notiq.services import auth_service
from notiq.services.token_service import create_access_token, create_oauth_state, verify_oauth_state

_log = logging.getLogger("notiq.oauth")

PROVIDERS: Dict[str, ModuleType] = {
    "google": google_oauth_client,
    "github": github_oauth_client,
}


def _configured(provider: str) -> bool:
    if provider == "google":
        return settings.google_configured
    if provider == "github":
        return settings.github_configured
    return False


def _client(provider: str) -> ModuleType:
    if provider not in PROVIDERS:
        raise NotFound("Unknown login provider")
    if not _configured(provider):
        raise ServiceUnavailable(f"{provider.capitalize()} login is not configured")
    return PROVIDERS[provider]


def login_redirect_url(provider: str) -> str:
    """Authorize URL of the provider, carrying a signed `state`."""
    client = _client(provider)
    return client.authorization_url(create_oauth_state(provider=provider))


def failure_redirect_url() -> str:
    return f"{settings.client_url.rstrip('/')}/login?{urlencode({'error': 'oauth_failed'})}"


def complete_login(provider: str, *, code: str | None, state: str | None) -> str:
    """
    Handle the provider callback and return the client URL to redirect to.

    Failures past this point (state, provider exchange, user lookup or
    provisioning, token signing) do not raise: the client is sent back to its
    login page with an error flag.
    """
    client = _client(provider)
    if not code or not state:
        return failure_redirect_url()
    try:
        verify_oauth_state(state, provider=provider)
        identity = client.fetch_identity(code)
        user = auth_service.resolve_federated_user(
            provider=provider, provider_id=identity["id"], email=identity["email"]
        )
        token = create_access_token(user=user)
    except (
        jwt.InvalidTokenError,
        OAuthError,
        RequestException,
        AppError,
        PyMongoError,
        ValidationError,
        RuntimeError,
    ) as e:
        _log.warning("%s login failed: %s", provider, e)
        return failure_redirect_url()

    query = urlencode({"token": token, "email": user["email"]})
    return f"{settings.client_url.rstrip('/')}/login?{query}"
