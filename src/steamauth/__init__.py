"""steamauth -- Sign users in with Steam via OpenID 2.0.

This package lets a web backend hand user login off to Steam's OpenID
provider and then look up the verified account through the Steam Web API.
It builds the provider redirect URL, verifies the signed callback, and
turns the verified claimed identifier into a :class:`UserProfile`.

Typical usage::

    from steamauth import CallbackRequest, SteamAuth

    steam = SteamAuth(
        realm="https://example.com/",
        return_url="https://example.com/auth/steam/return",
        api_key="...",
    )

    url = await steam.get_redirect_url()          # send the browser here
    ...
    user = await steam.authenticate(CallbackRequest.from_url(request_url))

Modules:
    auth: The :class:`SteamAuth` adapter.
    relying_party: OpenID relying-party engine backed by ``python3-openid``.
    api: Steam Web API player lookup.
    models: Pydantic models for configuration, callbacks, and profiles.
    exceptions: Exception hierarchy.
"""

from steamauth.auth import SteamAuth, is_valid_claimed_identity
from steamauth.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    SteamAuthError,
    UpstreamError,
)
from steamauth.models import (
    AssertionResult,
    Avatar,
    CallbackRequest,
    SteamAuthConfig,
    UserProfile,
)

__version__ = "0.1.0"

__all__ = [
    "AssertionResult",
    "AuthenticationError",
    "Avatar",
    "CallbackRequest",
    "ConfigurationError",
    "NotFoundError",
    "SteamAuth",
    "SteamAuthConfig",
    "SteamAuthError",
    "UpstreamError",
    "UserProfile",
    "is_valid_claimed_identity",
]
