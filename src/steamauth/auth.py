"""The Steam sign-in adapter.

:class:`SteamAuth` ties the pieces together:

1. :meth:`SteamAuth.get_redirect_url` asks the relying-party engine for the
   URL to send the user's browser to.
2. :meth:`SteamAuth.authenticate` verifies the callback Steam redirects
   back with, checks that the claimed identifier is a Steam community ID,
   and only then looks the user up.
3. :meth:`SteamAuth.fetch_identifier` turns a claimed identifier into a
   :class:`~steamauth.models.UserProfile` through the Steam Web API.

Each call awaits a single outbound request. An instance only holds its
frozen configuration and its collaborators, so one instance can serve
concurrent logins, and several instances (one per tenant) can coexist.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx
from pydantic import ValidationError

from steamauth.api import SteamWebAPI
from steamauth.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    UpstreamError,
)
from steamauth.models import CallbackRequest, SteamAuthConfig, UserProfile
from steamauth.relying_party import OpenIDEngine, RelyingParty

logger = logging.getLogger(__name__)

STEAM_OPENID_URL = "https://steamcommunity.com/openid"
"""OpenID identifier discovery is started from."""

STEAM_OPENID_LOGIN_URL = "https://steamcommunity.com/openid/login"
"""Steam's OP endpoint; assertions from anywhere else are refused."""

STEAM_CLAIMED_ID_PREFIX = "https://steamcommunity.com/openid/id/"
"""Namespace every Steam claimed identifier and identity lives under."""

OPENID2_NAMESPACE = "http://specs.openid.net/auth/2.0"

CLAIMED_IDENTITY_RE = re.compile(r"^https?://steamcommunity\.com/openid/id/\d+$", re.ASCII)

_CLAIMED_ID_PREFIXES = (STEAM_CLAIMED_ID_PREFIX, "http://steamcommunity.com/openid/id/")


def is_valid_claimed_identity(claimed_identifier: Optional[str]) -> bool:
    """Return ``True`` if *claimed_identifier* is a Steam community OpenID URL."""
    return bool(claimed_identifier) and CLAIMED_IDENTITY_RE.fullmatch(claimed_identifier) is not None


class SteamAuth:
    """Sign users in with Steam and look up their profile.

    Args:
        realm: Trust root Steam shows to the user, e.g. ``https://example.com/``.
        return_url: URL Steam redirects back to after login.
        api_key: Steam Web API key used for the profile lookup.
        relying_party: Optional :class:`~steamauth.relying_party.OpenIDEngine`
            to use instead of the built-in :class:`RelyingParty`.
        http_client: Optional :class:`httpx.AsyncClient` for Steam Web API
            calls. The caller keeps ownership of it.

    Raises:
        ConfigurationError: If *realm*, *return_url* or *api_key* is
            missing, empty, or not a string. Nothing else is constructed
            in that case.
    """

    def __init__(
        self,
        realm: Optional[str] = None,
        return_url: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        relying_party: Optional[OpenIDEngine] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        try:
            config = SteamAuthConfig(realm=realm, return_url=return_url, api_key=api_key)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid realm, return_url or api_key parameter(s): {exc}") from exc
        errors = config.validate_config()
        if errors:
            raise ConfigurationError(
                "Missing realm, return_url or api_key parameter(s). "
                f"These are required: {'; '.join(errors)}"
            )

        self._config = config
        if relying_party is None:
            relying_party = RelyingParty(
                config.return_url,
                config.realm,
                op_endpoint=STEAM_OPENID_LOGIN_URL,
                claimed_id_prefix=STEAM_CLAIMED_ID_PREFIX,
                identity_prefix=STEAM_CLAIMED_ID_PREFIX,
                namespace=OPENID2_NAMESPACE,
            )
        self._relying_party: OpenIDEngine = relying_party
        self._api = SteamWebAPI(config.api_key, http_client=http_client)

    @property
    def config(self) -> SteamAuthConfig:
        return self._config

    async def get_redirect_url(self) -> str:
        """Return the Steam login URL to redirect the user's browser to.

        Returns:
            The URL produced by the relying-party engine, unchanged.

        Raises:
            AuthenticationError: If the engine fails or produces no URL.
        """
        try:
            url = await self._relying_party.authenticate(STEAM_OPENID_URL, False)
        except Exception as exc:
            detail = str(exc)
            raise AuthenticationError(
                f"Authentication failed: {detail}" if detail else "Authentication failed."
            ) from exc

        if not url:
            raise AuthenticationError("Authentication failed.")

        logger.debug("Redirecting user to Steam for OpenID login")
        return url

    async def authenticate(self, request: CallbackRequest) -> UserProfile:
        """Verify Steam's callback and return the signed-in user's profile.

        The assertion is verified first, then the claimed identifier is
        checked against :data:`CLAIMED_IDENTITY_RE`; the Steam Web API is
        only contacted once both pass.

        Args:
            request: The callback request as the browser delivered it.

        Returns:
            The :class:`~steamauth.models.UserProfile` of the signed-in user.

        Raises:
            AuthenticationError: If verification fails or the claimed
                identifier is not a Steam community ID.
            NotFoundError: If Steam has no player for the SteamID.
            UpstreamError: If the Steam Web API call fails or returns
                a malformed player record.
        """
        try:
            result = await self._relying_party.verify_assertion(request)
        except Exception as exc:
            detail = str(exc)
            raise AuthenticationError(
                f"Failed to authenticate user: {detail}" if detail else "Failed to authenticate user."
            ) from exc

        if result is None or not result.authenticated:
            reason = result.reason if result is not None else None
            logger.warning("Steam OpenID assertion rejected: %s", reason or "not authenticated")
            raise AuthenticationError("Failed to authenticate user.")

        if not is_valid_claimed_identity(result.claimed_identifier):
            logger.warning("Rejected claimed identity %r", result.claimed_identifier)
            raise AuthenticationError("Claimed identity is not valid.")

        return await self.fetch_identifier(result.claimed_identifier)

    async def fetch_identifier(self, claimed_identifier: str) -> UserProfile:
        """Look up the Steam user behind a claimed identifier.

        Args:
            claimed_identifier: A Steam community OpenID URL such as
                ``https://steamcommunity.com/openid/id/76561197960287930``.

        Returns:
            A freshly built :class:`~steamauth.models.UserProfile`.

        Raises:
            NotFoundError: If the identifier holds no SteamID or Steam has
                no player for it.
            UpstreamError: If the Steam Web API call fails or returns
                a malformed player record.
        """
        steam_id = _strip_claimed_id_prefix(claimed_identifier)
        if not (steam_id.isascii() and steam_id.isdigit()):
            raise NotFoundError("No players found for the given SteamID.")

        player = await self._api.get_player_summary(steam_id)
        try:
            profile = UserProfile.from_player(steam_id, player)
        except ValidationError as exc:
            raise UpstreamError(f"Steam server error: malformed player record ({exc})") from exc

        logger.debug("Resolved SteamID %s", steam_id)
        return profile


def _strip_claimed_id_prefix(claimed_identifier: str) -> str:
    for prefix in _CLAIMED_ID_PREFIXES:
        if claimed_identifier.startswith(prefix):
            return claimed_identifier[len(prefix):]
    return claimed_identifier
