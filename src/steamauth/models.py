"""Pydantic models shared across steamauth.

**Configuration** -- :class:`SteamAuthConfig`, captured once when a
:class:`~steamauth.auth.SteamAuth` is constructed and never changed.

**Protocol** -- :class:`CallbackRequest` (what the provider redirected the
browser back with) and :class:`AssertionResult` (what the relying-party
engine concluded about it).

**Output** -- :class:`UserProfile` and its :class:`Avatar`, built fresh for
every successful lookup and handed to the caller.

All models use Pydantic v2. Configuration and output models are frozen.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class SteamAuthConfig(BaseModel):
    """Relying-party settings for one Steam sign-in integration.

    Every field is required to be a non-empty string; :meth:`validate_config`
    reports the ones that are not. Whitespace-only values are accepted.

    Example::

        SteamAuthConfig(
            realm="https://example.com/",
            return_url="https://example.com/auth/steam/return",
            api_key="0123456789ABCDEF",
        )
    """

    model_config = ConfigDict(frozen=True)

    realm: Optional[str] = Field(
        default=None, description="Trust root shown to the user by Steam"
    )
    return_url: Optional[str] = Field(
        default=None, description="URL Steam redirects back to after login"
    )
    api_key: Optional[str] = Field(
        default=None, repr=False, description="Steam Web API key"
    )

    def validate_config(self) -> list[str]:
        """Return one error message per missing or empty field.

        Returns:
            A list of human-readable error strings. Empty if valid.
        """
        errors: list[str] = []
        for name in ("realm", "return_url", "api_key"):
            if not getattr(self, name):
                errors.append(f"'{name}' is required")
        return errors


# --- Protocol ---


class CallbackRequest(BaseModel):
    """The inbound request Steam redirected the user's browser back with.

    ``url`` must be the full URL as received, including the query string;
    the OpenID response parameters normally travel there. Providers that
    POST their response put the parameters in ``form`` instead.
    """

    method: str = "GET"
    url: str
    form: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_url(cls, url: str) -> CallbackRequest:
        return cls(url=url)

    @property
    def params(self) -> dict[str, str]:
        """Query-string parameters merged with form fields (form wins)."""
        merged = dict(parse_qsl(urlsplit(self.url).query, keep_blank_values=True))
        merged.update(self.form)
        return merged


class AssertionResult(BaseModel):
    """Outcome of verifying a :class:`CallbackRequest`.

    Attributes:
        authenticated: ``True`` only if the assertion verified.
        claimed_identifier: The identity URL the provider vouched for.
        reason: Why verification was refused, when the engine says.
    """

    authenticated: bool = False
    claimed_identifier: Optional[str] = None
    reason: Optional[str] = None


# --- Output ---


class Avatar(BaseModel):
    """Avatar image URLs in Steam's three size tiers."""

    model_config = ConfigDict(frozen=True)

    small: Optional[str] = None
    medium: Optional[str] = None
    large: Optional[str] = None


class UserProfile(BaseModel):
    """A Steam user, as returned by ``GetPlayerSummaries``.

    ``id`` is the SteamID64 kept as a string; it does not fit every
    consumer's integer type and is only ever used as an opaque key.
    ``raw`` holds the unmodified player record for fields not surfaced here.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    profile_url: Optional[str] = None
    avatar: Avatar = Field(default_factory=Avatar)
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_player(cls, steam_id: str, player: dict[str, Any]) -> UserProfile:
        """Map a ``GetPlayerSummaries`` player record onto a profile.

        Args:
            steam_id: The SteamID64 that was looked up.
            player: One entry of ``response.players``.

        Returns:
            A new :class:`UserProfile`.
        """
        return cls(
            id=steam_id,
            username=player.get("personaname"),
            display_name=player.get("realname"),
            profile_url=player.get("profileurl"),
            avatar=Avatar(
                small=player.get("avatar"),
                medium=player.get("avatarmedium"),
                large=player.get("avatarfull"),
            ),
            raw=player,
        )
