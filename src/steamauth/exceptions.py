"""Exception hierarchy for steamauth.

All exceptions inherit from :class:`SteamAuthError`, so callers that only
care whether sign-in worked can catch the base class, while callers that
need to react differently (e.g. show a "try again later" page on upstream
failures) can catch the specific subclass.

Subclass hierarchy::

    SteamAuthError
    +-- ConfigurationError   (bad constructor arguments)
    +-- AuthenticationError  (OpenID handshake or assertion rejected)
    +-- NotFoundError        (Steam has no player for the SteamID)
    +-- UpstreamError        (Steam Web API unreachable or malformed reply)
"""


class SteamAuthError(Exception):
    """Base exception for all steamauth errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SteamAuthError):
    """Raised at construction time when required settings are missing or empty."""


class AuthenticationError(SteamAuthError):
    """Raised when the OpenID flow fails or the asserted identity is not acceptable."""


class NotFoundError(SteamAuthError):
    """Raised when the Steam Web API returns no player for the SteamID."""


class UpstreamError(SteamAuthError):
    """Raised on network failures, HTTP errors, or malformed Steam Web API responses."""
