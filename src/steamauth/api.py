"""Steam Web API player lookup.

:class:`SteamWebAPI` wraps the single call steamauth needs,
``ISteamUser/GetPlayerSummaries/v0002``, on top of :class:`httpx.AsyncClient`.
It issues exactly one request per lookup: no retries, no caching, and the
transport's default timeout.

Failures are mapped onto the steamauth exception hierarchy:

* transport errors, non-2xx statuses, and bodies that are not a JSON
  object raise :class:`~steamauth.exceptions.UpstreamError`;
* a well-formed reply with no players raises
  :class:`~steamauth.exceptions.NotFoundError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from steamauth.exceptions import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

STEAM_API_BASE_URL = "https://api.steampowered.com/ISteamUser"
PLAYER_SUMMARIES_PATH = "/GetPlayerSummaries/v0002/"


class SteamWebAPI:
    """Client for the Steam Web API player summaries endpoint.

    Args:
        api_key: Steam Web API key sent as the ``key`` query parameter.
        http_client: Optional client to send requests with. It is used
            as-is and never closed here; when ``None`` a short-lived
            client is opened for each lookup.
        base_url: Override for the ``ISteamUser`` interface URL.

    Example::

        api = SteamWebAPI("0123456789ABCDEF")
        player = await api.get_player_summary("76561197960287930")
    """

    def __init__(
        self,
        api_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: str = STEAM_API_BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._http_client = http_client
        self._url = base_url.rstrip("/") + PLAYER_SUMMARIES_PATH

    async def get_player_summary(self, steam_id: str) -> dict[str, Any]:
        """Fetch the player record for one SteamID64.

        Args:
            steam_id: The SteamID64 to look up.

        Returns:
            The first entry of ``response.players``, unmodified.

        Raises:
            UpstreamError: On network failure, HTTP error status, or a
                response body that is not a JSON object.
            NotFoundError: If Steam returned no players.
        """
        params = {"key": self._api_key, "steamids": steam_id}
        logger.debug("GET %s for SteamID %s", self._url, steam_id)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(self._url, params=params)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(self._url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Steam server error: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Steam server error: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"Steam server error: invalid JSON ({exc})") from exc

        if not isinstance(data, dict):
            raise UpstreamError("Steam server error: unexpected response body")

        players = _extract_players(data)
        if not players:
            raise NotFoundError("No players found for the given SteamID.")

        return players[0]


def _extract_players(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Return ``data["response"]["players"]``, or ``[]`` when absent."""
    inner = data.get("response")
    if not isinstance(inner, dict):
        return []
    players = inner.get("players")
    if not isinstance(players, list):
        return []
    return [p for p in players if isinstance(p, dict)]
