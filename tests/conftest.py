"""Shared test fixtures for steamauth.

Provides a canned Steam player record, valid constructor arguments, and a
fake relying-party engine that never touches the network.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from steamauth.models import AssertionResult


STEAM_ID = "76561198000000000"
CLAIMED_ID = f"https://steamcommunity.com/openid/id/{STEAM_ID}"
API_KEY = "TESTKEY0123456789"


# ---------------------------------------------------------------------------
# Data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def player_record() -> dict[str, Any]:
    """A single player record as returned by GetPlayerSummaries."""
    return {
        "steamid": STEAM_ID,
        "personaname": "Alice",
        "realname": "Alice A",
        "profileurl": f"https://steamcommunity.com/profiles/{STEAM_ID}/",
        "avatar": "a.jpg",
        "avatarmedium": "am.jpg",
        "avatarfull": "af.jpg",
        "communityvisibilitystate": 3,
    }


@pytest.fixture
def config_kwargs() -> dict[str, str]:
    """Valid constructor arguments for SteamAuth."""
    return {
        "realm": "https://example.com/",
        "return_url": "https://example.com/auth/steam/return",
        "api_key": API_KEY,
    }


# ---------------------------------------------------------------------------
# Engine fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_engine() -> AsyncMock:
    """A relying-party engine double.

    ``authenticate`` returns a fixed redirect URL and ``verify_assertion``
    reports a successful assertion for :data:`CLAIMED_ID`. Tests override
    ``return_value`` / ``side_effect`` as needed.
    """
    engine = AsyncMock()
    engine.authenticate.return_value = "https://steamcommunity.com/openid/login?openid.mode=checkid_setup"
    engine.verify_assertion.return_value = AssertionResult(
        authenticated=True, claimed_identifier=CLAIMED_ID
    )
    return engine
