"""OpenID 2.0 relying-party engine for Steam, backed by ``python3-openid``.

:class:`RelyingParty` is the protocol engine :class:`~steamauth.auth.SteamAuth`
drives. It exposes the two calls the adapter needs -- start an
authentication and verify an assertion -- as coroutines, and runs the
blocking ``python3-openid`` work in a worker thread.

The engine is *stateless*: it is built without an association store and
without a session, so ``python3-openid`` re-discovers the claimed
identifier and checks every assertion directly with the provider
(``check_authentication``). Nothing has to survive between the redirect
and the callback, which lets any worker in a pool handle the callback.

It is also *strict*: a positive assertion is only accepted when it came
from the expected OP endpoint, uses the OpenID 2.0 namespace, and names a
claimed identifier and identity under the expected prefixes.

Any object implementing :class:`OpenIDEngine` can be passed to
:class:`~steamauth.auth.SteamAuth` instead, which is how the tests drive
the adapter without a network.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from openid.consumer.consumer import CANCEL, SETUP_NEEDED, SUCCESS, Consumer, GenericConsumer
from openid.message import OPENID2_NS, Message

from steamauth.models import AssertionResult, CallbackRequest

logger = logging.getLogger(__name__)


class OpenIDEngine(Protocol):
    """Interface :class:`~steamauth.auth.SteamAuth` consumes."""

    async def authenticate(self, discovery_url: str, immediate: bool) -> Optional[str]:
        """Begin authentication and return the provider redirect URL."""
        ...

    async def verify_assertion(self, request: CallbackRequest) -> AssertionResult:
        """Verify the provider's callback and report who it vouches for."""
        ...


class RelyingParty:
    """Stateless, strict OpenID 2.0 relying party.

    Args:
        return_url: Where the provider should send the browser back to.
        realm: Trust root shown to the user by the provider.
        op_endpoint: The only OP endpoint assertions are accepted from.
        claimed_id_prefix: Required prefix of the asserted ``claimed_id``.
        identity_prefix: Required prefix of the asserted ``identity``.
        namespace: Required OpenID protocol namespace.
    """

    def __init__(
        self,
        return_url: str,
        realm: str,
        *,
        op_endpoint: str,
        claimed_id_prefix: str,
        identity_prefix: str,
        namespace: str = OPENID2_NS,
    ) -> None:
        self.return_url = return_url
        self.realm = realm
        self.op_endpoint = op_endpoint
        self.claimed_id_prefix = claimed_id_prefix
        self.identity_prefix = identity_prefix
        self.namespace = namespace

    async def authenticate(self, discovery_url: str, immediate: bool = False) -> Optional[str]:
        """Discover the provider and build the redirect URL.

        Args:
            discovery_url: OpenID identifier to run discovery on.
            immediate: Ask for ``checkid_immediate`` instead of
                ``checkid_setup``.

        Returns:
            The URL to redirect the user's browser to.

        Raises:
            openid.consumer.discover.DiscoveryFailure: If discovery fails.
        """
        return await asyncio.to_thread(self._begin, discovery_url, immediate)

    async def verify_assertion(self, request: CallbackRequest) -> AssertionResult:
        """Verify the callback request with the provider.

        Args:
            request: The callback exactly as the browser delivered it.

        Returns:
            An :class:`~steamauth.models.AssertionResult`. Refusals are
            reported with ``authenticated=False`` and a ``reason``.
        """
        return await asyncio.to_thread(self._complete, request)

    def _begin(self, discovery_url: str, immediate: bool) -> str:
        # Throwaway session; no state is carried to the callback.
        consumer = Consumer({}, None)
        auth_request = consumer.begin(discovery_url)
        url = auth_request.redirectURL(self.realm, self.return_url, immediate=immediate)
        logger.debug("Built OpenID redirect via %s", discovery_url)
        return url

    def _complete(self, request: CallbackRequest) -> AssertionResult:
        message = Message.fromPostArgs(request.params)
        # No pre-discovered endpoint: python3-openid discovers the claimed_id itself.
        response = GenericConsumer(None).complete(message, None, request.url)

        if response.status == SUCCESS:
            return self._check_success(response)
        if response.status == CANCEL:
            return AssertionResult(reason="Authentication was cancelled by the user")
        if response.status == SETUP_NEEDED:
            return AssertionResult(reason="Provider requires interactive setup")
        return AssertionResult(reason=getattr(response, "message", None) or "Assertion verification failed")

    def _check_success(self, response) -> AssertionResult:
        claimed_id = response.identity_url
        if response.message.getOpenIDNamespace() != self.namespace:
            return AssertionResult(reason="Unexpected OpenID namespace")
        if response.endpoint.server_url != self.op_endpoint:
            return AssertionResult(
                reason=f"Assertion came from unexpected OP endpoint {response.endpoint.server_url}"
            )
        if not claimed_id or not claimed_id.startswith(self.claimed_id_prefix):
            return AssertionResult(reason="Claimed identifier outside the expected namespace")
        identity = response.getSigned(OPENID2_NS, "identity")
        if not identity or not identity.startswith(self.identity_prefix):
            return AssertionResult(reason="Identity outside the expected namespace")

        return AssertionResult(authenticated=True, claimed_identifier=claimed_id)
