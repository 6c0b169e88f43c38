"""OAuth client for HubSpot apps.

Handles the token lifecycle:
1. Generate the authorization URL for a portal
2. Read the tokens HubSpot appends to the redirect
3. Refresh the access token before it expires
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from ..auth import Auth, Clock, auth_from_token_response, mk_auth, utcnow
from ..config import HubSpotSettings
from ..config import settings as default_settings
from ..errors import DecodeError, OAuthError
from ..models import ErrorMessage
from ..types import ClientId, PortalId

log = logging.getLogger(__name__)

AUTHENTICATE_PATH = "/auth/authenticate"
REFRESH_PATH = "/auth/v1/refresh"


class OAuthClient:
    """OAuth client for a HubSpot app.

    Usage:
        client = OAuthClient(
            client_id="your_client_id",
            redirect_uri="http://localhost:3000/callback",
            scopes=["contacts-rw", "offline"],
        )

        # Send the user to HubSpot
        url = client.get_authorization_url(PortalId(62515))

        # HubSpot redirects to redirect_uri?access_token=...&expires_in=...
        auth = client.auth_from_callback(query_params)

        # Later, when auth.is_expired()
        auth, portal_id = await client.refresh(auth)
    """

    def __init__(
        self,
        client_id: ClientId | str,
        redirect_uri: str = "http://localhost:3000/callback",
        scopes: list[str] | None = None,
        settings: HubSpotSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id if isinstance(client_id, ClientId) else ClientId(client_id)
        self.redirect_uri = redirect_uri
        self.scopes = scopes or []
        self.settings = settings or default_settings
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: HubSpotSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "OAuthClient":
        """Create client from environment / ``.env`` configuration.

        Raises:
            OAuthError: If no client ID is configured
        """
        settings = settings or default_settings
        if not settings.oauth_configured:
            raise OAuthError(
                "OAuth not configured. Set HUBSPOT_CLIENT_ID first.",
                error_code="not_configured",
            )
        return cls(
            client_id=settings.client_id,
            redirect_uri=settings.redirect_uri,
            scopes=settings.scope_list,
            settings=settings,
            transport=transport,
        )

    def get_authorization_url(
        self,
        portal_id: PortalId,
        scopes: list[str] | None = None,
    ) -> str:
        """Generate the URL the user visits to grant access to a portal."""
        params = {
            "client_id": str(self.client_id),
            "portalId": portal_id.query_value,
            "redirect_uri": self.redirect_uri,
        }
        scope_list = scopes or self.scopes
        if scope_list:
            params["scope"] = " ".join(scope_list)
        base = self.settings.auth_base.rstrip("/")
        return f"{base}{AUTHENTICATE_PATH}?{urlencode(params)}"

    def auth_from_callback(self, params: Mapping[str, str], clock: Clock = utcnow) -> Auth:
        """Build :class:`Auth` from the redirect's query parameters.

        ``refresh_token`` is only present when ``offline`` was granted.

        Raises:
            OAuthError: If HubSpot reported an error or a token field is missing
        """
        if params.get("error"):
            raise OAuthError(
                params.get("error_description") or params["error"],
                error_code=params["error"],
                details=dict(params),
            )
        access_token = params.get("access_token")
        if not access_token:
            raise OAuthError(
                "Callback did not contain an access_token",
                error_code="invalid_response",
                details={"keys": sorted(params)},
            )
        try:
            expires_in = int(params.get("expires_in", ""))
        except ValueError:
            raise OAuthError(
                "Callback did not contain a numeric expires_in",
                error_code="invalid_response",
                details={"keys": sorted(params)},
            )
        if expires_in < 0:
            raise OAuthError(
                f"Callback expires_in is negative: {expires_in}",
                error_code="invalid_response",
            )
        return mk_auth(access_token, params.get("refresh_token") or None, expires_in, clock=clock)

    async def refresh(self, auth: Auth, clock: Clock = utcnow) -> tuple[Auth, PortalId]:
        """Exchange the refresh token for a new access token.

        The returned :class:`Auth` keeps the old refresh token when HubSpot
        does not send a new one.

        Raises:
            OAuthError: If there is no refresh token or the refresh fails
        """
        if auth.refresh_token is None:
            raise OAuthError(
                "Cannot refresh without a refresh token (was 'offline' granted?)",
                error_code="no_refresh_token",
            )

        url = self.settings.api_base.rstrip("/") + REFRESH_PATH
        log.debug("Refreshing access token via %s", url)
        async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
            response = await client.post(
                url,
                data={
                    "refresh_token": auth.refresh_token.decode("utf-8"),
                    "client_id": str(self.client_id),
                    "grant_type": "refresh_token",
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )

            if response.status_code != 200:
                raise self._refresh_failed(response)

            try:
                payload = response.json()
            except ValueError as e:
                raise OAuthError(
                    "Token refresh returned invalid JSON",
                    error_code="invalid_response",
                    details={"raw_response": response.text[:500]},
                ) from e

        try:
            new_auth, portal_id = auth_from_token_response(
                payload, refresh_token=auth.refresh_token, clock=clock
            )
        except DecodeError as e:
            raise OAuthError(
                f"Invalid token response: {e.reason}",
                error_code="invalid_response",
                details={"response_keys": sorted(payload) if isinstance(payload, dict) else []},
            ) from e

        log.info("Refreshed access token for portal %s", portal_id)
        return new_auth, portal_id

    @staticmethod
    def _refresh_failed(response: httpx.Response) -> OAuthError:
        details: dict[str, Any]
        try:
            details = response.json() if response.content else {}
        except ValueError:
            details = {"raw_response": response.text[:500]}
        if not isinstance(details, dict):
            details = {"raw_response": response.text[:500]}

        message = f"Token refresh failed: {response.status_code}"
        try:
            envelope = ErrorMessage.from_json(details)
            message = f"{message} {envelope.message} (requestId {envelope.request_id})"
        except DecodeError:
            pass
        error_code = details.get("status") if isinstance(details.get("status"), str) else None
        return OAuthError(message, error_code=error_code or "refresh_failed", details=details)
