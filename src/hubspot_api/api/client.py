"""HubSpot API client - authenticated calls returning decoded JSON.

Every request goes through :func:`~hubspot_api.auth.new_auth_request`, which
puts the access token in the ``access_token`` query parameter. Error
responses are decoded into :class:`~hubspot_api.errors.ApiError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..auth import Auth, new_auth_request
from ..config import HubSpotSettings
from ..config import settings as default_settings
from ..errors import ApiError, DecodeError
from ..models import ErrorMessage
from .contacts import ContactsAPI
from .forms import FormsAPI
from .properties import PropertiesAPI

log = logging.getLogger(__name__)


class HubSpotClient:
    """HubSpot API client with ergonomic interface.

    Usage:
        async with HubSpotClient(auth) as hs:
            page = await hs.contacts.list(count=50)
            props = await hs.properties.list()
    """

    def __init__(
        self,
        auth: Auth,
        settings: HubSpotSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.auth = auth
        self.settings = settings or default_settings
        self._client = http_client or httpx.AsyncClient(timeout=self.settings.timeout)

        # Sub-clients for different resources
        self.contacts = ContactsAPI(self)
        self.properties = PropertiesAPI(self)
        self.forms = FormsAPI(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        pieces: list[str],
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Make an authenticated API request and decode the JSON body.

        ``pieces`` are path segments below ``settings.api_base``.

        Raises:
            ApiError: If HubSpot answers with status >= 400
            UrlError: If the pieces do not form a valid URL
        """
        if self.auth.is_expired():
            log.warning("Access token expired at %s; request will likely fail", self.auth.expires_at)

        request = new_auth_request(
            self.auth, [self.settings.api_base.rstrip("/"), *pieces]
        ).build(method, params=params, json=json)
        log.debug("%s %s", request.method, request.url.copy_remove_param("access_token"))

        response = await self._client.send(request)
        return decode_response(response)

    async def _get(self, *pieces: str, **params: Any) -> Any:
        return await self._request("GET", list(pieces), params=params or None)

    async def _post(self, pieces: list[str], json: Any = None, **params: Any) -> Any:
        return await self._request("POST", pieces, params=params or None, json=json)

    async def _post_form(self, url: str, data: Mapping[str, str]) -> httpx.Response:
        """Unauthenticated form-encoded POST (used by form submissions)."""
        log.debug("POST %s", url)
        response = await self._client.post(url, data=data)
        if response.status_code >= 400:
            raise api_error_from_response(response)
        return response


def api_error_from_response(response: httpx.Response) -> ApiError:
    """Turn an error response into :class:`ApiError`, using the envelope if present."""
    try:
        envelope = ErrorMessage.from_json(response.json())
    except (ValueError, DecodeError):
        text = response.text[:500] if response.content else ""
        message = f"HTTP {response.status_code}: {text}" if text else f"HTTP {response.status_code}"
        return ApiError(message, status_code=response.status_code)
    return ApiError(envelope.message, request_id=envelope.request_id, status_code=response.status_code)


def decode_response(response: httpx.Response) -> Any:
    if response.status_code >= 400:
        raise api_error_from_response(response)
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise ApiError(
            f"Invalid JSON response: {e}",
            status_code=response.status_code,
        ) from e
