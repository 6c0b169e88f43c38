"""Shared test fixtures for the HubSpot client test suite."""

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

# Sample IDs used across tests
SAMPLE_CLIENT_ID = "test_client_id"
SAMPLE_PORTAL_ID = 62515
SAMPLE_VID = 12345
SAMPLE_USER_TOKEN = "f3c1a9e0b2d84e7c9a11d0b7c6e5f4a3"
SAMPLE_ACCESS_TOKEN = "access_tok_abc123"
SAMPLE_REFRESH_TOKEN = "refresh_tok_def456"
SAMPLE_REQUEST_ID = "req_7f3a9c"
SAMPLE_FORM_GUID = "e1c6a7b0-2d4f-4c1e-9b3a-8f6e5d4c3b2a"

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
FAR_FUTURE = datetime(2099, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Mock Response Data
# ============================================================================

MOCK_OPTION = {"label": "Lead", "value": "lead", "displayOrder": 0}

MOCK_PROPERTY = {
    "name": "lifecyclestage",
    "label": "Lifecycle Stage",
    "description": "The qualification of contacts to sales readiness.",
    "groupName": "contactinformation",
    "type": "enumeration",
    "fieldType": "radio",
    "formField": True,
    "displayOrder": 3,
    "options": [
        MOCK_OPTION,
        {"label": "Customer", "value": "customer", "displayOrder": 1},
    ],
}

MOCK_TEXT_PROPERTY = {
    "name": "email",
    "label": "Email",
    "description": "",
    "groupName": "contactinformation",
    "type": "string",
    "fieldType": "text",
    "formField": True,
    "displayOrder": 1,
    "options": [],
}

MOCK_GROUP = {
    "name": "contactinformation",
    "displayName": "Contact Information",
    "displayOrder": 0,
    "portalId": SAMPLE_PORTAL_ID,
}

MOCK_CONTACT = {
    "vid": SAMPLE_VID,
    "canonical-vid": SAMPLE_VID,
    "portal-id": SAMPLE_PORTAL_ID,
    "is-contact": True,
    "properties": {
        "email": {"value": "jo@example.com"},
        "firstname": {"value": "Jo"},
        "lastname": {"value": "Doe"},
    },
    "identity-profiles": [{"vid": SAMPLE_VID, "identities": []}],
}

MOCK_CONTACTS_PAGE = {
    "contacts": [MOCK_CONTACT],
    "has-more": False,
    "vid-offset": SAMPLE_VID,
}

MOCK_REFRESH_RESPONSE = {
    "portal_id": SAMPLE_PORTAL_ID,
    "expires_in": 28800,
    "refresh_token": "refresh_tok_new789",
    "access_token": "access_tok_new789",
}

MOCK_ERROR = {
    "status": "error",
    "message": "contact does not exist",
    "requestId": SAMPLE_REQUEST_ID,
}


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def auth():
    """A valid (non-expiring) Auth value."""
    from hubspot_api.auth import Auth

    return Auth(
        access_token=SAMPLE_ACCESS_TOKEN,
        refresh_token=SAMPLE_REFRESH_TOKEN,
        expires_at=FAR_FUTURE,
    )


@pytest.fixture
def test_settings():
    """Settings independent of the environment and any .env file."""
    from hubspot_api.config import HubSpotSettings

    return HubSpotSettings(
        _env_file=None,
        client_id=SAMPLE_CLIENT_ID,
        portal_id=SAMPLE_PORTAL_ID,
        redirect_uri="http://localhost:3000/callback",
        scopes="contacts-rw,offline",
    )


@pytest.fixture
def auth_file(tmp_path, auth):
    """Credentials file as written from 'hubspot oauth login' output."""
    import json

    path = tmp_path / "auth.json"
    path.write_text(json.dumps(auth.to_json()))
    return path


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_transport(recorded_requests):
    """Factory for an httpx.MockTransport that records every request.

    ``routes`` maps ``(METHOD, path)`` to ``(status, json_body)``; unknown
    routes answer 404 with a HubSpot error envelope.
    """

    def _create(routes: dict[tuple[str, str], tuple[int, Any]]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            status, body = routes.get(
                (request.method, request.url.path),
                (404, {"status": "error", "message": "not found", "requestId": "req_404"}),
            )
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)

        return httpx.MockTransport(handler)

    return _create


@pytest.fixture
def make_client(auth, test_settings, mock_transport):
    """Factory for a HubSpotClient backed by a MockTransport."""
    from hubspot_api.api import HubSpotClient

    def _create(routes: dict[tuple[str, str], tuple[int, Any]], client_auth=None) -> HubSpotClient:
        http_client = httpx.AsyncClient(transport=mock_transport(routes))
        return HubSpotClient(client_auth or auth, settings=test_settings, http_client=http_client)

    return _create
