"""Tests for the Contacts API."""

import json

import httpx
import pytest

from hubspot_api.api import HubSpotClient
from hubspot_api.errors import ApiError, DecodeError
from hubspot_api.models import PropertyValue
from hubspot_api.types import ContactId, UserToken

from tests.conftest import (
    MOCK_CONTACT,
    MOCK_CONTACTS_PAGE,
    MOCK_ERROR,
    SAMPLE_ACCESS_TOKEN,
    SAMPLE_USER_TOKEN,
    SAMPLE_VID,
)

ALL_CONTACTS = "/contacts/v1/lists/all/contacts/all"


class TestContactsList:
    @pytest.mark.asyncio
    async def test_list(self, make_client, recorded_requests):
        client = make_client({("GET", ALL_CONTACTS): (200, MOCK_CONTACTS_PAGE)})

        async with client:
            page = await client.contacts.list(count=50, properties=["email", "firstname"])

        assert page.contacts[0]["vid"] == SAMPLE_VID
        assert page.has_more is False
        params = recorded_requests[0].url.params
        assert params["count"] == "50"
        assert params.get_list("property") == ["email", "firstname"]
        assert "vidOffset" not in params
        assert params["access_token"] == SAMPLE_ACCESS_TOKEN

    @pytest.mark.asyncio
    async def test_list_caps_count_and_sends_offset(self, make_client, recorded_requests):
        client = make_client({("GET", ALL_CONTACTS): (200, MOCK_CONTACTS_PAGE)})

        async with client:
            await client.contacts.list(count=500, vid_offset=999)

        params = recorded_requests[0].url.params
        assert params["count"] == "100"
        assert params["vidOffset"] == "999"
        assert params["access_token"] == SAMPLE_ACCESS_TOKEN

    @pytest.mark.asyncio
    async def test_iter_all_follows_offset(self, recorded_requests, auth, test_settings):
        pages = [
            {"contacts": [{"vid": 1}, {"vid": 2}], "has-more": True, "vid-offset": 2},
            {"contacts": [{"vid": 3}], "has-more": False, "vid-offset": 3},
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(200, json=pages[len(recorded_requests) - 1])

        client = HubSpotClient(
            auth,
            settings=test_settings,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        async with client:
            vids = [c["vid"] async for c in client.contacts.iter_all(count=2)]

        assert vids == [1, 2, 3]
        assert "vidOffset" not in recorded_requests[0].url.params
        assert recorded_requests[1].url.params["vidOffset"] == "2"
        assert all(r.url.params["access_token"] == SAMPLE_ACCESS_TOKEN for r in recorded_requests)

    @pytest.mark.asyncio
    async def test_malformed_page(self, make_client):
        client = make_client({("GET", ALL_CONTACTS): (200, {"contacts": []})})

        async with client:
            with pytest.raises(DecodeError) as exc_info:
                await client.contacts.list()

        assert exc_info.value.type_name == "ContactsPage"


class TestContactsGet:
    @pytest.mark.asyncio
    async def test_get_by_vid(self, make_client, recorded_requests):
        path = f"/contacts/v1/contact/vid/{SAMPLE_VID}/profile"
        client = make_client({("GET", path): (200, MOCK_CONTACT)})

        async with client:
            contact = await client.contacts.get(ContactId(SAMPLE_VID))

        assert contact == MOCK_CONTACT
        assert recorded_requests[0].url.path == path

    @pytest.mark.asyncio
    async def test_get_by_token(self, make_client, recorded_requests):
        path = f"/contacts/v1/contact/utk/{SAMPLE_USER_TOKEN}/profile"
        client = make_client({("GET", path): (200, MOCK_CONTACT)})

        async with client:
            contact = await client.contacts.get_by_token(UserToken(SAMPLE_USER_TOKEN))

        assert contact["vid"] == SAMPLE_VID

    @pytest.mark.asyncio
    async def test_get_missing_contact(self, make_client):
        path = f"/contacts/v1/contact/vid/{SAMPLE_VID}/profile"
        client = make_client({("GET", path): (404, MOCK_ERROR)})

        async with client:
            with pytest.raises(ApiError) as exc_info:
                await client.contacts.get(ContactId(SAMPLE_VID))

        assert exc_info.value.message == "contact does not exist"


class TestContactsWrite:
    @pytest.mark.asyncio
    async def test_create(self, make_client, recorded_requests):
        client = make_client({("POST", "/contacts/v1/contact"): (200, MOCK_CONTACT)})

        async with client:
            contact = await client.contacts.create([PropertyValue("email", "jo@example.com")])

        assert contact["vid"] == SAMPLE_VID
        assert json.loads(recorded_requests[0].content) == {
            "properties": [{"property": "email", "value": "jo@example.com"}]
        }

    @pytest.mark.asyncio
    async def test_update(self, make_client, recorded_requests):
        path = f"/contacts/v1/contact/vid/{SAMPLE_VID}/profile"
        client = make_client({("POST", path): (204, None)})

        async with client:
            result = await client.contacts.update(
                ContactId(SAMPLE_VID), [PropertyValue("firstname", "Jo")]
            )

        assert result is None
        request = recorded_requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"properties": [{"property": "firstname", "value": "Jo"}]}
