"""Contacts API - read and write HubSpot contacts."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from typing import Any, TYPE_CHECKING

from ..models import Contact, ContactsPage, PropertyValue, decode_contact, property_values_body
from ..types import ContactId, UserToken

if TYPE_CHECKING:
    from .client import HubSpotClient

MAX_PAGE_SIZE = 100


class ContactsAPI:
    """Contacts API for HubSpot.

    Usage:
        async with HubSpotClient(auth) as hs:
            # One page of contacts
            page = await hs.contacts.list(count=50, properties=["email"])

            # Every contact, page by page
            async for contact in hs.contacts.iter_all():
                ...

            # Single contact by vid or by hubspotutk cookie
            contact = await hs.contacts.get(ContactId(12345))
            contact = await hs.contacts.get_by_token(UserToken("f3c1..."))

            # Create / update
            await hs.contacts.create([PropertyValue("email", "j@example.com")])
            await hs.contacts.update(ContactId(12345), [PropertyValue("firstname", "Jo")])
    """

    def __init__(self, client: "HubSpotClient"):
        self._client = client

    async def list(
        self,
        count: int = 20,
        vid_offset: int | None = None,
        properties: Iterable[str] | None = None,
    ) -> ContactsPage:
        """Get one page of all contacts.

        Args:
            count: Contacts per page (max 100)
            vid_offset: ``vid_offset`` from the previous page
            properties: Property names to include in each contact
        """
        params: dict[str, Any] = {"count": min(count, MAX_PAGE_SIZE)}
        if vid_offset is not None:
            params["vidOffset"] = vid_offset
        if properties:
            params["property"] = list(properties)
        data = await self._client._get("contacts", "v1", "lists", "all", "contacts", "all", **params)
        return ContactsPage.from_json(data)

    async def iter_all(
        self,
        count: int = MAX_PAGE_SIZE,
        properties: Iterable[str] | None = None,
    ) -> AsyncIterator[Contact]:
        """Yield every contact, following ``vid-offset`` across pages."""
        wanted = list(properties) if properties else None
        offset: int | None = None
        while True:
            page = await self.list(count=count, vid_offset=offset, properties=wanted)
            for contact in page.contacts:
                yield contact
            if not page.has_more or not page.contacts:
                break
            offset = page.vid_offset

    async def get(self, contact_id: ContactId) -> Contact:
        """Get a contact profile by its vid."""
        data = await self._client._get("contacts", "v1", "contact", "vid", str(contact_id), "profile")
        return decode_contact(data)

    async def get_by_token(self, user_token: UserToken) -> Contact:
        """Get a contact profile by its ``hubspotutk`` user token."""
        data = await self._client._get("contacts", "v1", "contact", "utk", str(user_token), "profile")
        return decode_contact(data)

    async def create(self, values: Iterable[PropertyValue]) -> Contact:
        """Create a contact with the given property values."""
        data = await self._client._post(
            ["contacts", "v1", "contact"],
            json=property_values_body(values),
        )
        return decode_contact(data)

    async def update(self, contact_id: ContactId, values: Iterable[PropertyValue]) -> None:
        """Set property values on an existing contact."""
        await self._client._post(
            ["contacts", "v1", "contact", "vid", str(contact_id), "profile"],
            json=property_values_body(values),
        )
