"""Properties API - contact property and property group definitions."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .._json import expect_list
from ..models import Group, Property

if TYPE_CHECKING:
    from .client import HubSpotClient

PROPERTIES_PATH = ["properties", "v1", "contacts", "properties"]
GROUPS_PATH = ["properties", "v1", "contacts", "groups"]


class PropertiesAPI:
    """Contact properties and property groups.

    Usage:
        async with HubSpotClient(auth) as hs:
            props = await hs.properties.list()
            groups = await hs.properties.groups()
    """

    def __init__(self, client: "HubSpotClient"):
        self._client = client

    async def list(self) -> list[Property]:
        """Get all contact properties of the portal."""
        data = await self._client._get(*PROPERTIES_PATH)
        return [Property.from_json(p) for p in expect_list(data, "PropertyList")]

    async def create(self, prop: Property) -> Property:
        """Create a contact property.

        https://developers.hubspot.com/docs/methods/contacts/create_property
        """
        data = await self._client._post(PROPERTIES_PATH, json=prop.to_json())
        return Property.from_json(data)

    async def groups(self, include_properties: bool = True) -> list[Group]:
        """Get all contact property groups.

        Groups come back without a ``properties`` field unless
        ``include_properties`` is set; those decode with no properties.
        """
        params: dict[str, Any] = {}
        if include_properties:
            params["includeProperties"] = "true"
        data = await self._client._get(*GROUPS_PATH, **params)
        return [Group.from_json(g) for g in expect_list(data, "GroupList")]

    async def create_group(self, group: Group) -> Group:
        """Create a property group.

        https://developers.hubspot.com/docs/methods/contacts/create_group
        """
        data = await self._client._post(GROUPS_PATH, json=group.to_json())
        return Group.from_json(data)
