"""HubSpot API client module.

Usage:
    from hubspot_api.api import HubSpotClient

    async with HubSpotClient(auth) as hs:
        # Contacts
        page = await hs.contacts.list()
        contact = await hs.contacts.get(ContactId(12345))

        # Properties and groups
        props = await hs.properties.list()
        groups = await hs.properties.groups()

        # Forms
        await hs.forms.submit(PortalId(62515), form_guid, {"email": "j@example.com"})
"""

from .client import HubSpotClient
from .contacts import ContactsAPI
from .forms import FormsAPI
from .properties import PropertiesAPI

__all__ = [
    "HubSpotClient",
    "ContactsAPI",
    "FormsAPI",
    "PropertiesAPI",
]
