"""Typed client for the HubSpot contacts, properties, forms and OAuth APIs."""

from .auth import Auth, AuthenticatedRequest, auth_from_token_response, mk_auth, new_auth_request
from .errors import ApiError, DecodeError, HubSpotError, OAuthError, UrlError
from .models import (
    Contact,
    ContactsPage,
    ErrorMessage,
    Group,
    Property,
    PropertyFieldType,
    PropertyOption,
    PropertyType,
    PropertyValue,
    decode_contact,
)
from .types import ClientId, ContactId, PortalId, UserToken

__version__ = "0.1.0"

__all__ = [
    "Auth",
    "AuthenticatedRequest",
    "auth_from_token_response",
    "mk_auth",
    "new_auth_request",
    "ApiError",
    "DecodeError",
    "HubSpotError",
    "OAuthError",
    "UrlError",
    "Contact",
    "ContactsPage",
    "ErrorMessage",
    "Group",
    "Property",
    "PropertyFieldType",
    "PropertyOption",
    "PropertyType",
    "PropertyValue",
    "decode_contact",
    "ClientId",
    "ContactId",
    "PortalId",
    "UserToken",
]
