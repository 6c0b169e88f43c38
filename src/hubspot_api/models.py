"""Typed HubSpot resources and their JSON encodings.

Decoders are strict about the fields they require and raise
:class:`~hubspot_api.errors.DecodeError` naming the entity. Two deliberate
exceptions keep the client working against a changing API:

* property ``type`` / ``fieldType`` values that are not in the known
  enumeration are kept as the raw string instead of failing;
* a group without a ``properties`` field decodes with no properties.

Contacts are schemaless (every portal can define its own properties), so a
:data:`Contact` is just a ``dict`` of JSON values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from ._json import (
    bool_field,
    expect_list,
    expect_object,
    expect_str,
    field,
    int_field,
    list_field,
    str_field,
)
from .types import PortalId

E = TypeVar("E", bound=Enum)


# =============================================================================
# Error envelope
# =============================================================================


@dataclass(frozen=True)
class ErrorMessage:
    """Error body returned by HubSpot with a non-success status."""

    message: str
    request_id: str

    def to_json(self) -> dict[str, Any]:
        return {
            "status": "error",
            "message": self.message,
            "requestId": self.request_id,
        }

    @classmethod
    def from_json(cls, data: Any) -> "ErrorMessage":
        obj = expect_object(data, "ErrorMessage")
        return cls(
            message=str_field(obj, "message", "ErrorMessage"),
            request_id=str_field(obj, "requestId", "ErrorMessage"),
        )


# =============================================================================
# Contacts
# =============================================================================

Contact = dict[str, Any]


def decode_contact(data: Any) -> Contact:
    """Accept any JSON object as a contact, keeping every field as-is."""
    return dict(expect_object(data, "Contact"))


@dataclass(frozen=True)
class ContactsPage:
    """One page of the all-contacts listing."""

    contacts: tuple[Contact, ...]
    has_more: bool
    vid_offset: int

    @classmethod
    def from_json(cls, data: Any) -> "ContactsPage":
        obj = expect_object(data, "ContactsPage")
        return cls(
            contacts=tuple(decode_contact(c) for c in list_field(obj, "contacts", "ContactsPage")),
            has_more=bool_field(obj, "has-more", "ContactsPage"),
            vid_offset=int_field(obj, "vid-offset", "ContactsPage"),
        )


# =============================================================================
# Properties
# =============================================================================


class PropertyType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    DATETIME = "datetime"
    ENUMERATION = "enumeration"


class PropertyFieldType(Enum):
    TEXTAREA = "textarea"
    SELECT = "select"
    TEXT = "text"
    DATE = "date"
    FILE = "file"
    NUMBER = "number"
    RADIO = "radio"
    CHECKBOX = "checkbox"


def decode_open_enum(enum_cls: type[E], data: Any, type_name: str) -> E | str:
    """Decode a known enum member, or keep an unrecognized string verbatim."""
    raw = expect_str(data, type_name)
    try:
        return enum_cls(raw)
    except ValueError:
        return raw


def encode_open_enum(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class PropertyOption:
    """One selectable value of an enumeration property."""

    label: str
    value: str
    display_order: int

    def to_json(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "value": self.value,
            "displayOrder": self.display_order,
        }

    @classmethod
    def from_json(cls, data: Any) -> "PropertyOption":
        obj = expect_object(data, "PropertyOption")
        return cls(
            label=str_field(obj, "label", "PropertyOption"),
            value=str_field(obj, "value", "PropertyOption"),
            display_order=int_field(obj, "displayOrder", "PropertyOption"),
        )


@dataclass(frozen=True)
class Property:
    """A contact property (field) definition.

    ``type`` and ``field_type`` hold an enum member when HubSpot sends a
    known value and the raw string otherwise.

    https://developers.hubspot.com/docs/methods/contacts/create_property
    """

    name: str
    label: str
    description: str
    group_name: str
    type: PropertyType | str
    field_type: PropertyFieldType | str
    form_field: bool
    display_order: int
    options: tuple[PropertyOption, ...] = ()

    @property
    def is_known_type(self) -> bool:
        return isinstance(self.type, PropertyType)

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "groupName": self.group_name,
            "type": encode_open_enum(self.type),
            "fieldType": encode_open_enum(self.field_type),
            "formField": self.form_field,
            "displayOrder": self.display_order,
            "options": [option.to_json() for option in self.options],
        }

    @classmethod
    def from_json(cls, data: Any) -> "Property":
        obj = expect_object(data, "Property")
        return cls(
            name=str_field(obj, "name", "Property"),
            label=str_field(obj, "label", "Property"),
            description=str_field(obj, "description", "Property"),
            group_name=str_field(obj, "groupName", "Property"),
            type=decode_open_enum(PropertyType, field(obj, "type", "Property"), "PropertyType"),
            field_type=decode_open_enum(
                PropertyFieldType, field(obj, "fieldType", "Property"), "PropertyFieldType"
            ),
            form_field=bool_field(obj, "formField", "Property"),
            display_order=int_field(obj, "displayOrder", "Property"),
            options=tuple(
                PropertyOption.from_json(o) for o in list_field(obj, "options", "Property")
            ),
        )


@dataclass(frozen=True)
class PropertyValue:
    """Sets one property on a contact."""

    name: str
    value: str

    def to_json(self) -> dict[str, Any]:
        return {"property": self.name, "value": self.value}

    @classmethod
    def from_json(cls, data: Any) -> "PropertyValue":
        obj = expect_object(data, "PropertyValue")
        return cls(
            name=str_field(obj, "property", "PropertyValue"),
            value=str_field(obj, "value", "PropertyValue"),
        )


def property_values_body(values: Iterable[PropertyValue]) -> dict[str, Any]:
    """Request body for creating or updating a contact."""
    return {"properties": [v.to_json() for v in values]}


# =============================================================================
# Groups
# =============================================================================


@dataclass(frozen=True)
class Group:
    """A property group.

    Some group responses have no ``properties`` field at all. Those decode
    with an empty ``properties`` tuple, and an empty tuple is encoded by
    leaving the field out.

    https://developers.hubspot.com/docs/methods/contacts/create_group
    """

    name: str
    display_name: str
    display_order: int
    portal_id: PortalId
    properties: tuple[Property, ...] = ()

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "displayName": self.display_name,
            "displayOrder": self.display_order,
            "portalId": self.portal_id.to_json(),
        }
        if self.properties:
            data["properties"] = [p.to_json() for p in self.properties]
        return data

    @classmethod
    def from_json(cls, data: Any) -> "Group":
        obj = expect_object(data, "Group")
        raw_properties = obj.get("properties")
        properties: tuple[Property, ...] = ()
        if raw_properties is not None:
            properties = tuple(
                Property.from_json(p) for p in expect_list(raw_properties, "Group", "properties")
            )
        return cls(
            name=str_field(obj, "name", "Group"),
            display_name=str_field(obj, "displayName", "Group"),
            display_order=int_field(obj, "displayOrder", "Group"),
            portal_id=PortalId.from_json(field(obj, "portalId", "Group")),
            properties=properties,
        )
