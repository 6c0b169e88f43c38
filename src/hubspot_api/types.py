"""Identifier value types.

Each identifier wraps a single primitive so that, for example, a
:class:`PortalId` can never be passed where a :class:`ContactId` is expected.
Byte-string identifiers accept ``str`` on construction and store UTF-8 bytes.

Usage:
    from hubspot_api.types import ClientId, ContactId, PortalId

    client_id = ClientId("5f1e...")
    portal = PortalId.parse("62515")
    contact = ContactId.from_json(12345)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from ._json import expect_int, expect_str
from .errors import DecodeError

_B = TypeVar("_B", bound="_BytesId")
_I = TypeVar("_I", bound="_IntId")


@dataclass(frozen=True)
class _BytesId:
    value: bytes

    def __post_init__(self):
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.encode("utf-8"))
        elif not isinstance(self.value, bytes):
            raise TypeError(f"{type(self).__name__} wraps bytes or str, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return self.value.decode("utf-8")

    def to_json(self) -> str:
        return self.value.decode("utf-8")

    @classmethod
    def from_json(cls: type[_B], data: Any) -> _B:
        return cls(expect_str(data, cls.__name__).encode("utf-8"))


@dataclass(frozen=True)
class _IntId:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{type(self).__name__} wraps int, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def to_json(self) -> int:
        return self.value

    @classmethod
    def from_json(cls: type[_I], data: Any) -> _I:
        return cls(expect_int(data, cls.__name__))

    @classmethod
    def parse(cls: type[_I], text: str) -> _I:
        """Parse the decimal text form (inverse of ``str()``)."""
        return cls(int(text.strip()))


@dataclass(frozen=True)
class ClientId(_BytesId):
    """OAuth client ID of a HubSpot app."""

    def __post_init__(self):
        super().__post_init__()
        if not self.value:
            raise ValueError("ClientId must not be empty")

    @classmethod
    def from_json(cls, data: Any) -> "ClientId":
        text = expect_str(data, cls.__name__)
        if not text:
            raise DecodeError(cls.__name__, "must not be empty")
        return cls(text.encode("utf-8"))


@dataclass(frozen=True)
class UserToken(_BytesId):
    """Visitor tracking token, the ``hubspotutk`` browser cookie."""


@dataclass(frozen=True)
class PortalId(_IntId):
    """Portal ID (also called Hub ID or account number)."""

    @property
    def query_value(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContactId(_IntId):
    """Contact ID (also called visitor ID or ``vid``)."""
