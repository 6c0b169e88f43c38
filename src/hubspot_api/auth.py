"""OAuth credential value and request authentication.

An :class:`Auth` is valid until ``expires_at``; nothing tracks expiry for you,
so check :meth:`Auth.is_expired` before use and refresh when needed.

Two JSON forms exist and are deliberately different:

* token responses from HubSpot carry a *relative* TTL (``expires_in`` seconds)
  and are parsed with :func:`auth_from_token_response`;
* :meth:`Auth.to_json` / :meth:`Auth.from_json` store the *absolute* expiry
  under the same ``expires_in`` key, as an ISO-8601 timestamp.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from ._json import expect_int, expect_object, field, int_field, str_field
from .errors import DecodeError, UrlError
from .types import PortalId

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix."""
    return _aware(moment).astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return _aware(datetime.fromisoformat(text))


def _aware(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def _as_bytes(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


@dataclass(frozen=True)
class Auth:
    """Authentication information for API calls.

    ``refresh_token`` is only present when the app was granted the
    ``offline`` scope.
    """

    access_token: bytes
    refresh_token: bytes | None
    expires_at: datetime

    def __post_init__(self):
        object.__setattr__(self, "access_token", _as_bytes(self.access_token))
        if self.refresh_token is not None:
            object.__setattr__(self, "refresh_token", _as_bytes(self.refresh_token))
        object.__setattr__(self, "expires_at", _aware(self.expires_at))

    def __repr__(self) -> str:
        # Tokens stay out of logs and tracebacks.
        return (
            f"Auth(access_token=<{len(self.access_token)} bytes>, "
            f"refresh_token={'<set>' if self.refresh_token else None}, "
            f"expires_at={self.expires_at.isoformat()})"
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return _aware(now or utcnow()) >= self.expires_at

    def expires_in_seconds(self, now: datetime | None = None) -> int:
        """Seconds until the access token expires (0 once expired)."""
        remaining = (self.expires_at - _aware(now or utcnow())).total_seconds()
        return max(0, int(remaining))

    def to_json(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token.decode("utf-8"),
            "refresh_token": (
                self.refresh_token.decode("utf-8") if self.refresh_token is not None else None
            ),
            "expires_in": format_timestamp(self.expires_at),
        }

    @classmethod
    def from_json(cls, data: Any) -> "Auth":
        obj = expect_object(data, "Auth")
        access_token = str_field(obj, "access_token", "Auth")
        refresh_token = field(obj, "refresh_token", "Auth")
        if refresh_token is not None and not isinstance(refresh_token, str):
            raise DecodeError("Auth", "field 'refresh_token': expected string or null")
        expires = str_field(obj, "expires_in", "Auth")
        try:
            expires_at = parse_timestamp(expires)
        except ValueError as e:
            raise DecodeError("Auth", f"field 'expires_in': invalid timestamp {expires!r}") from e
        return cls(
            access_token=access_token.encode("utf-8"),
            refresh_token=refresh_token.encode("utf-8") if refresh_token is not None else None,
            expires_at=expires_at,
        )


def expire_time(issued_at: datetime, expires_in: int) -> datetime:
    return issued_at + timedelta(seconds=expires_in)


def mk_auth(
    access_token: bytes | str,
    refresh_token: bytes | str | None,
    expires_in: int,
    clock: Clock = utcnow,
) -> Auth:
    """Build an :class:`Auth` from a freshly issued token and its TTL.

    The current time is read here, so call this as soon as the token arrives.
    """
    if expires_in < 0:
        raise ValueError(f"expires_in must not be negative, got {expires_in}")
    return Auth(
        access_token=_as_bytes(access_token),
        refresh_token=_as_bytes(refresh_token) if refresh_token is not None else None,
        expires_at=expire_time(clock(), expires_in),
    )


def auth_from_token_response(
    data: Any,
    refresh_token: bytes | str | None = None,
    clock: Clock = utcnow,
) -> tuple[Auth, PortalId]:
    """Parse a token refresh response into ``(Auth, PortalId)``.

    HubSpot does not always echo the refresh token back. When the payload
    lacks one, ``refresh_token`` (the token that was just used) is kept, so
    the result always carries a refresh token.

    Raises:
        DecodeError: If a required field is missing or has the wrong type
    """
    issued_at = clock()
    obj = expect_object(data, "Auth")
    access_token = str_field(obj, "access_token", "Auth")
    expires_in = int_field(obj, "expires_in", "Auth")
    if expires_in < 0:
        raise DecodeError("Auth", f"field 'expires_in': negative TTL {expires_in}")

    returned = obj.get("refresh_token")
    if returned is not None and not isinstance(returned, str):
        raise DecodeError("Auth", "field 'refresh_token': expected string")
    if returned is None:
        if refresh_token is None:
            raise DecodeError("Auth", "missing required field 'refresh_token'")
        log.debug("Token response omitted refresh_token; keeping the previous one")
        kept = _as_bytes(refresh_token)
    else:
        kept = returned.encode("utf-8")

    portal_id = PortalId(expect_int(field(obj, "portal_id", "PortalId"), "PortalId", "portal_id"))

    auth = Auth(
        access_token=access_token.encode("utf-8"),
        refresh_token=kept,
        expires_at=expire_time(issued_at, expires_in),
    )
    return auth, portal_id


@dataclass(frozen=True)
class AuthenticatedRequest:
    """A URL carrying the access token, ready to be sent with any method."""

    url: httpx.URL

    def build(
        self,
        method: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        # Request(params=...) replaces the query; merge so access_token stays
        url = self.url.copy_merge_params(params) if params else self.url
        return httpx.Request(
            method.upper(),
            url,
            json=json,
            data=data,
            headers=headers,
        )


def build_url(pieces: Iterable[str]) -> httpx.URL:
    """Join path pieces with ``/`` into an absolute http(s) URL.

    Raises:
        UrlError: If the result is not a valid absolute URL
    """
    joined = "/".join(pieces)
    try:
        url = httpx.URL(joined)
    except httpx.InvalidURL as e:
        raise UrlError(joined, str(e)) from e
    if url.scheme not in ("http", "https"):
        raise UrlError(joined, "URL scheme must be http or https")
    if not url.host:
        raise UrlError(joined, "URL has no host")
    return url


def new_auth_request(auth: Auth, pieces: Iterable[str]) -> AuthenticatedRequest:
    """Build the URL for ``pieces`` with ``access_token`` as its query.

    Any query already present in the joined pieces is replaced.
    """
    url = build_url(pieces)
    return AuthenticatedRequest(
        url=url.copy_with(params={"access_token": auth.access_token.decode("utf-8")})
    )
