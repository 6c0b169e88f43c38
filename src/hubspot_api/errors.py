"""Exception types raised by the HubSpot client."""

from __future__ import annotations


class HubSpotError(Exception):
    """Base exception for HubSpot client errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class DecodeError(HubSpotError):
    """A JSON value did not have the shape an entity requires."""

    def __init__(self, type_name: str, reason: str):
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"{type_name}: {reason}")


class UrlError(HubSpotError):
    """Joining path segments did not produce a usable URL."""

    def __init__(self, url: str, reason: str = "invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url!r}")


class ApiError(HubSpotError):
    """HubSpot answered with an error response."""

    def __init__(
        self,
        message: str,
        request_id: str | None = None,
        status_code: int | None = None,
    ):
        self.request_id = request_id
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.request_id:
            parts.append(f"requestId={self.request_id}")
        return " ".join(parts)


class OAuthError(HubSpotError):
    """OAuth-related error."""

    def __init__(self, message: str, error_code: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}
