"""Forms API - submit lead-capture forms."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..types import PortalId, UserToken

if TYPE_CHECKING:
    from .client import HubSpotClient


class FormsAPI:
    """Form submissions.

    Submissions go to the forms host and are not authenticated with the
    access token; the portal ID and form GUID identify the form.

    Usage:
        await hs.forms.submit(
            PortalId(62515),
            "e1c6...",
            {"email": "j@example.com", "firstname": "Jo"},
            user_token=UserToken(cookie_value),
        )
    """

    def __init__(self, client: "HubSpotClient"):
        self._client = client

    def submit_url(self, portal_id: PortalId, form_guid: str) -> str:
        base = self._client.settings.forms_base.rstrip("/")
        return f"{base}/uploads/form/v2/{portal_id.query_value}/{form_guid}"

    async def submit(
        self,
        portal_id: PortalId,
        form_guid: str,
        fields: Mapping[str, str],
        user_token: UserToken | None = None,
        page_url: str | None = None,
        page_name: str | None = None,
        ip_address: str | None = None,
    ) -> None:
        """Submit form field values.

        Passing the visitor's ``user_token`` links the submission to the
        visitor's existing contact record.

        Raises:
            ApiError: If HubSpot rejects the submission
        """
        context: dict[str, str] = {}
        if user_token is not None:
            context["hutk"] = str(user_token)
        if ip_address:
            context["ipAddress"] = ip_address
        if page_url:
            context["pageUrl"] = page_url
        if page_name:
            context["pageName"] = page_name

        data = dict(fields)
        if context:
            data["hs_context"] = json.dumps(context)

        await self._client._post_form(self.submit_url(portal_id, form_guid), data)
