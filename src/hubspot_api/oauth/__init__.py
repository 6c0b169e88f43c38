"""OAuth module for HubSpot apps.

Usage:
    from hubspot_api.oauth import OAuthClient, run_oauth_flow
    from hubspot_api.types import PortalId

    client = OAuthClient.from_settings()

    # Browser flow; the redirect carries the tokens
    auth = await run_oauth_flow(client, PortalId(62515))

    # Refresh when expired (requires the "offline" scope)
    if auth.is_expired():
        auth, portal_id = await client.refresh(auth)
"""

from .client import OAuthClient
from .server import CallbackResult, OAuthCallbackServer, run_oauth_flow
from ..errors import OAuthError

__all__ = [
    "OAuthClient",
    "OAuthError",
    "CallbackResult",
    "OAuthCallbackServer",
    "run_oauth_flow",
]
