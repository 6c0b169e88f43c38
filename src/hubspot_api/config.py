"""Client configuration via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class HubSpotSettings(BaseSettings):
    client_id: str = ""
    portal_id: int | None = None
    redirect_uri: str = "http://localhost:3000/callback"
    # Comma-separated OAuth scopes, e.g. "contacts-rw,offline"
    scopes: str = "contacts-rw,offline"

    api_base: str = "https://api.hubapi.com"
    auth_base: str = "https://app.hubspot.com"
    forms_base: str = "https://forms.hubspot.com"
    timeout: float = 30.0

    log_level: str = "WARNING"

    model_config = {"env_prefix": "HUBSPOT_", "env_file": ".env", "extra": "ignore"}

    @property
    def scope_list(self) -> list[str]:
        return [s.strip() for s in self.scopes.split(",") if s.strip()]

    @property
    def oauth_configured(self) -> bool:
        return bool(self.client_id)


settings = HubSpotSettings()
