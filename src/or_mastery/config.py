"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_anon_key: str
    surgeon_photos_bucket: str = "surgeon-photos"
    procedure_photos_bucket: str = "procedure-photos"
    site_url: str | None = None
    access_token_cookie: str = "sb-access-token"
    supabase_timeout_seconds: int = 20
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def magic_link_redirect(self) -> str | None:
        """Where magic-link emails send the user back to."""
        if not self.site_url:
            return None
        return f"{self.site_url.rstrip('/')}/login"
