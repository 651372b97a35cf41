from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", case_sensitive=True, extra="ignore"
    )

    # Application
    DEBUG: bool = False

    # TikTok application credentials
    TIKTOK_CLIENT_ID: str | None = None
    TIKTOK_CLIENT_SECRET: str | None = None
    TIKTOK_CLIENT_KEY: str | None = None
    TIKTOK_REDIRECT_URI: str | None = None

    # Requested scopes; falls back to the strategy default when empty
    TIKTOK_SCOPES: str | list[str] = []

    # Endpoint overrides
    TIKTOK_AUTHORIZATION_URL: str | None = None
    TIKTOK_TOKEN_URL: str | None = None
    TIKTOK_PROFILE_URL: str | None = None

    @field_validator("TIKTOK_SCOPES", mode="before")
    @classmethod
    def parse_scopes(cls, v: Any) -> Any:
        if isinstance(v, str):
            if v.startswith("[") and v.endswith("]"):
                import json

                return json.loads(v)
            return [scope.strip() for scope in v.split(",") if scope.strip()]
        return v


# Global settings instance
settings = Settings()
