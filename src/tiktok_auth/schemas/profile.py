from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TikTokProvider = Literal["tiktok"]


class _TikTokProfileFields(BaseModel):
    """Fields shared by every normalized TikTok profile."""

    model_config = ConfigDict(frozen=True)

    provider: TikTokProvider = "tiktok"
    open_id: str  # stable per-app user identifier, copied verbatim
    display_name: str | None = None
    avatar_url: str | None = None
    raw: str  # response body as received
    raw_json: dict[str, Any]


class TikTokBasicProfile(_TikTokProfileFields):
    """Profile available with `user.info.basic` only (Login Kit)."""

    kind: Literal["basic"] = "basic"


class TikTokExtendedProfile(_TikTokProfileFields):
    """Profile returned when `user.info.profile` was granted and TikTok sent a username."""

    kind: Literal["extended"] = "extended"
    username: str = Field(..., min_length=1)


TikTokProfile = Annotated[
    TikTokBasicProfile | TikTokExtendedProfile,
    Field(discriminator="kind"),
]


class ProviderTokens(BaseModel):
    """Provider tokens returned from the code exchange."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    scope: list[str] = []


class OAuthLoginResult(BaseModel):
    """Returned by authenticate() when no verify callback is configured."""

    model_config = ConfigDict(frozen=True)

    provider: str = "tiktok"
    profile: TikTokProfile
    provider_tokens: ProviderTokens
