from tiktok_auth.auth_strategies.oauth.factory import get_oauth_strategy
from tiktok_auth.auth_strategies.oauth.profile import TikTokProfileFetcher
from tiktok_auth.auth_strategies.oauth.tiktok import TikTokOAuthStrategy, TikTokStrategyConfig
from tiktok_auth.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidProfileError,
    MalformedResponseError,
    TikTokAuthException,
    TransportError,
)
from tiktok_auth.schemas.profile import (
    OAuthLoginResult,
    TikTokBasicProfile,
    TikTokExtendedProfile,
    TikTokProfile,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "InvalidProfileError",
    "MalformedResponseError",
    "OAuthLoginResult",
    "TikTokAuthException",
    "TikTokBasicProfile",
    "TikTokExtendedProfile",
    "TikTokOAuthStrategy",
    "TikTokProfile",
    "TikTokProfileFetcher",
    "TikTokStrategyConfig",
    "TransportError",
    "get_oauth_strategy",
]
