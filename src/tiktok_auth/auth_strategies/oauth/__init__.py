from tiktok_auth.auth_strategies.oauth.base_oauth import BaseOAuthStrategy
from tiktok_auth.auth_strategies.oauth.profile import TikTokProfileFetcher
from tiktok_auth.auth_strategies.oauth.tiktok import TikTokOAuthStrategy

__all__ = [
    "BaseOAuthStrategy",
    "TikTokOAuthStrategy",
    "TikTokProfileFetcher",
]
