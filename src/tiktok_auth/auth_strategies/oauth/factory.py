"""
OAuthProviderFactory — builds the correct strategy instance based on provider name.

Reads credentials from settings so callers don't need to know about config.
"""

from tiktok_auth.auth_strategies.constants import TIKTOK
from tiktok_auth.auth_strategies.oauth import BaseOAuthStrategy, TikTokOAuthStrategy
from tiktok_auth.auth_strategies.oauth.base_oauth import VerifyFunction
from tiktok_auth.core.config import Settings, settings
from tiktok_auth.core.exceptions import ConfigurationError


def get_oauth_strategy(
    provider: str,
    config: Settings | None = None,
    verify: VerifyFunction | None = None,
) -> BaseOAuthStrategy:
    """
    Return a configured OAuth strategy for the given provider name.

    Args:
        provider: Currently only "tiktok"
        config:   Settings to read credentials from (defaults to the global settings)
        verify:   Optional verify callback handed to the strategy

    Returns:
        Configured strategy instance

    Raises:
        ConfigurationError: If provider is unknown or not configured
    """
    config = config or settings
    provider = provider.lower()

    if provider == TIKTOK:
        if not config.TIKTOK_CLIENT_ID or not config.TIKTOK_CLIENT_SECRET:
            raise ConfigurationError("TikTok OAuth is not configured.")
        return TikTokOAuthStrategy(
            client_id=config.TIKTOK_CLIENT_ID,
            client_secret=config.TIKTOK_CLIENT_SECRET,
            client_key=config.TIKTOK_CLIENT_KEY,
            redirect_uri=config.TIKTOK_REDIRECT_URI,
            authorization_url=config.TIKTOK_AUTHORIZATION_URL,
            token_url=config.TIKTOK_TOKEN_URL,
            profile_url=config.TIKTOK_PROFILE_URL,
            scope=config.TIKTOK_SCOPES or None,
            verify=verify,
        )

    raise ConfigurationError(
        f"Unknown OAuth provider: '{provider}'. Supported providers: {TIKTOK}"
    )
