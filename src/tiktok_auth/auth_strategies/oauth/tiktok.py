# auth_strategies/oauth/tiktok.py

from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import Field

from tiktok_auth.auth_strategies.constants import (
    CLIENT_KEY_PARAM,
    TIKTOK,
    TIKTOK_AUTHORIZATION_URL,
    TIKTOK_DEFAULT_SCOPES,
    TIKTOK_SCOPE_SEPARATOR,
    TIKTOK_TOKEN_URL,
    TIKTOK_USERINFO_URL,
)
from tiktok_auth.auth_strategies.oauth.base_oauth import (
    BaseOAuthStrategy,
    OAuthStrategyConfig,
    VerifyFunction,
)
from tiktok_auth.auth_strategies.oauth.profile import TikTokProfileFetcher
from tiktok_auth.core.exceptions import ConfigurationError
from tiktok_auth.schemas.profile import TikTokBasicProfile, TikTokExtendedProfile


class TikTokStrategyConfig(OAuthStrategyConfig):
    client_key: str = Field(..., min_length=1)

    @property
    def profile_url(self) -> str:
        return self.userinfo_url


class TikTokOAuthStrategy(BaseOAuthStrategy):
    """
    OAuth 2.0 strategy for TikTok Login Kit.

    TikTok differs from a textbook OAuth 2.0 provider in three ways:
        - it wants its own `client_key` on both the authorization and the
          token request, next to the standard client_id/secret
        - scopes are comma-separated
        - /v2/user/info/ only answers with the fields named in `fields`, and
          rejects the access token as a query parameter

    Scopes:
        user.info.basic   — open_id, display_name, avatar_url (default)
        user.info.profile — adds username
    """

    AUTHORIZATION_URL = TIKTOK_AUTHORIZATION_URL
    TOKEN_URL = TIKTOK_TOKEN_URL
    USERINFO_URL = TIKTOK_USERINFO_URL
    DEFAULT_SCOPES = TIKTOK_DEFAULT_SCOPES
    SCOPE_SEPARATOR = TIKTOK_SCOPE_SEPARATOR
    GRANTED_SCOPE_SEPARATOR = TIKTOK_SCOPE_SEPARATOR
    TOKEN_ENDPOINT_AUTH_METHOD = "client_secret_post"
    CONFIG_CLASS = TikTokStrategyConfig

    config: TikTokStrategyConfig

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        client_key: str | None,
        redirect_uri: str | None = None,
        authorization_url: str | None = None,
        token_url: str | None = None,
        profile_url: str | None = None,
        scope: str | Sequence[str] | None = None,
        scope_separator: str | None = None,
        verify: VerifyFunction | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not client_key:
            raise ConfigurationError("TikTokOAuthStrategy requires a client_key")

        super().__init__(
            provider_name=TIKTOK,
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            authorization_url=authorization_url,
            token_url=token_url,
            userinfo_url=profile_url,
            scope=scope,
            scope_separator=scope_separator,
            verify=verify,
            http_transport=http_transport,
            client_key=client_key,
        )
        self.profile_fetcher = TikTokProfileFetcher(self.get_oauth_client)

    def authorization_params(self, options: dict[str, Any] | None = None) -> dict[str, Any]:
        return {CLIENT_KEY_PARAM: self.config.client_key}

    def token_params(self, options: dict[str, Any] | None = None) -> dict[str, Any]:
        return {CLIENT_KEY_PARAM: self.config.client_key}

    async def user_profile(
        self, access_token: str, granted_scopes: Sequence[str] | None = None
    ) -> TikTokBasicProfile | TikTokExtendedProfile:
        """
        Retrieve the user's TikTok profile.

        Without explicit granted scopes the configured scope is assumed.
        """
        if granted_scopes is None:
            granted_scopes = self.config.scope
        return await self.profile_fetcher.fetch_profile(
            access_token, self.config.profile_url, granted_scopes
        )
