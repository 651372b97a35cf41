# auth_strategies/oauth/base_oauth.py

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, ClassVar

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from pydantic import BaseModel, ConfigDict, ValidationError

from tiktok_auth.auth_strategies.base import TokenBasedStrategy
from tiktok_auth.core.exceptions import AuthenticationError, ConfigurationError
from tiktok_auth.schemas.profile import OAuthLoginResult, ProviderTokens

logger = logging.getLogger(__name__)

# verify(access_token, refresh_token, profile) -> user; may be sync or async
VerifyFunction = Callable[[str, str | None, Any], Any | Awaitable[Any]]


class OAuthStrategyConfig(BaseModel):
    """Immutable, fully-defaulted configuration of an OAuth strategy."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    redirect_uri: str | None = None
    authorization_url: str
    token_url: str
    userinfo_url: str
    scope: tuple[str, ...]
    scope_separator: str


def normalize_scope(scope: str | Sequence[str] | None, separator: str) -> tuple[str, ...]:
    """Split a scope string on the separator and drop blanks and duplicates, keeping order."""
    if not scope:
        return ()
    items = scope.split(separator) if isinstance(scope, str) else scope
    seen: dict[str, None] = {}
    for item in items:
        item = item.strip()
        if item:
            seen.setdefault(item, None)
    return tuple(seen)


class BaseOAuthStrategy(TokenBasedStrategy):
    """
    Base class for OAuth 2.0 social login strategies.

    The OAuth 2.0 handshake itself is delegated to authlib's AsyncOAuth2Client;
    subclasses define their endpoints, the extra request parameters their
    provider needs, and how to turn the provider's profile response into a
    normalized profile.

    Flow:
        1. get_authorization_url()  — redirect user to provider
        2. authenticate()           — exchange code for tokens, fetch profile,
                                      hand the profile to the verify callback
    """

    # Subclasses must define these
    AUTHORIZATION_URL: ClassVar[str] = ""
    TOKEN_URL: ClassVar[str] = ""
    USERINFO_URL: ClassVar[str] = ""
    DEFAULT_SCOPES: ClassVar[list[str]] = []
    SCOPE_SEPARATOR: ClassVar[str] = " "
    GRANTED_SCOPE_SEPARATOR: ClassVar[str] = " "
    TOKEN_ENDPOINT_AUTH_METHOD: ClassVar[str] = "client_secret_basic"
    CONFIG_CLASS: ClassVar[type[OAuthStrategyConfig]] = OAuthStrategyConfig

    def __init__(
        self,
        provider_name: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str | None,
        authorization_url: str | None = None,
        token_url: str | None = None,
        userinfo_url: str | None = None,
        scope: str | Sequence[str] | None = None,
        scope_separator: str | None = None,
        verify: VerifyFunction | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        **extra_config: Any,
    ):
        super().__init__(provider_name)
        self.provider_name = provider_name

        separator = scope_separator or self.SCOPE_SEPARATOR
        try:
            self.config = self.CONFIG_CLASS(
                client_id=client_id,
                client_secret=client_secret,
                redirect_uri=redirect_uri,
                authorization_url=authorization_url or self.AUTHORIZATION_URL,
                token_url=token_url or self.TOKEN_URL,
                userinfo_url=userinfo_url or self.USERINFO_URL,
                scope=normalize_scope(scope, separator) or tuple(self.DEFAULT_SCOPES),
                scope_separator=separator,
                **extra_config,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {provider_name} OAuth configuration: {e}") from e

        self.verify = verify
        self.http_transport = http_transport

    @property
    def scope_string(self) -> str:
        return self.config.scope_separator.join(self.config.scope)

    def get_oauth_client(self, token: dict[str, Any] | None = None) -> AsyncOAuth2Client:
        """
        Create a fresh async OAuth2 client for this provider.

        The access token always travels in the Authorization header.
        """
        return AsyncOAuth2Client(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            redirect_uri=self.config.redirect_uri,
            scope=self.scope_string,
            token=token,
            token_placement="header",
            token_endpoint_auth_method=self.TOKEN_ENDPOINT_AUTH_METHOD,
            transport=self.http_transport,
        )

    def authorization_params(self, options: dict[str, Any] | None = None) -> dict[str, Any]:
        """Extra query parameters merged into the authorization request."""
        return {}

    def token_params(self, options: dict[str, Any] | None = None) -> dict[str, Any]:
        """Extra body parameters merged into the token request."""
        return {}

    async def get_authorization_url(self, state: str) -> str:
        """
        Step 1: Generate the URL to redirect the user to the provider's login page.

        Args:
            state: CSRF protection token (store it before redirecting)

        Returns:
            Full authorization URL string
        """
        if not state:
            raise AuthenticationError("OAuth state is required")

        async with self.get_oauth_client() as client:
            uri, _ = client.create_authorization_url(
                self.config.authorization_url,
                state=state,
                scope=self.scope_string,
                **self.authorization_params(),
            )
            return uri

    async def exchange_code_for_tokens(self, code: str) -> dict[str, Any]:
        """
        Step 2a: Exchange the authorization code for provider tokens.

        Args:
            code: The authorization code received in the callback

        Returns:
            Token response dict from the provider
        """
        async with self.get_oauth_client() as client:
            try:
                token = await client.fetch_token(
                    self.config.token_url,
                    code=code,
                    grant_type="authorization_code",
                    **self.token_params(),
                )
                return dict(token)
            except (httpx.HTTPError, AuthlibBaseError, ValueError) as e:
                logger.error(f"[{self.provider_name}] Token exchange failed: {e}")
                raise AuthenticationError(
                    f"Failed to exchange authorization code with {self.provider_name}"
                ) from e

    def granted_scopes(self, provider_tokens: dict[str, Any]) -> tuple[str, ...]:
        """
        Scopes the user actually granted, as reported by the token response.

        Falls back to the configured scope when the provider does not echo it.
        """
        granted = provider_tokens.get("scope")
        if isinstance(granted, str | list | tuple):
            return normalize_scope(granted, self.GRANTED_SCOPE_SEPARATOR) or self.config.scope
        return self.config.scope

    async def user_profile(
        self, access_token: str, granted_scopes: Sequence[str] | None = None
    ) -> Any:
        """
        Step 2b: Fetch and normalize the user's profile.

        Subclasses MUST override this.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement user_profile()")

    async def authenticate(self, credentials: dict[str, Any]) -> Any:
        """
        Full OAuth authentication flow.

        Expected credentials keys:
            code : str  — authorization code from provider callback

        Returns:
            Whatever the verify callback returns, or an OAuthLoginResult
            when the strategy was built without one.
        """
        code = credentials.get("code")
        if not code:
            raise AuthenticationError("Authorization code is required")

        # Exchange code → provider tokens
        provider_tokens = await self.exchange_code_for_tokens(code)

        access_token = provider_tokens.get("access_token")
        if not access_token:
            raise AuthenticationError(f"No access token received from {self.provider_name}")

        scopes = self.granted_scopes(provider_tokens)
        profile = await self.user_profile(access_token, scopes)
        refresh_token = provider_tokens.get("refresh_token")

        if self.verify is not None:
            user = self.verify(access_token, refresh_token, profile)
            if inspect.isawaitable(user):
                user = await user
            return user

        return OAuthLoginResult(
            provider=self.provider_name,
            profile=profile,
            provider_tokens=ProviderTokens(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_at=provider_tokens.get("expires_at"),
                scope=list(scopes),
            ),
        )

    def get_strategy_metadata(self) -> dict[str, Any]:
        metadata = super().get_strategy_metadata()
        metadata["provider"] = self.provider_name
        metadata["scopes"] = list(self.config.scope)
        return metadata
