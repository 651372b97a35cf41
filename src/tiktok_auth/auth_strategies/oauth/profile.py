# auth_strategies/oauth/profile.py
"""
TikTok profile fetching
=======================
One authenticated GET against /v2/user/info/ per call:

  1. Pick the `fields` to request from the granted scopes
  2. GET {profile_url}?fields=...  (Bearer token in the Authorization header)
  3. Parse the JSON envelope  {"data": {"user": {...}}, "error": {...}}
  4. Map it to TikTokBasicProfile or TikTokExtendedProfile

Failures surface as TransportError, MalformedResponseError or
InvalidProfileError. Nothing is retried here; timeouts and retries belong to
the httpx transport.
"""

import json
import logging
from collections.abc import Callable, Sequence
from typing import Any

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from tiktok_auth.auth_strategies.constants import (
    BASIC_PROFILE_FIELDS,
    EXTENDED_PROFILE_FIELDS,
    FIELD_AVATAR_URL,
    FIELD_DISPLAY_NAME,
    FIELD_OPEN_ID,
    FIELD_USERNAME,
    SCOPE_USER_INFO_PROFILE,
)
from tiktok_auth.core.exceptions import (
    InvalidProfileError,
    MalformedResponseError,
    TransportError,
)
from tiktok_auth.schemas.profile import TikTokBasicProfile, TikTokExtendedProfile

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., AsyncOAuth2Client]


def has_profile_scope(granted_scopes: Sequence[str]) -> bool:
    return SCOPE_USER_INFO_PROFILE in granted_scopes


def profile_fields(granted_scopes: Sequence[str]) -> list[str]:
    """Fields to request; the username is only asked for under `user.info.profile`."""
    if has_profile_scope(granted_scopes):
        return list(EXTENDED_PROFILE_FIELDS)
    return list(BASIC_PROFILE_FIELDS)


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _error_details(payload: Any) -> dict[str, Any] | None:
    """Pull TikTok's `error` envelope out of a response, if there is one."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    return {key: error[key] for key in ("code", "message", "log_id") if key in error}


def parse_profile(
    body: str, granted_scopes: Sequence[str]
) -> TikTokBasicProfile | TikTokExtendedProfile:
    """
    Validate a /v2/user/info/ response body and build the normalized profile.

    Returns TikTokExtendedProfile only when `user.info.profile` was granted AND
    TikTok returned a non-empty username; otherwise TikTokBasicProfile, with
    any username TikTok sent left out.
    """
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError("Failed to parse user profile") from e

    data = payload.get("data") if isinstance(payload, dict) else None
    user = data.get("user") if isinstance(data, dict) else None
    if not isinstance(user, dict):
        raise InvalidProfileError(
            "Invalid TikTok response: missing user data", details=_error_details(payload)
        )

    open_id = user.get(FIELD_OPEN_ID)
    if not isinstance(open_id, str) or not open_id:
        raise InvalidProfileError(
            "Invalid TikTok response: missing open_id", details=_error_details(payload)
        )

    base = {
        "open_id": open_id,
        "display_name": _optional_str(user.get(FIELD_DISPLAY_NAME)),
        "avatar_url": _optional_str(user.get(FIELD_AVATAR_URL)),
        "raw": body,
        "raw_json": payload,
    }

    username = _optional_str(user.get(FIELD_USERNAME))
    if has_profile_scope(granted_scopes) and username:
        logger.debug(f"[tiktok] Built extended profile for {open_id}")
        return TikTokExtendedProfile(**base, username=username)

    logger.debug(f"[tiktok] Built basic profile for {open_id}")
    return TikTokBasicProfile(**base)


class TikTokProfileFetcher:
    """
    Fetches and normalizes the TikTok profile for an access token.

    Holds no state between calls; the same fetcher is safe to share across
    concurrent logins.
    """

    def __init__(self, client_factory: ClientFactory):
        self.client_factory = client_factory

    async def fetch_profile(
        self,
        access_token: str,
        profile_url: str,
        granted_scopes: Sequence[str],
    ) -> TikTokBasicProfile | TikTokExtendedProfile:
        fields = ",".join(profile_fields(granted_scopes))
        token = {"access_token": access_token, "token_type": "Bearer"}
        logger.debug(f"[tiktok] Fetching profile fields={fields}")

        async with self.client_factory(token=token) as client:
            try:
                response = await client.get(profile_url, params={"fields": fields})
                response.raise_for_status()
            except (httpx.HTTPError, AuthlibBaseError) as e:
                logger.error(f"[tiktok] Profile fetch failed: {e}")
                raise TransportError("Failed to fetch user profile", cause=e) from e

        return parse_profile(response.text, granted_scopes)
