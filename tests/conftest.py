import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from tiktok_auth.auth_strategies.oauth.tiktok import TikTokOAuthStrategy

CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"
CLIENT_KEY = "test-client-key"
REDIRECT_URI = "https://www.example.net/auth/tiktok/callback"
ACCESS_TOKEN = "act.example-access-token"


def user_envelope(**user: Any) -> dict[str, Any]:
    """Build a /v2/user/info/ response envelope around the given user fields."""
    return {
        "data": {"user": user},
        "error": {"code": "ok", "message": "", "log_id": "20240101000000ABCDEF"},
    }


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=json.dumps(payload))


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def alice_user() -> dict[str, Any]:
    return {"open_id": "123", "display_name": "Alice", "avatar_url": "http://x/a.png"}


@pytest.fixture
def make_strategy() -> Callable[..., TikTokOAuthStrategy]:
    """Factory for strategies wired to a fake transport."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response] | None = None, **overrides: Any
    ) -> TikTokOAuthStrategy:
        options: dict[str, Any] = {
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
            "client_key": CLIENT_KEY,
            "redirect_uri": REDIRECT_URI,
        }
        options.update(overrides)
        if handler is not None:
            options["http_transport"] = RecordingTransport(handler)
        return TikTokOAuthStrategy(**options)

    return _make
