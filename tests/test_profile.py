"""Tests for TikTok profile fetching and normalization."""

import json

import httpx
import pytest
from pydantic import TypeAdapter, ValidationError

from tests.conftest import ACCESS_TOKEN, json_response, user_envelope
from tiktok_auth.auth_strategies.oauth.profile import parse_profile, profile_fields
from tiktok_auth.core.exceptions import (
    InvalidProfileError,
    MalformedResponseError,
    TransportError,
)
from tiktok_auth.schemas.profile import TikTokBasicProfile, TikTokExtendedProfile, TikTokProfile

BASIC = ["user.info.basic"]
WITH_PROFILE = ["user.info.basic", "user.info.profile"]
PROFILE_URL = "https://open.tiktokapis.com/v2/user/info/"


def _serve(payload, status_code: int = 200):
    return lambda request: json_response(payload, status_code=status_code)


class TestProfileFields:
    def test_basic_scope(self):
        assert profile_fields(BASIC) == ["open_id", "avatar_url", "display_name"]

    def test_profile_scope_adds_username(self):
        assert profile_fields(WITH_PROFILE) == [
            "open_id",
            "avatar_url",
            "display_name",
            "username",
        ]


class TestParseProfile:
    def test_basic_profile_without_username(self, alice_user):
        body = json.dumps(user_envelope(**alice_user))

        profile = parse_profile(body, BASIC)

        assert isinstance(profile, TikTokBasicProfile)
        assert profile.kind == "basic"
        assert profile.provider == "tiktok"
        assert profile.open_id == "123"
        assert profile.display_name == "Alice"
        assert profile.avatar_url == "http://x/a.png"
        assert profile.raw == body
        assert profile.raw_json == json.loads(body)
        assert not hasattr(profile, "username")

    def test_extended_profile_with_scope_and_username(self, alice_user):
        body = json.dumps(user_envelope(**alice_user, username="alice99"))

        profile = parse_profile(body, WITH_PROFILE)

        assert isinstance(profile, TikTokExtendedProfile)
        assert profile.kind == "extended"
        assert profile.username == "alice99"
        assert profile.open_id == "123"

    def test_username_without_scope_is_dropped(self, alice_user):
        body = json.dumps(user_envelope(**alice_user, username="alice99"))

        profile = parse_profile(body, BASIC)

        assert isinstance(profile, TikTokBasicProfile)
        assert "username" not in profile.model_dump()

    @pytest.mark.parametrize("extra", [{}, {"username": ""}, {"username": None}])
    def test_scope_without_username_downgrades(self, alice_user, extra):
        profile = parse_profile(json.dumps(user_envelope(**alice_user, **extra)), WITH_PROFILE)

        assert isinstance(profile, TikTokBasicProfile)

    def test_open_id_is_kept_verbatim(self):
        open_id = "-000Ab_cD1eFgh2IJKLmnO3pQRsTuvWxYZ"
        profile = parse_profile(json.dumps(user_envelope(open_id=open_id)), BASIC)

        assert profile.open_id == open_id
        assert profile.display_name is None
        assert profile.avatar_url is None

    @pytest.mark.parametrize("body", ["", "not json", "{\"data\": "])
    def test_invalid_json(self, body):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_profile(body, BASIC)
        assert exc_info.value.error_code == "MALFORMED_RESPONSE"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"data": {}},
            {"data": None},
            {"data": {"user": None}},
            {"data": {"user": "123"}},
            [],
            "123",
        ],
    )
    def test_missing_user_data(self, payload):
        with pytest.raises(InvalidProfileError, match="missing user data"):
            parse_profile(json.dumps(payload), BASIC)

    def test_missing_user_data_carries_tiktok_error(self):
        payload = {
            "data": {},
            "error": {
                "code": "scope_not_authorized",
                "message": "The user did not authorize the scope required.",
                "log_id": "202401010000000ABC",
            },
        }

        with pytest.raises(InvalidProfileError) as exc_info:
            parse_profile(json.dumps(payload), BASIC)

        assert exc_info.value.error_code == "INVALID_PROFILE"
        assert exc_info.value.details["code"] == "scope_not_authorized"
        assert exc_info.value.details["log_id"] == "202401010000000ABC"

    @pytest.mark.parametrize("open_id", [None, "", 123])
    def test_missing_open_id(self, alice_user, open_id):
        user = {**alice_user, "open_id": open_id}

        with pytest.raises(InvalidProfileError, match="missing open_id"):
            parse_profile(json.dumps(user_envelope(**user)), WITH_PROFILE)

    def test_absent_open_id(self):
        with pytest.raises(InvalidProfileError, match="missing open_id"):
            parse_profile(json.dumps(user_envelope(display_name="Alice")), BASIC)


class TestProfileShapes:
    def test_profiles_are_frozen(self, alice_user):
        profile = parse_profile(json.dumps(user_envelope(**alice_user)), BASIC)

        with pytest.raises(ValidationError):
            profile.open_id = "456"

    def test_variants_are_not_related_by_inheritance(self):
        assert not issubclass(TikTokExtendedProfile, TikTokBasicProfile)

    def test_discriminated_union(self, alice_user):
        adapter = TypeAdapter(TikTokProfile)
        extended = parse_profile(
            json.dumps(user_envelope(**alice_user, username="alice99")), WITH_PROFILE
        )

        restored = adapter.validate_python(extended.model_dump())

        assert isinstance(restored, TikTokExtendedProfile)
        assert restored == extended

    def test_extended_requires_username(self, alice_user):
        with pytest.raises(ValidationError):
            TikTokExtendedProfile(**alice_user, username="", raw="{}", raw_json={})


@pytest.mark.asyncio
class TestFetchProfile:
    async def test_token_sent_in_authorization_header(self, make_strategy, alice_user):
        strategy = make_strategy(_serve(user_envelope(**alice_user)))

        await strategy.user_profile(ACCESS_TOKEN)

        (request,) = strategy.http_transport.requests
        assert request.method == "GET"
        assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
        assert "access_token" not in request.url.params
        assert request.url.params["fields"] == "open_id,avatar_url,display_name"
        assert f"{request.url.scheme}://{request.url.host}{request.url.path}" == PROFILE_URL

    async def test_profile_scope_requests_username(self, make_strategy, alice_user):
        strategy = make_strategy(
            _serve(user_envelope(**alice_user, username="alice99")), scope=WITH_PROFILE
        )

        profile = await strategy.user_profile(ACCESS_TOKEN)

        assert isinstance(profile, TikTokExtendedProfile)
        request = strategy.http_transport.requests[0]
        assert request.url.params["fields"] == "open_id,avatar_url,display_name,username"

    async def test_explicit_granted_scopes_override_configured(self, make_strategy, alice_user):
        strategy = make_strategy(
            _serve(user_envelope(**alice_user, username="alice99")), scope=WITH_PROFILE
        )

        profile = await strategy.user_profile(ACCESS_TOKEN, BASIC)

        assert isinstance(profile, TikTokBasicProfile)

    async def test_custom_profile_url(self, make_strategy, alice_user):
        strategy = make_strategy(
            _serve(user_envelope(**alice_user)), profile_url="https://api.example.test/me"
        )

        await strategy.user_profile(ACCESS_TOKEN)

        request = strategy.http_transport.requests[0]
        assert request.url.host == "api.example.test"
        assert request.url.path == "/me"

    async def test_network_failure_is_transport_error(self, make_strategy):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        strategy = make_strategy(handler)

        with pytest.raises(TransportError) as exc_info:
            await strategy.user_profile(ACCESS_TOKEN)

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert exc_info.value.error_code == "TRANSPORT_ERROR"

    async def test_timeout_is_transport_error(self, make_strategy):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError):
            await make_strategy(handler).user_profile(ACCESS_TOKEN)

    async def test_non_2xx_is_transport_error_without_parsing(self, make_strategy):
        strategy = make_strategy(lambda request: httpx.Response(401, text="<html>nope</html>"))

        with pytest.raises(TransportError) as exc_info:
            await strategy.user_profile(ACCESS_TOKEN)

        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
        assert len(strategy.http_transport.requests) == 1

    async def test_malformed_body(self, make_strategy):
        strategy = make_strategy(lambda request: httpx.Response(200, text="<html></html>"))

        with pytest.raises(MalformedResponseError):
            await strategy.user_profile(ACCESS_TOKEN)

    async def test_invalid_profile(self, make_strategy):
        strategy = make_strategy(_serve({"data": {}}))

        with pytest.raises(InvalidProfileError):
            await strategy.user_profile(ACCESS_TOKEN)

    async def test_repeated_fetches_are_equal(self, make_strategy, alice_user):
        strategy = make_strategy(
            _serve(user_envelope(**alice_user, username="alice99")), scope=WITH_PROFILE
        )

        first = await strategy.user_profile(ACCESS_TOKEN)
        second = await strategy.user_profile(ACCESS_TOKEN)

        assert first == second
        assert first is not second
        assert len(strategy.http_transport.requests) == 2
