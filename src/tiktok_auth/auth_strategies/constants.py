# auth_strategies/constants.py

TIKTOK = "tiktok"

TIKTOK_AUTHORIZATION_URL = "https://www.tiktok.com/v2/auth/authorize/"
TIKTOK_TOKEN_URL = "https://open.tiktokapis.com/v2/oauth/token/"
TIKTOK_USERINFO_URL = "https://open.tiktokapis.com/v2/user/info/"

TIKTOK_SCOPE_SEPARATOR = ","

# Login Kit scopes
SCOPE_USER_INFO_BASIC = "user.info.basic"
SCOPE_USER_INFO_PROFILE = "user.info.profile"

TIKTOK_DEFAULT_SCOPES = [SCOPE_USER_INFO_BASIC]

# /v2/user/info/ field names
FIELD_OPEN_ID = "open_id"
FIELD_AVATAR_URL = "avatar_url"
FIELD_DISPLAY_NAME = "display_name"
FIELD_USERNAME = "username"

BASIC_PROFILE_FIELDS = [FIELD_OPEN_ID, FIELD_AVATAR_URL, FIELD_DISPLAY_NAME]
EXTENDED_PROFILE_FIELDS = BASIC_PROFILE_FIELDS + [FIELD_USERNAME]

# Extension parameter TikTok expects alongside the standard client_id
CLIENT_KEY_PARAM = "client_key"
