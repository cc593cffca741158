"""Internal constants shared across the library."""

COMMUNITY_URL = "https://steamcommunity.com"
STORE_URL = "https://store.steampowered.com"
API_URL = "https://api.steampowered.com"

QUERY_TIME_PATH = "/ITwoFactorService/QueryTime/v0001"
CONFIRMATION_LIST_PATH = "/mobileconf/getlist"
CONFIRMATION_ACTION_PATH = "/mobileconf/multiajaxop"
AUTHORIZED_DEVICES_PATH = "/account/authorizeddevices"
MANAGE_ACTION_PATH = "/twofactor/manage_action"

# Confirmation endpoints reject anything but the mobile app identity.
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0; Nexus 6P Build/MDA89D) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.181 Mobile Safari/537.36"
)
MOBILE_REQUESTED_WITH = "com.valvesoftware.android.steam.community"

# The store pages reject the mobile user agent above.
DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)

CONFIRMATION_DEVICE_TYPE = "android"
LISTING_TAG = "conf"

# Body message the confirmation endpoints return for a bad signature.
SIGNATURE_REJECTED_MESSAGE = "Oh nooooooes!"

# ------------------------------------------------------------------
# One-time codes
# ------------------------------------------------------------------

CODE_ALPHABET = "23456789BCDFGHJKMNPQRTVWXY"
CODE_LENGTH = 5
CODE_PERIOD_SECONDS = 30

# ------------------------------------------------------------------
# Device policy
# ------------------------------------------------------------------

ACTIVE_WINDOW_SECONDS = 5 * 60
NEW_DEVICE_DAYS = 14

SESSION_COOKIE = "steamLoginSecure"
