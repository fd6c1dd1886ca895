"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 50
DEFAULT_HISTORY_PAGE_SIZE = 20
NOTIFICATION_LIST_LIMIT = 50
RECENT_ACTIVITY_LIMIT = 10
DASHBOARD_TREND_DAYS = 7

CLASS_CODE_LENGTH = 6
CLASS_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CLASS_CODE_MAX_ATTEMPTS = 10

MIN_PASSWORD_LENGTH = 6
