"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCAN_COOLDOWN_SECONDS = 1.0
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_NOTIFICATION_LIMIT = 100
DEFAULT_NOTIFY_TIMEOUT_SECONDS = 10
DEFAULT_ISOLATION_LEVEL = "READ COMMITTED"

WEEK_REPORT_DAYS = 7
MONTH_REPORT_DAYS = 30

QR_TOKEN_PREFIX = "KG-"
QR_TOKEN_BYTES = 12
