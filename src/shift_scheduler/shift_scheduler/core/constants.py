"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

USERS_TABLE = "users"
SHIFTS_TABLE = "shifts"
REQUESTS_TABLE = "shift_requests"

DEFAULT_FETCH_LIMIT = 100
DEFAULT_CASCADE_FETCH_LIMIT = 1000
DEFAULT_CACHE_TTL_SECONDS = 0
DEFAULT_API_TIMEOUT_SECONDS = 10.0
DEFAULT_API_MAX_RETRIES = 2
DEFAULT_API_BACKOFF_FACTOR = 0.3
DEFAULT_BATCH_WORKERS = 8

# Sunday first, matching the calendar grid.
WEEKDAY_LABELS = ("日", "月", "火", "水", "木", "金", "土")

FIRST_WORK_HOUR = 9
LAST_WORK_HOUR = 18
MINUTE_STEPS = ("00", "15", "30", "45")
