import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://api.test/api"),
    "timeout": 2.0,
    "max_retries": 0,
    "backoff_factor": 0.0,
}

CACHE_TTL_SECONDS = 0
FETCH_LIMIT = 100
CASCADE_FETCH_LIMIT = 1000

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
