import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "https://localhost/api"),
    "timeout": float(os.getenv("API_TIMEOUT_SECONDS", "10")),
    "max_retries": int(os.getenv("API_MAX_RETRIES", "2")),
    "backoff_factor": float(os.getenv("API_BACKOFF_FACTOR", "0.5")),
}

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "5"))
FETCH_LIMIT = int(os.getenv("FETCH_LIMIT", "100"))
CASCADE_FETCH_LIMIT = int(os.getenv("CASCADE_FETCH_LIMIT", "1000"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
