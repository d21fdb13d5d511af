import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:8000/api"),
    "timeout": float(os.getenv("API_TIMEOUT_SECONDS", "10")),
    "max_retries": int(os.getenv("API_MAX_RETRIES", "2")),
    "backoff_factor": float(os.getenv("API_BACKOFF_FACTOR", "0.3")),
}

# Always refetch so edits show up immediately
CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "0"))
FETCH_LIMIT = int(os.getenv("FETCH_LIMIT", "100"))
CASCADE_FETCH_LIMIT = int(os.getenv("CASCADE_FETCH_LIMIT", "1000"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
