import os

# --- Status source ---
STATUS_URL = os.environ.get("STATUS_URL", "http://127.0.0.1:5050/api/get-spotify-current")
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://127.0.0.1:5051")
STATUS_TIMEOUT_SECONDS = float(os.environ.get("STATUS_TIMEOUT_SECONDS", "10"))

# --- Progress ticker ---
TICK_MS = 100
MIN_REFRESH_INTERVAL_SECONDS = float(os.environ.get("MIN_REFRESH_INTERVAL_SECONDS", "1"))
ERROR_RETRY_SECONDS = float(os.environ.get("ERROR_RETRY_SECONDS", "30"))      # 0 disables retry
ERROR_RETRY_MAX_SECONDS = float(os.environ.get("ERROR_RETRY_MAX_SECONDS", "300"))
IDLE_POLL_SECONDS = float(os.environ.get("IDLE_POLL_SECONDS", "60"))          # 0 keeps "not playing" static

COLOR_CACHE_SIZE = int(os.environ.get("COLOR_CACHE_SIZE", "256"))

# --- Page ---
GOOGLE_ANALYTICS_CODE = os.environ.get("GOOGLE_ANALYTICS_CODE", "")
OWNER_NAME = os.environ.get("OWNER_NAME", "Raed")
PROFILE_URL = os.environ.get("PROFILE_URL", "https://github.com/RaedsLab")
SOURCE_URL = os.environ.get("SOURCE_URL", "https://github.com/RaedsLab/islistening")

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "5051"))

# --- Snapshot status endpoint ---
STATUS_API_PORT = int(os.environ.get("STATUS_API_PORT", "5050"))
NOW_PLAYING_JSON = os.environ.get("NOW_PLAYING_JSON", "run/now_playing.json")
SNAPSHOT_STALE_SECONDS = int(os.environ.get("SNAPSHOT_STALE_SECONDS", "600"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
