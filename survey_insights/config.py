# survey_insights/config.py
import os
import logging
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

# .env in the project root wins, otherwise python-dotenv searches upwards
dotenv_path = os.path.join(PACKAGE_DIR, "..", ".env")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)
else:
    load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, raw, default)
        return default


# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL")
SQLITE_FALLBACK_PATH = os.path.join(PACKAGE_DIR, "survey_insights.db")
SQL_ECHO = _env_bool("SQL_ECHO")
DB_AUTO_CREATE = _env_bool("DB_AUTO_CREATE")

# --- HTTP ---
FALLBACK_ORIGINS = [
    "http://127.0.0.1:5173",
    "http://localhost:5173",
    "http://localhost:3000",
]
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("BACKEND_ALLOWED_ORIGINS", "").split(",")
    if origin.strip()
] or FALLBACK_ORIGINS

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Reporting ---
REPORTING_TIMEZONE = os.getenv("REPORTING_TIMEZONE", "UTC")
OVERVIEW_TREND_DAYS = _env_int("OVERVIEW_TREND_DAYS", 30)
TOP_SURVEYS_LIMIT = _env_int("TOP_SURVEYS_LIMIT", 5)


def get_reporting_tz() -> tzinfo:
    """Timezone in which trend buckets are cut into calendar days."""
    if REPORTING_TIMEZONE.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(REPORTING_TIMEZONE)
