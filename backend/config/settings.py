# backend/config/settings.py
import os
from urllib.parse import quote_plus
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if url:
        return url

    host = os.getenv("DB_HOST", "localhost").strip()
    port = os.getenv("DB_PORT", "3306").strip()
    user = os.getenv("DB_USER", "root").strip()
    password = os.getenv("DB_PASSWORD", "").strip()
    name = os.getenv("DB_NAME", "harvest_hub").strip()
    return f"mysql+pymysql://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}/{name}"


DATABASE_URL = _build_database_url()
DB_ECHO = _flag("DB_ECHO", "false")

DEFAULT_JWT_SECRET = "change-me"
JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "720"))

NOTIFICATION_INTERVAL_SECONDS = int(os.getenv("NOTIFICATION_INTERVAL_SECONDS", "30"))
NOTIFICATIONS_ENABLED = _flag("NOTIFICATIONS_ENABLED", "true")

# "retain" keeps product approvals when a producer is rejected, "revoke" clears them
PRODUCER_REJECTION_POLICY = os.getenv("PRODUCER_REJECTION_POLICY", "retain").strip().lower()
# "permissive" accepts any listed status after any other, "strict" follows the happy path
ORDER_TRANSITION_POLICY = os.getenv("ORDER_TRANSITION_POLICY", "permissive").strip().lower()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
