import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:3000"])

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


DB_HOST = os.getenv("DB_HOST", "")
DB_PORT = int(os.getenv("DB_PORT", "3306"))
DB_USER = os.getenv("DB_USER", "")
DB_PASS = os.getenv("DB_PASS", "")
DB_NAME = os.getenv("DB_NAME", "")
DB_SSL_CA = os.getenv("DB_SSL_CA", "")

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")
SESSION_ALGORITHM = os.getenv("SESSION_ALGORITHM", "HS256")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")
SESSION_IDLE_MINUTES = int(os.getenv("SESSION_IDLE_MINUTES", "60"))
SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=False)


def build_database_url() -> str | None:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    if not (DB_HOST and DB_USER and DB_NAME):
        return None
    return URL.create(
        "mysql+pymysql",
        username=DB_USER,
        password=DB_PASS or None,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_NAME,
    ).render_as_string(hide_password=False)


DATABASE_URL = build_database_url()


def validate_database_config() -> str:
    if not DATABASE_URL:
        raise RuntimeError(
            "Database configuration missing. Set DATABASE_URL or DB_HOST, DB_USER and DB_NAME."
        )
    return DATABASE_URL


def validate_runtime_config() -> None:
    validate_database_config()
    if APP_ENV.lower() == "production" and SESSION_SECRET == "change-me":
        raise RuntimeError("SESSION_SECRET must be set in production.")
    if DB_SSL_CA and not os.path.isfile(DB_SSL_CA):
        raise RuntimeError(f"DB_SSL_CA points to a missing file: {DB_SSL_CA}")
