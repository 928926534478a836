import os
import warnings

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost") # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5433")
DB_NAME = os.getenv("POSTGRES_DB", "doodle_alley")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
SQL_ECHO = _flag("SQL_ECHO")

# Object storage for product images
STORAGE_URL = os.getenv("STORAGE_URL", "http://localhost:54321").rstrip("/")
STORAGE_SERVICE_KEY = os.getenv("STORAGE_SERVICE_KEY", "")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "product-images")
STORAGE_TIMEOUT_SECONDS = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "10"))

# Admin login
ADMIN_DEFAULT_USERNAME = os.getenv("ADMIN_DEFAULT_USERNAME", "admin")
ADMIN_DEFAULT_PASSWORD = os.getenv("ADMIN_DEFAULT_PASSWORD", "")
if not ADMIN_DEFAULT_PASSWORD:
    warnings.warn(
        "ADMIN_DEFAULT_PASSWORD is not set. The first admin login will seed "
        "the well-known default password. Set this env var in production!",
        stacklevel=2,
    )
    ADMIN_DEFAULT_PASSWORD = "admin123"

ADMIN_SESSION_MINUTES = int(os.getenv("ADMIN_SESSION_MINUTES", "480"))
ADMIN_SESSION_REQUIRED = _flag("ADMIN_SESSION_REQUIRED")
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")

# Observability
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "")
SERVICE_NAME = os.getenv("SERVICE_NAME", "doodle_alley")
