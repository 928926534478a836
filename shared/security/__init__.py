from .jwt_handler import create_access_token, verify_access_token
from .api_key import verify_api_key
from .dependencies import verify_app_key, require_admin_session
from .rate_limiter import limiter

__all__ = [
    "create_access_token",
    "verify_access_token",
    "verify_api_key",
    "verify_app_key",
    "require_admin_session",
    "limiter",
]
