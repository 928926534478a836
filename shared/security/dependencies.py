from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from shared.config import settings

from .api_key import verify_api_key
from .jwt_handler import verify_access_token

# Every client sends the application key as "Authorization: Bearer <key>"
app_key_scheme = HTTPBearer(auto_error=False)

# Admin session token issued by POST /admin/login
admin_session_header = APIKeyHeader(name="X-Admin-Session", auto_error=False)


async def verify_app_key(
    credentials: HTTPAuthorizationCredentials | None = Depends(app_key_scheme),
) -> bool:
    """Dependency to validate the shared application key."""
    if credentials is None or not verify_api_key(credentials.credentials):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return True


async def require_admin_session(token: str | None = Depends(admin_session_header)) -> dict | None:
    """
    Dependency guarding admin routes. A no-op unless ADMIN_SESSION_REQUIRED
    is enabled, in which case a valid admin session token is mandatory.
    """
    if not settings.ADMIN_SESSION_REQUIRED:
        return None

    payload = verify_access_token(token) if token else None
    if payload is None or not str(payload.get("sub", "")).startswith("admin:"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin session required",
        )
    return payload
