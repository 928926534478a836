"""
Admin login checks a single plaintext credentials record. The record is
created from the configured default pair the first time anyone tries to log
in. A successful login returns a signed admin session token.
"""
import secrets
from datetime import timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.errors import InvalidCredentials
from shared.observability import doodle_admin_logins_total
from shared.security.jwt_handler import create_access_token
from shared.timestamps import to_iso

from .repository import AdminCredentialsRepository
from .schemas import AdminLogin, LoginResponse

logger = structlog.get_logger(__name__)


def _matches(stored, provided: str) -> bool:
    if not isinstance(stored, str):
        return False
    return secrets.compare_digest(stored.encode(), provided.encode())


class AuthService:

    @staticmethod
    async def verify(db: AsyncSession, username: str, password: str) -> None:
        credentials = await AdminCredentialsRepository.get(db)
        if credentials is None:
            credentials = await AdminCredentialsRepository.seed(
                db,
                {
                    "username": settings.ADMIN_DEFAULT_USERNAME,
                    "password": settings.ADMIN_DEFAULT_PASSWORD,
                },
            )
            logger.warning("admin_credentials_seeded", username=credentials.get("username"))

        # Evaluate both so a wrong username costs the same as a wrong password
        username_ok = _matches(credentials.get("username"), username)
        password_ok = _matches(credentials.get("password"), password)
        if not (username_ok and password_ok):
            doodle_admin_logins_total.labels(result="invalid").inc()
            logger.info("admin_login_rejected", username=username)
            raise InvalidCredentials("Invalid credentials")

    @staticmethod
    async def login(db: AsyncSession, data: AdminLogin) -> LoginResponse:
        await AuthService.verify(db, data.username, data.password)
        token, expires = create_access_token(
            data={"sub": f"admin:{data.username}"},
            expires_delta=timedelta(minutes=settings.ADMIN_SESSION_MINUTES),
        )
        doodle_admin_logins_total.labels(result="success").inc()
        logger.info("admin_login_succeeded", username=data.username)
        return LoginResponse(
            success=True,
            message="Login successful",
            token=token,
            expires_at=to_iso(expires),
        )
