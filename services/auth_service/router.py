from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.config.database import get_db
from shared.errors import StorageError
from shared.security import limiter
from shared.security.dependencies import verify_app_key

from .schemas import AdminLogin, LoginResponse
from .service import AuthService

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_app_key)])


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,                          # slowapi needs this to find the client address
    payload: AdminLogin,
    db: AsyncSession = Depends(get_db),
):
    # InvalidCredentials propagates to the handler registered in main.py (401)
    try:
        return await AuthService.login(db, payload)
    except StorageError:
        return JSONResponse(status_code=500, content={"success": False, "message": "Login error"})
