import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config import settings
from shared.config.database import create_tables
from shared.errors import InvalidCredentials, NotFound, StorageError
from shared.observability import setup_observability
from shared.security import limiter
from shared.security.dependencies import verify_app_key

# IMPORTANT: import models so they register with Base
from shared.storage import models  # noqa: F401

from services.auth_service.router import router as auth_router
from services.order_service.router import router as order_router
from services.product_service.router import router as product_router

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Doodle Alley",
    version="1.0.0",
    description="Storefront API: product catalog, orders, admin login.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, settings.SERVICE_NAME)

# --- SECURITY SETUP ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Added last so it wraps everything, preflight requests included
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_headers=["Content-Type", "Authorization", "X-Admin-Session"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    expose_headers=["Content-Length"],
    max_age=600,
)

health_router = APIRouter(dependencies=[Depends(verify_app_key)])

@health_router.get("/health")
async def health_check():
    return {"status": "ok"}

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(product_router)
app.include_router(order_router)


# --- ERROR ENVELOPES ---

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})

@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"error": exc.message or "Not found"})

@app.exception_handler(InvalidCredentials)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentials):
    return JSONResponse(
        status_code=401,
        content={"success": False, "message": exc.message or "Invalid credentials"},
    )

@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("storage_error", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=500, content={"error": "Storage failure"})


@app.on_event("startup")
async def startup_event():
    await create_tables()
    logger.info("startup_complete", service=settings.SERVICE_NAME)
