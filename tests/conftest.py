import os

# Settings are read at import time, so the environment goes first
os.environ["PUBLIC_ANON_KEY"] = "test-anon-key"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["ADMIN_DEFAULT_USERNAME"] = "admin"
os.environ["ADMIN_DEFAULT_PASSWORD"] = "admin123"
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from client import AuthContext, DoodleAlleyClient
from main import app
from shared.config.database import Base, get_db
from shared.storage import ImageStorage, get_image_storage
from shared.storage.models import KVEntry

APP_KEY = "test-anon-key"
AUTH_HEADERS = {"Authorization": f"Bearer {APP_KEY}"}
STORAGE_URL = "http://storage.test"


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "kv.db"
    # Tables are created through the sync driver so no event loop is involved
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def db_engine(db_path):
    # NullPool: every session opens its own connection inside the running loop
    return create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)


@pytest.fixture
def kv_get(db_path):
    """Read a raw value straight from the store."""
    def _get(key):
        engine = create_engine(f"sqlite:///{db_path}")
        try:
            with engine.connect() as conn:
                return conn.execute(select(KVEntry.value).where(KVEntry.key == key)).scalar()
        finally:
            engine.dispose()
    return _get


@pytest.fixture
def storage_requests():
    return []


@pytest.fixture
def storage_status():
    """Status code the fake storage server answers with; tests may change it."""
    return {"code": 200}


@pytest.fixture
def image_storage(storage_requests, storage_status):
    def handler(request: httpx.Request) -> httpx.Response:
        storage_requests.append(request)
        if storage_status["code"] >= 400:
            return httpx.Response(storage_status["code"], json={"error": "storage unavailable"})
        return httpx.Response(storage_status["code"], json=[])

    return ImageStorage(STORAGE_URL, "service-key", "product-images", transport=httpx.MockTransport(handler))


@pytest.fixture
def app_overrides(db_engine, image_storage):
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def _get_db_override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_overrides) -> TestClient:
    return TestClient(app, headers=AUTH_HEADERS)


@pytest.fixture
def anonymous_client(app_overrides) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth():
    return AuthContext()


@pytest.fixture
async def api(app_overrides, auth):
    transport = httpx.ASGITransport(app=app)
    async with DoodleAlleyClient("http://testserver", APP_KEY, auth=auth, transport=transport) as c:
        yield c
