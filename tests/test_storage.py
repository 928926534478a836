import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from shared.errors import StorageError
from shared.storage import ImageStorage, KVStore
from shared.storage.models import KVEntry


@pytest.fixture
async def db(db_engine):
    async with async_sessionmaker(db_engine, expire_on_commit=False)() as session:
        yield session


async def test_get_missing_key_returns_none(db):
    assert await KVStore.get(db, "product:missing") is None


async def test_set_overwrites_existing_value(db):
    await KVStore.set(db, "product:1", {"name": "a"})
    await KVStore.set(db, "product:1", {"name": "b"})
    assert await KVStore.get(db, "product:1") == {"name": "b"}


async def test_set_if_absent_keeps_first_value(db):
    assert await KVStore.set_if_absent(db, "admin:credentials", {"username": "first"}) == {"username": "first"}
    assert await KVStore.set_if_absent(db, "admin:credentials", {"username": "second"}) == {"username": "first"}
    assert await KVStore.get(db, "admin:credentials") == {"username": "first"}


async def test_set_if_absent_returns_concurrent_writers_value(db, db_engine, monkeypatch):
    real_get = KVStore.get
    calls = []

    async def racing_get(session, key):
        calls.append(key)
        if len(calls) == 1:
            # Another login seeds the key between our read and our insert
            async with async_sessionmaker(db_engine)() as other:
                other.add(KVEntry(key=key, value={"username": "first"}))
                await other.commit()
            return None
        return await real_get(session, key)

    monkeypatch.setattr(KVStore, "get", racing_get)

    stored = await KVStore.set_if_absent(db, "admin:credentials", {"username": "second"})

    assert stored == {"username": "first"}
    assert len(calls) == 2
    assert await real_get(db, "admin:credentials") == {"username": "first"}


async def test_prefix_scan_only_returns_matching_keys(db):
    await KVStore.set(db, "product:1", {"id": "1"})
    await KVStore.set(db, "product:2", {"id": "2"})
    await KVStore.set(db, "order:1", {"id": "o1"})
    await KVStore.set(db, "pending-delete:product:1", {"productId": "1"})

    products = await KVStore.get_by_prefix(db, "product:")
    assert sorted(p["id"] for p in products) == ["1", "2"]


async def test_prefix_scan_treats_wildcards_literally(db):
    await KVStore.set(db, "a_b:1", {"v": 1})
    await KVStore.set(db, "axb:1", {"v": 2})
    assert await KVStore.get_by_prefix(db, "a_b:") == [{"v": 1}]


async def test_delete_removes_key(db):
    await KVStore.set(db, "order:1", {"id": "o1"})
    await KVStore.delete(db, "order:1")
    assert await KVStore.get(db, "order:1") is None


def storage(handler=None):
    handler = handler or (lambda request: httpx.Response(200, json=[]))
    return ImageStorage(
        "https://proj.storage.example/", "service-key", "product-images",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize(
    "url, path",
    [
        ("https://proj.storage.example/storage/v1/object/public/product-images/a.png", "a.png"),
        ("https://proj.storage.example/storage/v1/object/public/product-images/x/y.jpg", "x/y.jpg"),
        ("https://cdn.example/other-bucket/a.png", None),
        ("https://proj.storage.example/storage/v1/object/public/product-images/", None),
        ("", None),
    ],
)
def test_path_from_url(url, path):
    assert storage().path_from_url(url) == path


def test_public_url_and_path_agree():
    s = storage()
    assert s.path_from_url(s.public_url("abc-mug.png")) == "abc-mug.png"


async def test_remove_sends_service_key_and_paths():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"name": "a.png"}])

    await storage(handler).remove(["a.png"])

    assert seen[0].headers["authorization"] == "Bearer service-key"
    assert seen[0].headers["apikey"] == "service-key"


async def test_remove_nothing_makes_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    await storage(handler).remove([])


async def test_remove_failure_raises_storage_error():
    with pytest.raises(StorageError):
        await storage(lambda request: httpx.Response(500)).remove(["a.png"])


async def test_transport_failure_raises_storage_error():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(StorageError):
        await storage(handler).upload("a.png", b"x", "image/png")
