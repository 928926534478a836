from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shared.storage import KVStore
from shared.timestamps import now_iso

PRODUCT_PREFIX = "product:"
PENDING_DELETE_PREFIX = "pending-delete:product:"


class ProductRepository:

    @staticmethod
    def key(product_id: str) -> str:
        return f"{PRODUCT_PREFIX}{product_id}"

    @staticmethod
    async def get_all_products(db: AsyncSession) -> List[dict]:
        return await KVStore.get_by_prefix(db, PRODUCT_PREFIX)

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: str) -> Optional[dict]:
        return await KVStore.get(db, ProductRepository.key(product_id))

    @staticmethod
    async def save_product(db: AsyncSession, product: dict) -> dict:
        return await KVStore.set(db, ProductRepository.key(product["id"]), product)

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: str) -> None:
        await KVStore.delete(db, ProductRepository.key(product_id))

    # Marker kept while a deletion is in flight, under a prefix product scans never see

    @staticmethod
    async def mark_pending_delete(db: AsyncSession, product: dict) -> None:
        marker = {
            "productId": product["id"],
            "images": product.get("images") or [],
            "startedAt": now_iso(),
        }
        await KVStore.set(db, f"{PENDING_DELETE_PREFIX}{product['id']}", marker)

    @staticmethod
    async def clear_pending_delete(db: AsyncSession, product_id: str) -> None:
        await KVStore.delete(db, f"{PENDING_DELETE_PREFIX}{product_id}")

    @staticmethod
    async def get_pending_delete(db: AsyncSession, product_id: str) -> Optional[dict]:
        return await KVStore.get(db, f"{PENDING_DELETE_PREFIX}{product_id}")
