from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from shared.storage import KVStore

ORDER_PREFIX = "order:"


class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: dict) -> dict:
        return await KVStore.set(db, f"{ORDER_PREFIX}{order['id']}", order)

    @staticmethod
    async def get_all_orders(db: AsyncSession) -> List[dict]:
        return await KVStore.get_by_prefix(db, ORDER_PREFIX)
