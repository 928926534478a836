import uuid
from datetime import datetime, timezone
from typing import List

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.observability import doodle_orders_created_total
from shared.timestamps import now_iso, parse_iso

from .repository import OrderRepository
from .schemas import OrderCreate

logger = structlog.get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_at(order: dict) -> datetime:
    try:
        return parse_iso(order.get("createdAt") or "")
    except ValueError:
        return _EPOCH


class OrderService:
    @staticmethod
    async def create_order(db: AsyncSession, data: OrderCreate) -> dict:
        fields = {k: v for k, v in data.to_record(exclude_unset=True).items() if k not in ("id", "createdAt")}
        order = {
            "id": str(uuid.uuid4()),
            **fields,
            "createdAt": now_iso(),
        }
        await OrderRepository.create_order(db, order)
        doodle_orders_created_total.inc()
        logger.info(
            "order_created",
            order_id=order["id"],
            product_id=order.get("productId"),
            quantity=order.get("quantity"),
            total_price=order.get("totalPrice"),
        )
        return order

    @staticmethod
    async def list_orders(db: AsyncSession) -> List[dict]:
        """All orders, newest first."""
        orders = await OrderRepository.get_all_orders(db)
        return sorted(orders, key=_created_at, reverse=True)
