import re
import uuid
from typing import List, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound, StorageError
from shared.observability import (
    doodle_image_delete_failures_total,
    doodle_products_created_total,
    doodle_products_deleted_total,
)
from shared.storage import ImageStorage
from shared.timestamps import iso_after, now_iso

from .deletion import build_delete_saga
from .repository import ProductRepository
from .schemas import RESERVED_FIELDS, ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ProductService:

    @staticmethod
    async def list_products(db: AsyncSession, active_only: bool = False) -> List[dict]:
        products = await ProductRepository.get_all_products(db)
        if active_only:
            products = [p for p in products if p.get("isActive") is True]
        return products

    @staticmethod
    async def get_product(db: AsyncSession, product_id: str) -> dict:
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate) -> dict:
        fields = {k: v for k, v in data.to_record(exclude_unset=True).items() if k not in RESERVED_FIELDS}
        timestamp = now_iso()
        product = {
            "id": str(uuid.uuid4()),
            **fields,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        await ProductRepository.save_product(db, product)
        doodle_products_created_total.inc()
        logger.info("product_created", product_id=product["id"], name=product.get("name"))
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: str, data: ProductUpdate) -> dict:
        existing = await ProductService.get_product(db, product_id)
        updates = {
            k: v for k, v in data.to_record(exclude_unset=True).items() if k not in RESERVED_FIELDS
        }
        product = {
            **existing,
            **updates,
            "id": existing["id"],
            "createdAt": existing["createdAt"],
            "updatedAt": iso_after(existing.get("updatedAt")),
        }
        await ProductRepository.save_product(db, product)
        logger.info("product_updated", product_id=product_id, fields=sorted(updates))
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, storage: ImageStorage, product_id: str) -> None:
        product = await ProductService.get_product(db, product_id)
        if await ProductRepository.get_pending_delete(db, product_id):
            logger.warning("resuming_product_delete", product_id=product_id)

        ctx = {"product": product}
        try:
            await build_delete_saga(db, storage).execute(ctx)
        except StorageError as e:
            if ctx.get("failed_step") == "remove_images":
                doodle_image_delete_failures_total.inc()
                raise StorageError("Failed to delete images") from e
            raise StorageError("Failed to delete product") from e

        doodle_products_deleted_total.inc()
        logger.info("product_deleted", product_id=product_id, images_removed=len(ctx["images_removed"]))

    @staticmethod
    async def upload_image(
        storage: ImageStorage, filename: str, content: bytes, content_type: str
    ) -> Tuple[str, str]:
        safe_name = _UNSAFE_FILENAME_CHARS.sub("-", filename.rsplit("/", 1)[-1]).strip("-") or "image"
        path = f"{uuid.uuid4().hex}-{safe_name}"
        url = await storage.upload(path, content, content_type)
        logger.info("product_image_uploaded", path=path, size=len(content))
        return url, path
