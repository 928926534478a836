"""
Product deletion touches two resources: image objects in the bucket and the
product record in the key-value store. It runs as a saga:

  1. mark_pending    write a pending-delete marker for the product
  2. remove_images   delete the bucket objects referenced by ``images``
  3. delete_record   delete the product record
  4. clear_marker    drop the marker

If image removal fails, the marker is rolled back and the product survives
untouched. If the record delete fails after images are gone, the marker stays
behind so the half-deleted product can be found; issuing the DELETE again
finishes the job.
"""
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import StorageError
from shared.saga import SagaOrchestrator
from shared.storage import ImageStorage

from .repository import ProductRepository

logger = structlog.get_logger(__name__)


def build_delete_saga(db: AsyncSession, storage: ImageStorage) -> SagaOrchestrator:

    # --- ACTIONS ---

    async def mark_pending(ctx: dict):
        await ProductRepository.mark_pending_delete(db, ctx["product"])

    async def remove_images(ctx: dict):
        images = ctx["product"].get("images")
        paths = storage.paths_from_urls(images if isinstance(images, list) else [])
        await storage.remove(paths)
        ctx["images_removed"] = paths

    async def delete_record(ctx: dict):
        await ProductRepository.delete_product(db, ctx["product"]["id"])

    async def clear_marker(ctx: dict):
        try:
            await ProductRepository.clear_pending_delete(db, ctx["product"]["id"])
        except StorageError as e:
            # The product is already gone; a stale marker is harmless
            logger.warning("pending_delete_marker_not_cleared", product_id=ctx["product"]["id"], error=str(e))

    # --- COMPENSATIONS (Rollbacks) ---

    async def unmark_pending(ctx: dict):
        if "images_removed" in ctx:
            logger.critical(
                "product_delete_incomplete",
                product_id=ctx["product"]["id"],
                removed_paths=ctx["images_removed"],
            )
            return False
        await ProductRepository.clear_pending_delete(db, ctx["product"]["id"])

    saga = SagaOrchestrator("delete_product")
    saga.add_step("mark_pending", mark_pending, unmark_pending)
    saga.add_step("remove_images", remove_images, None) # Objects cannot be restored
    saga.add_step("delete_record", delete_record, None)
    saga.add_step("clear_marker", clear_marker, None)
    return saga
