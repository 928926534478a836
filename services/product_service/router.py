from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.errors import StorageError
from shared.security.dependencies import require_admin_session, verify_app_key
from shared.storage import ImageStorage, get_image_storage

from .schemas import (
    DeleteResponse,
    ImageUploadResponse,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(verify_app_key)])


@router.get("", response_model=ProductListResponse, response_model_exclude_unset=True)
async def list_products(
    active: bool = Query(default=False, description="Only products visible in the catalog"),
    db: AsyncSession = Depends(get_db),
):
    try:
        products = await ProductService.list_products(db, active_only=active)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch products")
    return {"products": products}


@router.post(
    "",
    response_model=ProductResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_session)],
)
async def create_product(product: ProductCreate, db: AsyncSession = Depends(get_db)):
    try:
        created = await ProductService.create_product(db, product)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create product")
    return {"product": created}


@router.post(
    "/images",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_session)],
)
async def upload_image(
    file: UploadFile = File(...),
    storage: ImageStorage = Depends(get_image_storage),
):
    content = await file.read()
    try:
        url, path = await ProductService.upload_image(
            storage,
            file.filename or "image",
            content,
            file.content_type or "application/octet-stream",
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to upload image")
    return {"url": url, "path": path}


@router.get("/{product_id}", response_model=ProductResponse, response_model_exclude_unset=True)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    try:
        product = await ProductService.get_product(db, product_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch product")
    return {"product": product}


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    response_model_exclude_unset=True,
    dependencies=[Depends(require_admin_session)],
)
async def update_product(
    product_id: str,
    updates: ProductUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        product = await ProductService.update_product(db, product_id, updates)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update product")
    return {"product": product}


@router.delete(
    "/{product_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(require_admin_session)],
)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    try:
        await ProductService.delete_product(db, storage, product_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"success": True}
