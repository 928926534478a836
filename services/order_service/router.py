from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.errors import StorageError
from shared.security.dependencies import require_admin_session, verify_app_key

from .schemas import OrderCreate, OrderListResponse, OrderResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"], dependencies=[Depends(verify_app_key)])


@router.post(
    "",
    response_model=OrderResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(order: OrderCreate, db: AsyncSession = Depends(get_db)):
    try:
        created = await OrderService.create_order(db, order)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create order")
    return {"order": created}


@router.get(
    "",
    response_model=OrderListResponse,
    response_model_exclude_unset=True,
    dependencies=[Depends(require_admin_session)],
)
async def list_orders(db: AsyncSession = Depends(get_db)):
    try:
        orders = await OrderService.list_orders(db)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch orders")
    return {"orders": orders}
