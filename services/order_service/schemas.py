from typing import Any, List

from pydantic import BaseModel

from shared.schemas import CamelModel


class OrderCreate(CamelModel):
    """Order fields as the order form sends them.

    Stored as sent: any JSON object is accepted and no field is checked or
    defaulted here. The order form validates before posting.
    """

    product_id: Any = None
    product_name: Any = None
    product_price: Any = None
    customer_name: Any = None
    phone_number: Any = None
    delivery_address: Any = None
    quantity: Any = None
    notes: Any = None
    total_price: Any = None # Computed by the client, stored as sent


class Order(OrderCreate):
    id: str
    created_at: str


class OrderResponse(BaseModel):
    order: Order


class OrderListResponse(BaseModel):
    orders: List[Order]
