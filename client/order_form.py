"""
Order submission: load the product, collect buyer details, record the order,
then hand the buyer over to Instagram DM with a ready-made summary.

The order counts as recorded once the create call has been issued. The DM
hand-off runs whatever status that call returns; only a transport failure
stops it.
"""
import inspect
import os
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Union

import httpx
import structlog

from .api import ApiError

logger = structlog.get_logger(__name__)

DEFAULT_INSTAGRAM_USERNAME = "doodle.alley"


class OrderFormError(Exception):
    def __init__(self, problems: List[str]):
        super().__init__("; ".join(problems))
        self.problems = problems


@dataclass
class OrderDetails:
    customer_name: str = ""
    phone_number: str = ""
    delivery_address: str = ""
    quantity: int = 1
    notes: str = ""

    def problems(self) -> List[str]:
        found = []
        if not self.customer_name.strip():
            found.append("Name is required")
        if not self.phone_number.strip():
            found.append("Phone number is required")
        if not self.delivery_address.strip():
            found.append("Delivery address is required")
        if self.quantity < 1:
            found.append("Quantity must be at least 1")
        return found


@dataclass(frozen=True)
class Handoff:
    url: str
    message: str


def order_total(price: float, quantity: int) -> float:
    return (price or 0) * quantity


def build_order_payload(product: dict, details: OrderDetails) -> dict:
    return {
        "productId": product["id"],
        "productName": product.get("name"),
        "productPrice": product.get("price"),
        "customerName": details.customer_name,
        "phoneNumber": details.phone_number,
        "deliveryAddress": details.delivery_address,
        "quantity": details.quantity,
        "notes": details.notes,
        "totalPrice": order_total(product.get("price"), details.quantity),
    }


def _money(amount) -> str:
    return f"{amount:g}" if isinstance(amount, (int, float)) else str(amount)


def format_order_message(product: dict, details: OrderDetails) -> str:
    price = product.get("price") or 0
    lines = [
        "New Order from Doodle Alley!",
        "",
        f"Product: {product.get('name')}",
        f"Price: ${_money(price)} x {details.quantity} = ${_money(order_total(price, details.quantity))}",
        "",
        f"Customer: {details.customer_name}",
        f"Phone: {details.phone_number}",
        f"Address: {details.delivery_address}",
    ]
    if details.notes:
        lines.append(f"Notes: {details.notes}")
    lines += ["", "Thank you!"]
    return "\n".join(lines)


def instagram_dm_link(username: str) -> str:
    return f"https://ig.me/m/{username}"


OpenHandoff = Callable[[Handoff], Union[None, Awaitable[None]]]


class OrderSubmission:

    def __init__(
        self,
        api,
        product_id: str,
        open_handoff: Optional[OpenHandoff] = None,
        instagram_username: Optional[str] = None,
    ):
        self.api = api
        self.product_id = product_id
        self.open_handoff = open_handoff
        self.instagram_username = instagram_username or os.getenv(
            "INSTAGRAM_USERNAME", DEFAULT_INSTAGRAM_USERNAME
        )
        self.product: Optional[dict] = None
        self.loading = True
        self.submitting = False

    @property
    def not_found(self) -> bool:
        return not self.loading and self.product is None

    async def load(self) -> Optional[dict]:
        self.loading = True
        try:
            self.product = await self.api.get_product(self.product_id)
        except (ApiError, httpx.HTTPError) as e:
            logger.info("order_form_product_unavailable", product_id=self.product_id, error=str(e))
            self.product = None
        finally:
            self.loading = False
        return self.product

    def total(self, quantity: int) -> float:
        if self.product is None:
            return 0
        return order_total(self.product.get("price"), quantity)

    async def submit(self, details: OrderDetails) -> Handoff:
        if self.product is None:
            raise OrderFormError(["Product not found"])
        problems = details.problems()
        if problems:
            raise OrderFormError(problems)

        self.submitting = True
        try:
            payload = build_order_payload(self.product, details)
            try:
                await self.api.create_order(payload)
            except ApiError as e:
                logger.warning("order_not_confirmed", product_id=self.product_id, status=e.status_code)

            handoff = Handoff(
                url=instagram_dm_link(self.instagram_username),
                message=format_order_message(self.product, details),
            )
            if self.open_handoff is not None:
                result = self.open_handoff(handoff)
                if inspect.isawaitable(result):
                    await result
            return handoff
        finally:
            self.submitting = False
