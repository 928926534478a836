import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import structlog

logger = structlog.get_logger(__name__)

CSV_COLUMNS = [
    "Order ID",
    "Product Name",
    "Product Price",
    "Quantity",
    "Total Price",
    "Customer Name",
    "Phone Number",
    "Delivery Address",
    "Notes",
    "Order Date",
]


class ProductFormError(Exception):
    pass


class NoOrdersToExport(Exception):
    pass


@dataclass
class ProductForm:
    name: str = ""
    price: str = ""
    description: str = ""
    category: str = ""
    image_urls: str = ""  # one URL per line
    is_active: bool = True

    @classmethod
    def from_product(cls, product: dict) -> "ProductForm":
        return cls(
            name=product.get("name") or "",
            price=str(product.get("price", "")),
            description=product.get("description") or "",
            category=product.get("category") or "",
            image_urls="\n".join(product.get("images") or []),
            is_active=bool(product.get("isActive", True)),
        )

    @property
    def images(self) -> List[str]:
        return [url.strip() for url in self.image_urls.split("\n") if url.strip()]

    def add_image(self, url: str) -> None:
        self.image_urls = "\n".join(self.images + [url])

    def to_payload(self) -> dict:
        try:
            price = float(self.price)
        except ValueError:
            raise ProductFormError(f"Invalid price: {self.price!r}")
        if price < 0:
            raise ProductFormError("Price cannot be negative")
        return {
            "name": self.name,
            "price": price,
            "description": self.description,
            "category": self.category,
            "images": self.images,
            "isActive": self.is_active,
        }


class ProductEditor:
    """Admin product list with a create/edit form."""

    def __init__(self, api):
        self.api = api
        self.products: List[dict] = []
        self.editing: Optional[dict] = None
        self.form = ProductForm()

    async def refresh(self) -> List[dict]:
        self.products = await self.api.list_products()
        return self.products

    def open_create(self) -> ProductForm:
        self.editing = None
        self.form = ProductForm()
        return self.form

    def open_edit(self, product: dict) -> ProductForm:
        self.editing = product
        self.form = ProductForm.from_product(product)
        return self.form

    async def save(self) -> dict:
        payload = self.form.to_payload()
        if self.editing is None:
            saved = await self.api.create_product(payload)
            logger.info("admin_product_created", product_id=saved["id"])
        else:
            saved = await self.api.update_product(self.editing["id"], payload)
            logger.info("admin_product_updated", product_id=saved["id"])
        self.editing = None
        await self.refresh()
        return saved

    async def delete(self, product_id: str) -> None:
        await self.api.delete_product(product_id)
        await self.refresh()

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> str:
        url = await self.api.upload_image(filename, content, content_type)
        self.form.add_image(url)
        return url


def _order_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError):
        return value or ""


class OrdersViewer:

    def __init__(self, api):
        self.api = api
        self.orders: List[dict] = []

    async def refresh(self) -> List[dict]:
        orders = await self.api.list_orders()
        self.orders = sorted(orders, key=lambda o: o.get("createdAt") or "", reverse=True)
        return self.orders

    def export_csv(self) -> str:
        if not self.orders:
            raise NoOrdersToExport("No orders to export")

        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(CSV_COLUMNS)
        for order in self.orders:
            writer.writerow([
                order.get("id"),
                order.get("productName"),
                order.get("productPrice"),
                order.get("quantity"),
                order.get("totalPrice"),
                order.get("customerName"),
                order.get("phoneNumber"),
                order.get("deliveryAddress"),
                order.get("notes") or "",
                _order_date(order.get("createdAt")),
            ])
        return buf.getvalue()

    @staticmethod
    def export_filename(now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"doodle-alley-orders-{int(now.timestamp() * 1000)}.csv"
