from typing import Any, List

from pydantic import BaseModel

from shared.schemas import CamelModel

# Assigned by the server; ignored when a client sends them
RESERVED_FIELDS = ("id", "createdAt", "updatedAt")


class ProductFields(CamelModel):
    """Product fields as the admin editor sends them, kept verbatim."""

    name: Any = None
    price: Any = None
    description: Any = None
    category: Any = None
    images: Any = None
    is_active: Any = None


class ProductCreate(ProductFields):
    pass


class ProductUpdate(ProductFields):
    """Only the fields present in the body are merged onto the stored record."""


class Product(ProductFields):
    id: str
    created_at: str
    updated_at: str


class ProductResponse(BaseModel):
    product: Product


class ProductListResponse(BaseModel):
    products: List[Product]


class DeleteResponse(BaseModel):
    success: bool


class ImageUploadResponse(BaseModel):
    url: str
    path: str
