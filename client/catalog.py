from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import httpx
import structlog

from .api import ApiError

logger = structlog.get_logger(__name__)

ALL_CATEGORIES = "all"


def is_active(product: dict) -> bool:
    return product.get("isActive") is True


def category_facets(products: Iterable[dict]) -> List[str]:
    """Distinct non-empty categories among active products, sorted for display."""
    return sorted({p["category"] for p in products if is_active(p) and p.get("category")})


def filter_products(products: Iterable[dict], query: str = "", category: str = ALL_CATEGORIES) -> List[dict]:
    visible = [p for p in products if is_active(p)]

    if category and category != ALL_CATEGORIES:
        visible = [p for p in visible if p.get("category") == category]

    if query:
        needle = query.lower()
        visible = [
            p for p in visible
            if needle in (p.get("name") or "").lower()
            or needle in (p.get("description") or "").lower()
        ]

    return visible


@dataclass
class CatalogState:
    products: List[dict] = field(default_factory=list)
    query: str = ""
    category: str = ALL_CATEGORIES
    loading: bool = False
    error: Optional[str] = None

    @property
    def facets(self) -> List[str]:
        return category_facets(self.products)

    @property
    def visible(self) -> List[dict]:
        return filter_products(self.products, self.query, self.category)

    def search(self, query: str) -> List[dict]:
        self.query = query
        return self.visible

    def select_category(self, category: str) -> List[dict]:
        self.category = category or ALL_CATEGORIES
        return self.visible

    async def load(self, api) -> None:
        self.loading = True
        try:
            products = await api.list_products(active_only=True)
            self.products = [p for p in products if is_active(p)]
            self.error = None
        except (ApiError, httpx.HTTPError) as e:
            logger.error("catalog_load_failed", error=str(e))
            self.error = "Failed to load products"
        finally:
            self.loading = False
