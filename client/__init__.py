from .api import ApiError, DoodleAlleyClient
from .catalog import ALL_CATEGORIES, CatalogState, category_facets, filter_products
from .order_form import Handoff, OrderDetails, OrderFormError, OrderSubmission
from .session import AdminSession, AuthContext
from .views import InvalidTransition, Navigator

__all__ = [
    "ApiError",
    "DoodleAlleyClient",
    "ALL_CATEGORIES",
    "CatalogState",
    "category_facets",
    "filter_products",
    "Handoff",
    "OrderDetails",
    "OrderFormError",
    "OrderSubmission",
    "AdminSession",
    "AuthContext",
    "InvalidTransition",
    "Navigator",
]
