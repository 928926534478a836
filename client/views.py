"""
Screens of the storefront and the moves between them.

    catalog -> product-detail -> order-form
    catalog -> order-form
    catalog -> admin-login -> admin-dashboard
    product-detail / order-form / admin-login -> catalog (back)
    admin-dashboard -> catalog (logout)

Each screen is a frozen dataclass; transitions are plain functions that take
the current screen and return the next one, or raise ``InvalidTransition``.
"""
from dataclasses import dataclass
from typing import Optional, Union

from .session import AdminSession, AuthContext


class InvalidTransition(Exception):
    pass


@dataclass(frozen=True)
class CatalogView:
    pass


@dataclass(frozen=True)
class ProductDetailView:
    product_id: str


@dataclass(frozen=True)
class OrderFormView:
    product_id: str


@dataclass(frozen=True)
class AdminLoginView:
    pass


@dataclass(frozen=True)
class AdminDashboardView:
    session: AdminSession

    def __post_init__(self):
        if not self.session.is_active():
            raise InvalidTransition("admin dashboard needs a live session")


View = Union[CatalogView, ProductDetailView, OrderFormView, AdminLoginView, AdminDashboardView]


def _expect(state: View, *allowed: type, action: str) -> None:
    if not isinstance(state, allowed):
        raise InvalidTransition(f"cannot {action} from {type(state).__name__}")


def view_product(state: View, product_id: str) -> ProductDetailView:
    _expect(state, CatalogView, action="view a product")
    return ProductDetailView(product_id)


def place_order(state: View, product_id: str) -> OrderFormView:
    _expect(state, CatalogView, ProductDetailView, action="place an order")
    return OrderFormView(product_id)


def open_admin_login(state: View) -> AdminLoginView:
    _expect(state, CatalogView, action="open admin login")
    return AdminLoginView()


def login_succeeded(state: View, session: AdminSession) -> AdminDashboardView:
    _expect(state, AdminLoginView, action="enter the dashboard")
    return AdminDashboardView(session)


def back_to_catalog(state: View) -> CatalogView:
    _expect(state, CatalogView, ProductDetailView, OrderFormView, AdminLoginView, action="go back")
    return CatalogView()


def logout(state: View, auth: Optional[AuthContext] = None) -> CatalogView:
    _expect(state, AdminDashboardView, action="log out")
    if auth is not None:
        auth.logout()
    return CatalogView()


class Navigator:
    """Current screen plus the auth context the admin screens depend on."""

    def __init__(self, auth: AuthContext, state: Optional[View] = None):
        self.auth = auth
        self.state: View = state or CatalogView()

    def view_product(self, product_id: str) -> View:
        self.state = view_product(self.state, product_id)
        return self.state

    def place_order(self, product_id: str) -> View:
        self.state = place_order(self.state, product_id)
        return self.state

    def open_admin_login(self) -> View:
        self.state = open_admin_login(self.state)
        return self.state

    async def login(self, api, username: str, password: str) -> View:
        _expect(self.state, AdminLoginView, action="log in")
        session = await self.auth.login(api, username, password)
        self.state = login_succeeded(self.state, session)
        return self.state

    def back_to_catalog(self) -> View:
        self.state = back_to_catalog(self.state)
        return self.state

    def logout(self) -> View:
        self.state = logout(self.state, self.auth)
        return self.state
