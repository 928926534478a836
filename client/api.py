"""
Async HTTP client for the storefront API, shared by every client view.

Every request carries the application key. When an ``AuthContext`` with a
live admin session is attached, the session token rides along as well.
"""
import os
from typing import Any, List, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class DoodleAlleyClient:

    def __init__(
        self,
        base_url: str,
        app_key: str,
        auth=None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.auth = auth
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {app_key}"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_env(cls, auth=None) -> "DoodleAlleyClient":
        return cls(
            base_url=os.getenv("DOODLE_ALLEY_API_URL", "http://localhost:8000"),
            app_key=os.getenv("PUBLIC_ANON_KEY", ""),
            auth=auth,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _session_headers(self) -> dict:
        session = self.auth.session if self.auth is not None else None
        return {"X-Admin-Session": session.token} if session else {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._http.request(method, path, headers=self._session_headers(), **kwargs)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.is_error:
            message = ""
            if isinstance(body, dict):
                message = body.get("error") or body.get("message") or ""
            logger.warning("api_error", method=method, path=path, status=resp.status_code, message=message)
            raise ApiError(resp.status_code, message or resp.reason_phrase)
        return body

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def admin_login(self, username: str, password: str) -> dict:
        return await self._request("POST", "/admin/login", json={"username": username, "password": password})

    async def list_products(self, active_only: bool = False) -> List[dict]:
        params = {"active": "true"} if active_only else None
        data = await self._request("GET", "/products", params=params)
        return data.get("products") or []

    async def get_product(self, product_id: str) -> dict:
        data = await self._request("GET", f"/products/{product_id}")
        return data["product"]

    async def create_product(self, fields: dict) -> dict:
        data = await self._request("POST", "/products", json=fields)
        return data["product"]

    async def update_product(self, product_id: str, fields: dict) -> dict:
        data = await self._request("PUT", f"/products/{product_id}", json=fields)
        return data["product"]

    async def delete_product(self, product_id: str) -> None:
        await self._request("DELETE", f"/products/{product_id}")

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> str:
        data = await self._request(
            "POST", "/products/images", files={"file": (filename, content, content_type)}
        )
        return data["url"]

    async def create_order(self, payload: dict) -> dict:
        data = await self._request("POST", "/orders", json=payload)
        return data["order"]

    async def list_orders(self) -> List[dict]:
        data = await self._request("GET", "/orders")
        return data.get("orders") or []
