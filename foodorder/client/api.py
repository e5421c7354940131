"""
HTTP client for the Food Ordering API.

One coroutine per endpoint. Each call unwraps the response envelope and
raises ``APIError`` when the server reports ``success: false``.

Usage:
    async with FoodOrderAPI("http://localhost:5000") as api:
        items = await api.list_items()
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class APIError(Exception):
    """The server answered with success=false."""

    def __init__(self, message: str, code: Optional[str] = None, status_code: int = 200):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class FoodOrderAPI:
    """
    Thin async wrapper over the REST endpoints.

    Args:
        base_url: Server root, e.g. "http://localhost:5000"
        transport: Optional httpx transport (tests pass an ASGITransport)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "FoodOrderAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        response = await self._client.request(method, f"/api{path}", **kwargs)

        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise APIError(f"Unexpected response from {path}", status_code=response.status_code)

        if not data.get("success", False):
            logger.debug(f"{method} {path} failed: {data}")
            raise APIError(
                data.get("message") or f"Request to {path} failed",
                code=data.get("error"),
                status_code=response.status_code,
            )
        return data

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        role: str = "customer",
        restaurant_name: Optional[str] = None,
    ) -> dict[str, Any]:
        body = {
            "name": name,
            "email": email,
            "password": password,
            "phone": phone,
            "address": address,
            "role": role,
        }
        if restaurant_name is not None:
            body["restaurantName"] = restaurant_name
        data = await self._request("POST", "/auth/register", json=body)
        return data["user"]

    async def login(self, email: str, password: str, role: str = "customer") -> dict[str, Any]:
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password, "role": role}
        )
        return data["user"]

    async def get_user(self, user_id: str) -> dict[str, Any]:
        data = await self._request("GET", f"/auth/users/{user_id}")
        return data["user"]

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def list_items(self, category: Optional[str] = None) -> list[dict[str, Any]]:
        params = {"category": category} if category else None
        data = await self._request("GET", "/food/items", params=params)
        return data["items"]

    async def list_categories(self) -> list[str]:
        data = await self._request("GET", "/food/categories")
        return data["categories"]

    async def add_item(self, **fields) -> dict[str, Any]:
        data = await self._request("POST", "/food/add", json=fields)
        return data["food"]

    async def delete_item(self, item_id: str) -> None:
        await self._request("DELETE", f"/food/delete/{item_id}")

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    async def create_order(self, order: dict[str, Any]) -> dict[str, Any]:
        data = await self._request("POST", "/orders/create", json=order)
        return data["order"]

    async def list_customer_orders(self, customer_id: str) -> list[dict[str, Any]]:
        data = await self._request("GET", f"/orders/customer/{customer_id}")
        return data["orders"]

    async def list_all_orders(self, status: Optional[str] = None) -> list[dict[str, Any]]:
        params = {"status": status} if status else None
        data = await self._request("GET", "/orders/all", params=params)
        return data["orders"]

    async def get_order(self, order_id: str) -> dict[str, Any]:
        data = await self._request("GET", f"/orders/{order_id}")
        return data["order"]

    async def update_status(self, order_id: str, status: str) -> dict[str, Any]:
        data = await self._request(
            "PUT", "/orders/update-status", json={"orderId": order_id, "status": status}
        )
        return data["order"]

    async def submit_feedback(self, order_id: str, rating: int, comment: str = "") -> dict[str, Any]:
        data = await self._request(
            "PUT",
            "/orders/feedback",
            json={"orderId": order_id, "rating": rating, "comment": comment},
        )
        return data["order"]
