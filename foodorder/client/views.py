"""
Customer and owner views.

Each view drives the API for one role and keeps the state a UI would hold
(the session, the cart, the selected category).
"""

import logging
from typing import Any, Optional

from foodorder.client.api import FoodOrderAPI
from foodorder.client.cart import Cart
from foodorder.client.session import ClientSession
from foodorder.models import OrderStatus
from foodorder.services.orders import TRACKING_STEPS, next_statuses

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class NotLoggedIn(Exception):
    """The view needs a cached profile and there is none."""


class _BaseView:
    role = "customer"

    def __init__(self, api: FoodOrderAPI, session: ClientSession):
        self.api = api
        self.session = session

    @property
    def user(self) -> dict[str, Any]:
        if not self.session.is_authenticated:
            raise NotLoggedIn("Please log in first")
        return self.session.user

    async def login(self, email: str, password: str) -> dict[str, Any]:
        user = await self.api.login(email, password, role=self.role)
        self.session.login(user)
        return user

    async def register(self, **fields) -> dict[str, Any]:
        user = await self.api.register(role=self.role, **fields)
        self.session.login(user)
        return user

    def logout(self) -> None:
        self.session.logout()

    async def menu(self) -> list[dict[str, Any]]:
        return await self.api.list_items()


class CustomerView(_BaseView):
    """Browse, cart, checkout, track and rate."""

    role = "customer"

    def __init__(self, api: FoodOrderAPI, session: ClientSession):
        super().__init__(api, session)
        self.cart = Cart()
        self.selected_category = ALL_CATEGORIES

    async def categories(self) -> list[str]:
        return [ALL_CATEGORIES] + await self.api.list_categories()

    async def menu(self, category: Optional[str] = None) -> list[dict[str, Any]]:
        """Menu items for the selected category ("All" shows everything)."""
        if category is not None:
            self.selected_category = category
        if self.selected_category == ALL_CATEGORIES:
            return await self.api.list_items()
        return await self.api.list_items(category=self.selected_category)

    async def place_order(self, payment_method: str = "cash") -> dict[str, Any]:
        """Submit the cart; it is emptied only when the server accepts the order."""
        if self.cart.is_empty:
            raise ValueError("Your cart is empty")

        user = self.user
        order = await self.api.create_order({
            "customerId": user["_id"],
            "customerName": user.get("name"),
            "customerPhone": user.get("phone"),
            "customerAddress": user.get("address"),
            "items": self.cart.to_order_items(),
            "totalAmount": self.cart.total,
            "paymentMethod": payment_method,
        })
        self.cart.clear()
        logger.info(f"Order {order['_id']} placed, total {order['totalAmount']}")
        return order

    async def my_orders(self) -> list[dict[str, Any]]:
        return await self.api.list_customer_orders(self.user["_id"])

    async def rate(self, order_id: str, rating: int, comment: str = "") -> dict[str, Any]:
        return await self.api.submit_feedback(order_id, rating, comment)

    @staticmethod
    def can_rate(order: dict[str, Any]) -> bool:
        return order["status"] == OrderStatus.DELIVERED.value and not order.get("feedback")


class OwnerView(_BaseView):
    """Order queue and menu management."""

    role = "owner"

    async def orders(self, status: Optional[str] = None) -> list[dict[str, Any]]:
        return await self.api.list_all_orders(status=status)

    @staticmethod
    def actions(order: dict[str, Any]) -> dict[str, str]:
        """Action label -> target status for the order's current state."""
        return {
            action: status.value
            for status, action in next_statuses(OrderStatus(order["status"])).items()
        }

    async def advance(self, order_id: str, action: str) -> dict[str, Any]:
        """Apply a named action ("accept", "dispatch", ...) to an order."""
        order = await self.api.get_order(order_id)
        actions = self.actions(order)
        if action not in actions:
            raise ValueError(
                f"'{action}' is not available for a {order['status']} order; "
                f"choose from {sorted(actions)}"
            )
        return await self.api.update_status(order_id, actions[action])

    async def add_item(self, **fields) -> dict[str, Any]:
        return await self.api.add_item(**fields)

    async def delete_item(self, item_id: str) -> None:
        await self.api.delete_item(item_id)


# =============================================================================
# RENDERING
# =============================================================================

def tracking_steps(order: dict[str, Any]) -> list[tuple[str, bool]]:
    """
    Progress markers for an order: (step, reached).

    Pending and cancelled orders have no tracking.
    """
    status = OrderStatus(order["status"])
    if status in (OrderStatus.PENDING, OrderStatus.CANCELLED):
        return []
    reached = TRACKING_STEPS.index(status)
    return [(step.value, i <= reached) for i, step in enumerate(TRACKING_STEPS)]


def format_order(order: dict[str, Any], currency: str = "₹") -> str:
    """Plain-text rendering of an order."""
    lines = [
        f"Order #{order['_id'][-6:]}  [{order['status']}]",
        f"  {order.get('customerName') or ''}  {order.get('customerPhone') or ''}",
    ]
    for item in order["items"]:
        lines.append(f"  {item['name']} x {item['quantity']}  {currency}{item['price'] * item['quantity']:g}")
    lines.append(f"  Total: {currency}{order['totalAmount']:g}  ({order.get('paymentMethod') or 'n/a'})")

    steps = tracking_steps(order)
    if steps:
        lines.append("  " + " > ".join(step if done else f"({step})" for step, done in steps))

    feedback = order.get("feedback")
    if feedback:
        lines.append(f"  Rated {feedback['rating']}/5: {feedback.get('comment') or ''}")
    return "\n".join(lines)
