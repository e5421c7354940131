"""
Order Lifecycle Engine

Creates orders, moves them through the fulfillment pipeline and attaches
customer feedback.

Pipeline:
    pending -> accepted -> preparing -> out-for-delivery -> delivered
    pending -> cancelled

``delivered`` and ``cancelled`` are terminal. Feedback can be attached once,
and only to a delivered order.

Status and feedback writes are conditional UPDATEs (compare-and-set on the
current status, or on feedback being NULL) so concurrent requests cannot both
apply a change from the same starting state.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from foodorder.exceptions import (
    EmptyOrder,
    FeedbackAlreadyExists,
    InvalidRating,
    InvalidTransition,
    OrderNotDelivered,
    OrderNotFound,
    TotalMismatch,
)
from foodorder.models import Order, OrderStatus

logger = logging.getLogger(__name__)


# =============================================================================
# TRANSITION TABLE
# =============================================================================

# from-status -> {to-status: owner action}
TRANSITIONS: dict[OrderStatus, dict[OrderStatus, str]] = {
    OrderStatus.PENDING: {
        OrderStatus.ACCEPTED: "accept",
        OrderStatus.CANCELLED: "reject",
    },
    OrderStatus.ACCEPTED: {OrderStatus.PREPARING: "start preparing"},
    OrderStatus.PREPARING: {OrderStatus.OUT_FOR_DELIVERY: "dispatch"},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED: "deliver"},
    OrderStatus.DELIVERED: {},
    OrderStatus.CANCELLED: {},
}

# Happy-path steps shown as order tracking
TRACKING_STEPS = (
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

MIN_RATING = 1
MAX_RATING = 5


def next_statuses(status: OrderStatus) -> dict[OrderStatus, str]:
    """Outgoing edges of ``status`` mapped to their action names."""
    return dict(TRANSITIONS[OrderStatus(status)])


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return OrderStatus(new) in TRANSITIONS[OrderStatus(current)]


def parse_status(value: str) -> OrderStatus:
    """
    Convert a client-supplied status string.

    Accepts "out-for-delivery" as well as "out_for_delivery" and any casing.

    Raises:
        InvalidTransition: the value names no known status
    """
    if isinstance(value, OrderStatus):
        return value
    normalized = str(value).strip().lower().replace("_", "-")
    try:
        return OrderStatus(normalized)
    except ValueError:
        raise InvalidTransition(f"Unknown order status: {value!r}")


# =============================================================================
# LINE ITEMS
# =============================================================================

@dataclass
class LineItem:
    """One ordered item, priced at order time."""
    name: str
    price: float
    quantity: int
    food_id: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "foodId": self.food_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
        }


def calculate_total(items: Sequence[LineItem]) -> float:
    """Sum of price x quantity, rounded to cents."""
    return round(sum(item.line_total for item in items), 2)


# =============================================================================
# ENGINE
# =============================================================================

class OrderService:
    """
    Order operations bound to one database session.

    Attributes:
        enforce_transitions: reject status updates that are not table edges
        validate_totals: recompute totals and reject client mismatches
        tolerance: accepted difference between submitted and computed totals
    """

    def __init__(
        self,
        db: AsyncSession,
        enforce_transitions: bool = True,
        validate_totals: bool = True,
        tolerance: float = 0.01,
    ):
        self.db = db
        self.enforce_transitions = enforce_transitions
        self.validate_totals = validate_totals
        self.tolerance = tolerance

    # -------------------------------------------------------------------------
    # Creation & queries
    # -------------------------------------------------------------------------

    async def create_order(
        self,
        customer_id: str,
        customer_name: Optional[str],
        customer_phone: Optional[str],
        customer_address: Optional[str],
        items: Sequence[LineItem],
        payment_method: Optional[str] = None,
        total_amount: Optional[float] = None,
    ) -> Order:
        """
        Place a new order in ``pending``.

        Raises:
            EmptyOrder: no line items
            TotalMismatch: submitted total differs from the computed one
        """
        if not items:
            raise EmptyOrder()

        computed = calculate_total(items)
        if total_amount is None:
            total_amount = computed
        elif self.validate_totals:
            if abs(total_amount - computed) > self.tolerance:
                logger.warning(
                    f"Total mismatch for customer {customer_id}: "
                    f"submitted={total_amount} computed={computed}"
                )
                raise TotalMismatch(
                    f"Order total {total_amount} does not match items total {computed}"
                )
            total_amount = computed

        order = Order(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_address=customer_address,
            items=[item.to_dict() for item in items],
            total_amount=total_amount,
            payment_method=payment_method,
            status=OrderStatus.PENDING,
        )
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(
            f"Order #{order.id} placed by {customer_id}: "
            f"{len(items)} item(s), total {order.total_amount}"
        )
        return order

    async def get_order(self, order_id: str) -> Order:
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        return order

    async def list_orders_for_customer(self, customer_id: str) -> list[Order]:
        """Newest first."""
        result = await self.db.execute(
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.seq.desc())
        )
        return list(result.scalars().all())

    async def list_all_orders(self, status: Optional[OrderStatus] = None) -> list[Order]:
        """Newest first, optionally filtered by status."""
        query = select(Order).order_by(Order.created_at.desc(), Order.seq.desc())
        if status is not None:
            query = query.where(Order.status == status)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # State changes
    # -------------------------------------------------------------------------

    async def update_status(self, order_id: str, new_status: str) -> Order:
        """
        Move an order to ``new_status``.

        Raises:
            OrderNotFound: no such order
            InvalidTransition: unknown status, or not an edge from the current one
        """
        target = parse_status(new_status)
        order = await self.get_order(order_id)
        current = order.status

        if self.enforce_transitions and not can_transition(current, target):
            raise InvalidTransition(
                f"Cannot move order from {current.value} to {target.value}"
            )

        result = await self.db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == current)
            .values(status=target)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        if result.rowcount == 0:
            # someone else changed the status between our read and write
            raise InvalidTransition(
                f"Order {order_id} is no longer {current.value}"
            )

        await self.db.refresh(order)
        logger.info(f"Order #{order_id}: {current.value} -> {target.value}")
        return order

    async def submit_feedback(
        self,
        order_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Order:
        """
        Attach the customer's rating to a delivered order, once.

        Raises:
            InvalidRating: rating outside 1-5
            OrderNotFound: no such order
            OrderNotDelivered: order is not delivered yet
            FeedbackAlreadyExists: order already rated
        """
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidRating()

        order = await self.get_order(order_id)
        if order.status != OrderStatus.DELIVERED:
            raise OrderNotDelivered()
        if order.feedback is not None:
            raise FeedbackAlreadyExists()

        feedback = {
            "rating": int(rating),
            "comment": comment or "",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        result = await self.db.execute(
            update(Order)
            .where(
                Order.id == order_id,
                Order.status == OrderStatus.DELIVERED,
                Order.feedback.is_(None),
            )
            .values(feedback=feedback)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        if result.rowcount == 0:
            raise FeedbackAlreadyExists()

        await self.db.refresh(order)
        logger.info(f"Feedback {rating}/5 recorded for order #{order_id}")
        return order

    # -------------------------------------------------------------------------
    # Owner dashboard
    # -------------------------------------------------------------------------

    async def dashboard_summary(self, recent: int = 10) -> dict[str, Any]:
        """Counts per status, delivered revenue, average rating, recent orders."""
        rows = await self.db.execute(
            select(Order.status, func.count(Order.seq)).group_by(Order.status)
        )
        by_status = {status.value: 0 for status in OrderStatus}
        for status, count in rows:
            by_status[OrderStatus(status).value] = count

        revenue = await self.db.scalar(
            select(func.sum(Order.total_amount)).where(Order.status == OrderStatus.DELIVERED)
        )

        # feedback is JSON, so the average is taken in Python
        rated = await self.db.execute(
            select(Order.feedback).where(
                Order.status == OrderStatus.DELIVERED,
                Order.feedback.is_not(None),
            )
        )
        ratings = [fb["rating"] for (fb,) in rated if fb and "rating" in fb]

        recent_result = await self.db.execute(
            select(Order).order_by(Order.created_at.desc(), Order.seq.desc()).limit(recent)
        )

        return {
            "total_orders": sum(by_status.values()),
            "orders_by_status": by_status,
            "active_orders": sum(
                count for status, count in by_status.items()
                if not OrderStatus(status).is_terminal
            ),
            "delivered_revenue": round(revenue or 0.0, 2),
            "average_rating": round(sum(ratings) / len(ratings), 2) if ratings else None,
            "rated_orders": len(ratings),
            "recent_orders": list(recent_result.scalars().all()),
        }
