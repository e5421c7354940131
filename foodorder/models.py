"""
SQLAlchemy Database Models

Three independent record collections:
- users: customers and restaurant owners
- menu_items: the catalog
- orders: customer snapshot, line items and feedback embedded as JSON

Each table has an integer ``seq`` primary key (insertion order) and a
public string ``id`` that is what clients see.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Enum, JSON

from foodorder.database import Base


def new_id() -> str:
    """Opaque public identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls):
    # store "out-for-delivery", not "OUT_FOR_DELIVERY"
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    """Account role."""
    CUSTOMER = "customer"
    OWNER = "owner"


class OrderStatus(str, enum.Enum):
    """Order fulfillment pipeline."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class User(Base):
    """
    Registered account.

    The password is stored as submitted; restaurant_name is only set for owners.
    """
    __tablename__ = "users"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False, default=new_id)

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    address = Column(Text, nullable=True)
    role = Column(
        Enum(UserRole, values_callable=_enum_values, native_enum=False, length=20),
        default=UserRole.CUSTOMER,
        nullable=False,
        index=True,
    )
    restaurant_name = Column(String(150), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.email} - {self.role.value}>"


class MenuItem(Base):
    """A purchasable catalog entry. Rating is owner-entered."""
    __tablename__ = "menu_items"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False, default=new_id)

    name = Column(String(150), nullable=False)
    category = Column(String(100), nullable=True, index=True)
    price = Column(Float, nullable=True)
    rating = Column(Float, nullable=True)
    image = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<MenuItem {self.name} - {self.price}>"


class Order(Base):
    """
    Customer order.

    ``items`` is a list of {"foodId", "name", "price", "quantity"} captured at
    order time. ``feedback`` is {"rating", "comment", "createdAt"} or NULL.
    """
    __tablename__ = "orders"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False, default=new_id)

    # =========================================================================
    # CUSTOMER SNAPSHOT
    # =========================================================================
    customer_id = Column(String(32), nullable=False, index=True)
    customer_name = Column(String(100), nullable=True)
    customer_phone = Column(String(30), nullable=True)
    customer_address = Column(Text, nullable=True)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items = Column(JSON, nullable=False, default=list)
    total_amount = Column(Float, nullable=False)
    payment_method = Column(String(50), nullable=True)  # cash, card, upi

    # =========================================================================
    # ORDER STATUS
    # =========================================================================
    status = Column(
        Enum(OrderStatus, values_callable=_enum_values, native_enum=False, length=20),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )
    feedback = Column(JSON(none_as_null=True), nullable=True)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    def __repr__(self):
        return f"<Order #{self.id} - {self.customer_name} - {self.status.value}>"
