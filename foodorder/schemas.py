"""
Pydantic Schemas for Request/Response Validation

Wire format follows the client contract: camelCase keys, identifiers
exposed as ``_id``, and every response wrapped in the
``{success, message, <payload>}`` envelope.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from foodorder.models import OrderStatus, UserRole


class CamelModel(BaseModel):
    """Base for all wire models: camelCase aliases, snake_case attributes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RegisterRequest(CamelModel):
    """Account registration."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Asha Rao"])
    email: str = Field(..., min_length=3, max_length=255, examples=["asha@example.com"])
    password: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30, examples=["9876543210"])
    address: Optional[str] = Field(None, examples=["12 MG Road, Bengaluru"])
    role: UserRole = Field(default=UserRole.CUSTOMER)
    restaurant_name: Optional[str] = Field(None, max_length=150)


class LoginRequest(CamelModel):
    """Credentials are matched as an exact (email, password, role) triple."""
    email: str
    password: str
    role: str = Field(default=UserRole.CUSTOMER.value, examples=["customer", "owner"])


class MenuItemCreate(CamelModel):
    """Menu item fields, stored as submitted."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=150, examples=["Margherita Pizza"])
    category: Optional[str] = Field(None, max_length=100, examples=["Pizza"])
    price: Optional[float] = Field(None, examples=[299])
    rating: Optional[float] = Field(None, examples=[4.5])
    image: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None


class OrderItemIn(CamelModel):
    """Line item as priced in the customer's cart."""
    food_id: Optional[str] = Field(None, examples=["5f0c..."])
    name: str = Field(..., min_length=1, max_length=150)
    price: float = Field(..., ge=0, examples=[299])
    quantity: int = Field(..., ge=1, examples=[2])


class OrderCreate(CamelModel):
    """Order placement: customer snapshot, items, payment tag."""
    customer_id: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[OrderItemIn] = Field(default_factory=list)
    payment_method: Optional[str] = Field(default="cash", examples=["cash", "card", "upi"])
    total_amount: Optional[float] = Field(None, examples=[598])


class StatusUpdateRequest(CamelModel):
    order_id: str
    status: str = Field(..., examples=["accepted"])


class FeedbackRequest(CamelModel):
    order_id: str
    rating: int = Field(..., examples=[5])
    comment: Optional[str] = Field(default="", max_length=1000)


# =============================================================================
# RECORD SCHEMAS
# =============================================================================

class UserPublic(CamelModel):
    """Profile returned to clients; never includes the password."""
    id: str = Field(..., alias="_id")
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    restaurant_name: Optional[str] = None
    created_at: Optional[datetime] = None


class MenuItemResponse(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    category: Optional[str] = None
    price: Optional[float] = None
    rating: Optional[float] = None
    image: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderItemOut(CamelModel):
    food_id: Optional[str] = None
    name: str
    price: float
    quantity: int


class FeedbackOut(CamelModel):
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderResponse(CamelModel):
    id: str = Field(..., alias="_id")
    customer_id: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[OrderItemOut]
    total_amount: float
    status: OrderStatus
    payment_method: Optional[str] = None
    feedback: Optional[FeedbackOut] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# =============================================================================
# ENVELOPES
# =============================================================================

class Envelope(BaseModel):
    """Uniform response wrapper."""
    success: bool = True
    message: Optional[str] = None
    error: Optional[str] = None


class AuthResponse(Envelope):
    user: Optional[UserPublic] = None


class ItemListResponse(Envelope):
    items: List[MenuItemResponse] = Field(default_factory=list)


class CategoryListResponse(Envelope):
    categories: List[str] = Field(default_factory=list)


class FoodResponse(Envelope):
    food: Optional[MenuItemResponse] = None


class OrderEnvelope(Envelope):
    order: Optional[OrderResponse] = None


class OrderListEnvelope(Envelope):
    orders: List[OrderResponse] = Field(default_factory=list)


class LedgerResponse(Envelope):
    rows: List[dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    redis: str
    timestamp: datetime
