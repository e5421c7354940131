"""
Domain errors raised by the services.

Each error carries a machine-readable ``code`` that ends up in the
response envelope, so clients can branch on it without parsing the
human-readable message.
"""

from typing import Optional


class FoodOrderError(Exception):
    """Base class for business-rule failures."""

    code = "error"
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, "error": self.code}


# =============================================================================
# ACCOUNTS
# =============================================================================

class DuplicateEmail(FoodOrderError):
    code = "DuplicateEmail"
    default_message = "Email already exists"


class InvalidCredentials(FoodOrderError):
    code = "InvalidCredentials"
    default_message = "Invalid credentials"


class UserNotFound(FoodOrderError):
    code = "UserNotFound"
    default_message = "User not found"


# =============================================================================
# ORDERS
# =============================================================================

class OrderNotFound(FoodOrderError):
    code = "OrderNotFound"
    default_message = "Order not found"


class InvalidTransition(FoodOrderError):
    code = "InvalidTransition"
    default_message = "Invalid status transition"


class OrderNotDelivered(FoodOrderError):
    code = "OrderNotDelivered"
    default_message = "Feedback can only be given for delivered orders"


class FeedbackAlreadyExists(FoodOrderError):
    code = "FeedbackAlreadyExists"
    default_message = "Feedback already submitted for this order"


class EmptyOrder(FoodOrderError):
    code = "EmptyOrder"
    default_message = "Order must contain at least one item"


class TotalMismatch(FoodOrderError):
    code = "TotalMismatch"
    default_message = "Order total does not match its items"


class InvalidRating(FoodOrderError):
    code = "InvalidRating"
    default_message = "Rating must be between 1 and 5"


# =============================================================================
# STORE
# =============================================================================

class StoreUnavailable(FoodOrderError):
    """Connection-level failure talking to the record store."""
    code = "StoreUnavailable"
    default_message = "Record store is unavailable"
