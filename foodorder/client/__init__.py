"""
Python client for the Food Ordering API.

    - FoodOrderAPI: async HTTP wrapper (httpx)
    - ClientSession: locally cached profile
    - Cart: local cart state
    - CustomerView / OwnerView: role-specific flows
"""

from foodorder.client.api import APIError, FoodOrderAPI
from foodorder.client.cart import Cart
from foodorder.client.session import ClientSession
from foodorder.client.views import CustomerView, NotLoggedIn, OwnerView, format_order, tracking_steps

__all__ = [
    "APIError",
    "FoodOrderAPI",
    "Cart",
    "ClientSession",
    "CustomerView",
    "OwnerView",
    "NotLoggedIn",
    "format_order",
    "tracking_steps",
]
