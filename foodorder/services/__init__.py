"""
                        Services Module

Business logic, one class per component. Each service is constructed
with the request's database session.

Services:
    - accounts: registration and login
    - catalog: menu items and the default menu seed
    - orders: order lifecycle engine
    - excel_manager: file-locked Excel ledger of finished orders
"""

from foodorder.services.accounts import AccountService
from foodorder.services.catalog import CatalogService
from foodorder.services.orders import OrderService

__all__ = ["AccountService", "CatalogService", "OrderService"]
