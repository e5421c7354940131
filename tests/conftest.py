"""
Shared fixtures: a throwaway SQLite record store, the app bound to it,
and HTTP / API clients that talk to the app in-process.
"""

import httpx
import pytest

from foodorder.client import FoodOrderAPI
from foodorder.core.config import Settings
from foodorder.database import RecordStore
from foodorder.main import create_app
from foodorder.services import AccountService, CatalogService, OrderService
from foodorder.services.orders import LineItem


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'foodorder.db'}",
        seed_catalog=False,
        ledger_export_enabled=False,
        data_directory=str(tmp_path / "data"),
    )


@pytest.fixture
async def store(settings):
    store = RecordStore(settings.database_url)
    await store.init()
    yield store
    await store.dispose()


@pytest.fixture
async def db(store):
    async with store.session() as session:
        yield session


@pytest.fixture
def accounts(db) -> AccountService:
    return AccountService(db)


@pytest.fixture
def catalog(db) -> CatalogService:
    return CatalogService(db)


@pytest.fixture
def orders(db) -> OrderService:
    return OrderService(db)


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api(app):
    api = FoodOrderAPI("http://test", transport=httpx.ASGITransport(app=app))
    yield api
    await api.close()


@pytest.fixture
def sample_items() -> list[LineItem]:
    return [
        LineItem(name="Chicken Biryani", price=100, quantity=2, food_id="f1"),
        LineItem(name="Mango Shake", price=50, quantity=1, food_id="f2"),
    ]


@pytest.fixture
def place_order(orders, sample_items):
    """Create a pending order for a customer id."""
    async def _place(customer_id: str = "cust-1", items=None):
        return await orders.create_order(
            customer_id=customer_id,
            customer_name="Asha Rao",
            customer_phone="9876543210",
            customer_address="12 MG Road",
            items=items if items is not None else sample_items,
            payment_method="cash",
        )
    return _place
