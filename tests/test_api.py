"""HTTP endpoints: envelopes, error mapping and the full order flow."""

import pytest

import foodorder.main as main_module
from foodorder.services.excel_manager import ExcelManager

CUSTOMER = {
    "name": "Asha Rao",
    "email": "asha@example.com",
    "password": "secret",
    "phone": "9876543210",
    "address": "12 MG Road",
}
OWNER = {
    "name": "Ravi Kumar",
    "email": "ravi@example.com",
    "password": "kitchen",
    "role": "owner",
    "restaurantName": "Spice Route",
}


async def register(client, body):
    response = await client.post("/api/auth/register", json=body)
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True, data
    return data["user"]


async def add_pizza(client):
    response = await client.post(
        "/api/food/add",
        json={"name": "Pizza", "category": "Pizza", "price": 300, "rating": 4.5},
    )
    return response.json()["food"]


async def place_order(client, customer, food, quantity=1):
    response = await client.post("/api/orders/create", json={
        "customerId": customer["_id"],
        "customerName": customer["name"],
        "customerPhone": customer["phone"],
        "customerAddress": customer["address"],
        "items": [{"foodId": food["_id"], "name": food["name"], "price": food["price"], "quantity": quantity}],
        "totalAmount": food["price"] * quantity,
        "paymentMethod": "upi",
    })
    return response.json()


async def set_status(client, order_id, status):
    response = await client.put(
        "/api/orders/update-status", json={"orderId": order_id, "status": status}
    )
    assert response.status_code == 200
    return response.json()


# =============================================================================
# ROOT & HEALTH
# =============================================================================

async def test_root(client):
    data = (await client.get("/")).json()
    assert data["dashboard"] == "/dashboard"
    assert data["environment"] == "development"


async def test_health_reports_database(client):
    data = (await client.get("/health")).json()
    assert data["database"] == "healthy"
    assert data["status"] == "operational"


# =============================================================================
# AUTH
# =============================================================================

async def test_register_returns_profile_without_password(client):
    user = await register(client, CUSTOMER)

    assert user["_id"]
    assert user["email"] == "asha@example.com"
    assert user["role"] == "customer"
    assert "password" not in user


async def test_register_duplicate_email(client):
    await register(client, CUSTOMER)

    response = await client.post("/api/auth/register", json={**CUSTOMER, "name": "Someone"})

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Email already exists",
        "error": "DuplicateEmail",
    }


async def test_owner_registration_and_login(client):
    owner = await register(client, OWNER)
    assert owner["restaurantName"] == "Spice Route"

    response = await client.post(
        "/api/auth/login",
        json={"email": "ravi@example.com", "password": "kitchen", "role": "owner"},
    )
    data = response.json()
    assert data["success"] is True
    assert data["user"]["_id"] == owner["_id"]


async def test_login_with_wrong_role_fails(client):
    await register(client, CUSTOMER)

    response = await client.post(
        "/api/auth/login",
        json={"email": "asha@example.com", "password": "secret", "role": "owner"},
    )

    data = response.json()
    assert data["success"] is False
    assert data["error"] == "InvalidCredentials"


async def test_get_user(client):
    user = await register(client, CUSTOMER)

    found = (await client.get(f"/api/auth/users/{user['_id']}")).json()
    missing = (await client.get("/api/auth/users/nope")).json()

    assert found["user"]["name"] == "Asha Rao"
    assert missing["error"] == "UserNotFound"


async def test_register_rejects_unknown_role(client):
    response = await client.post("/api/auth/register", json={**CUSTOMER, "role": "admin"})

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert response.json()["error"] == "ValidationError"


# =============================================================================
# CATALOG
# =============================================================================

async def test_catalog_add_list_delete(client):
    pizza = await add_pizza(client)
    await client.post("/api/food/add", json={"name": "Lassi", "category": "Drinks", "price": 60})

    listing = (await client.get("/api/food/items")).json()
    assert listing["success"] is True
    assert [i["name"] for i in listing["items"]] == ["Pizza", "Lassi"]

    categories = (await client.get("/api/food/categories")).json()
    assert categories["categories"] == ["Pizza", "Drinks"]

    drinks = (await client.get("/api/food/items", params={"category": "Drinks"})).json()
    assert [i["name"] for i in drinks["items"]] == ["Lassi"]

    deleted = (await client.delete(f"/api/food/delete/{pizza['_id']}")).json()
    assert deleted["success"] is True
    remaining = (await client.get("/api/food/items")).json()["items"]
    assert [i["name"] for i in remaining] == ["Lassi"]


async def test_delete_unknown_item_reports_success(client):
    response = await client.delete("/api/food/delete/unknown")
    assert response.json()["success"] is True


# =============================================================================
# ORDERS
# =============================================================================

async def test_full_order_lifecycle(client):
    await register(client, OWNER)
    customer = await register(client, CUSTOMER)
    pizza = await add_pizza(client)

    created = await place_order(client, customer, pizza)
    assert created["success"] is True
    order = created["order"]
    assert order["status"] == "pending"
    assert order["totalAmount"] == 300
    assert order["feedback"] is None

    for status in ["accepted", "preparing", "out-for-delivery", "delivered"]:
        data = await set_status(client, order["_id"], status)
        assert data["success"] is True
        assert data["order"]["status"] == status

    rated = await client.put(
        "/api/orders/feedback",
        json={"orderId": order["_id"], "rating": 5, "comment": "great"},
    )
    feedback = rated.json()["order"]["feedback"]
    assert feedback["rating"] == 5
    assert feedback["comment"] == "great"

    again = await client.put(
        "/api/orders/feedback",
        json={"orderId": order["_id"], "rating": 3, "comment": "meh"},
    )
    assert again.json()["success"] is False
    assert again.json()["error"] == "FeedbackAlreadyExists"

    history = (await client.get(f"/api/orders/customer/{customer['_id']}")).json()
    assert [o["_id"] for o in history["orders"]] == [order["_id"]]
    assert history["orders"][0]["feedback"]["rating"] == 5


async def test_order_lists_newest_first(client):
    customer = await register(client, CUSTOMER)
    pizza = await add_pizza(client)
    first = (await place_order(client, customer, pizza))["order"]
    second = (await place_order(client, customer, pizza, quantity=2))["order"]

    mine = (await client.get(f"/api/orders/customer/{customer['_id']}")).json()["orders"]
    everyone = (await client.get("/api/orders/all")).json()["orders"]

    assert [o["_id"] for o in mine] == [second["_id"], first["_id"]]
    assert [o["_id"] for o in everyone] == [second["_id"], first["_id"]]


async def test_list_all_orders_by_status(client):
    customer = await register(client, CUSTOMER)
    pizza = await add_pizza(client)
    accepted = (await place_order(client, customer, pizza))["order"]
    await place_order(client, customer, pizza)
    await set_status(client, accepted["_id"], "accepted")

    data = (await client.get("/api/orders/all", params={"status": "accepted"})).json()

    assert [o["_id"] for o in data["orders"]] == [accepted["_id"]]


async def test_get_order(client):
    customer = await register(client, CUSTOMER)
    order = (await place_order(client, customer, await add_pizza(client)))["order"]

    found = (await client.get(f"/api/orders/{order['_id']}")).json()
    missing = (await client.get("/api/orders/nope")).json()

    assert found["order"]["_id"] == order["_id"]
    assert missing["error"] == "OrderNotFound"


async def test_empty_order_is_rejected(client):
    response = await client.post("/api/orders/create", json={"customerId": "c1", "items": []})
    assert response.json()["error"] == "EmptyOrder"


async def test_mismatched_total_is_rejected(client):
    response = await client.post("/api/orders/create", json={
        "customerId": "c1",
        "items": [{"name": "Pizza", "price": 300, "quantity": 2}],
        "totalAmount": 300,
    })

    assert response.json()["error"] == "TotalMismatch"
    assert (await client.get("/api/orders/all")).json()["orders"] == []


async def test_create_order_requires_customer(client):
    response = await client.post("/api/orders/create", json={"items": []})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["detail"]


async def test_skipping_status_is_rejected(client):
    customer = await register(client, CUSTOMER)
    order = (await place_order(client, customer, await add_pizza(client)))["order"]

    data = await set_status(client, order["_id"], "delivered")

    assert data["success"] is False
    assert data["error"] == "InvalidTransition"
    still = (await client.get(f"/api/orders/{order['_id']}")).json()["order"]
    assert still["status"] == "pending"


async def test_feedback_before_delivery(client):
    customer = await register(client, CUSTOMER)
    order = (await place_order(client, customer, await add_pizza(client)))["order"]

    response = await client.put(
        "/api/orders/feedback", json={"orderId": order["_id"], "rating": 4}
    )

    assert response.json()["error"] == "OrderNotDelivered"


async def test_feedback_rating_out_of_range(client):
    response = await client.put("/api/orders/feedback", json={"orderId": "x", "rating": 9})
    assert response.json()["error"] == "InvalidRating"


# =============================================================================
# LEDGER EXPORT
# =============================================================================

class RecordingTask:
    def __init__(self):
        self.calls = []

    def delay(self, payload):
        self.calls.append(payload)


async def test_terminal_status_queues_ledger_export(client, app, monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(main_module, "export_order_to_ledger", task)
    app.state.settings.ledger_export_enabled = True

    customer = await register(client, CUSTOMER)
    order = (await place_order(client, customer, await add_pizza(client)))["order"]
    await set_status(client, order["_id"], "accepted")
    assert task.calls == []

    await set_status(client, order["_id"], "preparing")
    await set_status(client, order["_id"], "out-for-delivery")
    await set_status(client, order["_id"], "delivered")

    assert len(task.calls) == 1
    assert task.calls[0]["_id"] == order["_id"]
    assert task.calls[0]["status"] == "delivered"


async def test_ledger_export_disabled_by_default(client, monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(main_module, "export_order_to_ledger", task)

    customer = await register(client, CUSTOMER)
    order = (await place_order(client, customer, await add_pizza(client)))["order"]
    await set_status(client, order["_id"], "cancelled")

    assert task.calls == []


async def test_ledger_report(client, settings):
    assert (await client.get("/api/reports/ledger")).json()["rows"] == []

    manager = ExcelManager(data_dir=settings.data_directory, filename=settings.ledger_filename)
    manager.export_order({
        "_id": "abc123",
        "customerId": "c1",
        "customerName": "Asha Rao",
        "items": [{"name": "Pizza", "price": 300, "quantity": 2}],
        "totalAmount": 600,
        "status": "delivered",
    })

    rows = (await client.get("/api/reports/ledger")).json()["rows"]
    assert len(rows) == 1
    assert rows[0]["order_id"] == "abc123"
    assert rows[0]["item_count"] == 2
    assert rows[0]["customer_phone"] is None


# =============================================================================
# DASHBOARD
# =============================================================================

async def test_dashboard_data(client):
    customer = await register(client, CUSTOMER)
    pizza = await add_pizza(client)
    delivered = (await place_order(client, customer, pizza))["order"]
    for status in ["accepted", "preparing", "out-for-delivery", "delivered"]:
        await set_status(client, delivered["_id"], status)
    await client.put(
        "/api/orders/feedback", json={"orderId": delivered["_id"], "rating": 4, "comment": ""}
    )
    await place_order(client, customer, pizza)

    data = (await client.get("/api/dashboard-data")).json()

    assert data["success"] is True
    assert data["total_orders"] == 2
    assert data["active_orders"] == 1
    assert data["delivered_revenue"] == 300
    assert data["average_rating"] == 4
    assert data["orders_by_status"]["pending"] == 1
    assert data["recent_orders"][1]["_id"] == delivered["_id"]


async def test_dashboard_page_lists_actions(client):
    customer = await register(client, CUSTOMER)
    await place_order(client, customer, await add_pizza(client))

    response = await client.get("/dashboard")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Asha Rao" in response.text
    assert "Accept" in response.text
    assert "Reject" in response.text


@pytest.mark.parametrize("path", ["/api/food/items", "/api/orders/all"])
async def test_list_endpoints_start_empty(client, path):
    data = (await client.get(path)).json()
    assert data["success"] is True
    assert data["message"] is None


async def test_large_quantities_are_accepted(client):
    response = await client.post("/api/orders/create", json={
        "customerId": "c1",
        "items": [{"name": "Samosa", "price": 10, "quantity": 150}],
    })

    data = response.json()
    assert response.status_code == 200
    assert data["success"] is True
    assert data["order"]["totalAmount"] == 1500


async def test_unknown_status_filter_is_a_validation_error(client):
    response = await client.get("/api/orders/all", params={"status": "bogus"})

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


# =============================================================================
# HEALTH WITH LEDGER EXPORT
# =============================================================================

class FakeRedis:
    def __init__(self, reachable=True):
        self.reachable = reachable
        self.closed = False

    async def ping(self):
        if not self.reachable:
            raise ConnectionError("connection refused")
        return True

    async def aclose(self):
        self.closed = True


async def test_health_checks_broker_when_export_enabled(client, app, monkeypatch):
    broker = FakeRedis()
    monkeypatch.setattr(main_module.aioredis, "from_url", lambda url, **kwargs: broker)
    app.state.settings.ledger_export_enabled = True

    data = (await client.get("/health")).json()

    assert data["redis"] == "healthy"
    assert data["status"] == "operational"
    assert broker.closed


async def test_health_degraded_when_broker_down(client, app, monkeypatch):
    broker = FakeRedis(reachable=False)
    monkeypatch.setattr(main_module.aioredis, "from_url", lambda url, **kwargs: broker)
    app.state.settings.ledger_export_enabled = True

    data = (await client.get("/health")).json()

    assert data["redis"].startswith("unhealthy")
    assert data["status"] == "degraded"
    assert broker.closed
