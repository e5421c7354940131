"""Excel ledger and the Celery export task."""

import pytest

from foodorder.core.config import get_settings
from foodorder.services.excel_manager import ExcelManager
from foodorder.tasks import export_order_to_ledger, health_check


def wire_order(order_id="abc123", status="delivered"):
    return {
        "_id": order_id,
        "customerId": "c1",
        "customerName": "Asha Rao",
        "customerPhone": "9876543210",
        "customerAddress": "12 MG Road",
        "items": [
            {"foodId": "p1", "name": "Pizza", "price": 300, "quantity": 2},
            {"foodId": "l1", "name": "Lassi", "price": 60, "quantity": 1},
        ],
        "totalAmount": 660,
        "paymentMethod": "upi",
        "status": status,
        "createdAt": "2024-05-01T12:00:00",
    }


@pytest.fixture
def manager(tmp_path) -> ExcelManager:
    return ExcelManager(data_dir=tmp_path / "ledger", filename="orders.xlsx", lock_timeout=5)


@pytest.fixture
def ledger_env(tmp_path, monkeypatch):
    """Point the process-wide settings at a temporary data directory."""
    monkeypatch.setenv("DATA_DIRECTORY", str(tmp_path / "worker"))
    get_settings.cache_clear()
    yield tmp_path / "worker"
    get_settings.cache_clear()


def test_export_creates_ledger(manager):
    result = manager.export_order(wire_order())

    assert result["success"] is True
    assert result["order_id"] == "abc123"
    assert manager.ledger_file.exists()

    (row,) = manager.get_all_orders()
    assert row["order_id"] == "abc123"
    assert row["item_count"] == 3
    assert row["total_amount"] == 660
    assert row["order_status"] == "delivered"
    assert row["date_time"] == "2024-05-01T12:00:00"
    assert set(row) == set(ExcelManager.LEDGER_COLUMNS)


def test_export_appends(manager):
    manager.export_order(wire_order("a"))
    manager.export_order(wire_order("b", status="cancelled"))

    rows = manager.get_all_orders()
    assert [r["order_id"] for r in rows] == ["a", "b"]
    assert rows[1]["order_status"] == "cancelled"


def test_missing_ledger_reads_empty(manager):
    assert manager.get_all_orders() == []


def test_clear_all(manager):
    manager.export_order(wire_order())
    assert manager.clear_all() is True
    assert not manager.ledger_file.exists()
    assert manager.get_all_orders() == []


def test_export_task_runs_eagerly(ledger_env):
    result = export_order_to_ledger.apply(args=[wire_order("task-1")]).get()

    assert result["success"] is True
    assert result["order_id"] == "task-1"
    assert "processing_time_seconds" in result

    rows = ExcelManager().get_all_orders()
    assert [r["order_id"] for r in rows] == ["task-1"]
    assert ExcelManager().data_dir == ledger_env


def test_health_check_task():
    result = health_check.apply().get()
    assert result["status"] == "healthy"
