"""
Excel Ledger Manager with Concurrency Control

Appends finished (delivered or cancelled) orders to an Excel ledger the
restaurant owner can open directly. Writers are serialized with a file lock
so several Celery workers can export at once.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from filelock import FileLock, Timeout

from foodorder.core.config import get_settings

logger = logging.getLogger(__name__)


class ExcelManager:
    """Process- and thread-safe Excel ledger."""

    LEDGER_COLUMNS = [
        "order_id",
        "date_time",
        "customer_id",
        "customer_name",
        "customer_phone",
        "customer_address",
        "items",
        "item_count",
        "total_amount",
        "payment_method",
        "order_status",
        "exported_at",
    ]

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        filename: Optional[str] = None,
        lock_timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.data_dir = Path(data_dir or settings.data_directory)
        self.ledger_file = self.data_dir / (filename or settings.ledger_filename)
        self.lock_file = self.ledger_file.with_name(self.ledger_file.name + ".lock")
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.ledger_lock_timeout

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    def _load_or_create_df(self) -> pd.DataFrame:
        """Load existing ledger or create an empty one."""
        if self.ledger_file.exists():
            return pd.read_excel(self.ledger_file, engine="openpyxl")
        return pd.DataFrame(columns=self.LEDGER_COLUMNS)

    @staticmethod
    def _ledger_row(order_data: dict[str, Any], export_time: str) -> dict[str, Any]:
        items = order_data.get("items") or []
        return {
            "order_id": order_data.get("_id"),
            "date_time": order_data.get("createdAt", export_time),
            "customer_id": order_data.get("customerId"),
            "customer_name": order_data.get("customerName"),
            "customer_phone": order_data.get("customerPhone"),
            "customer_address": order_data.get("customerAddress"),
            "items": json.dumps(items),
            "item_count": sum(int(i.get("quantity", 0)) for i in items),
            "total_amount": order_data.get("totalAmount"),
            "payment_method": order_data.get("paymentMethod"),
            "order_status": order_data.get("status"),
            "exported_at": export_time,
        }

    def export_order(self, order_data: dict[str, Any]) -> dict[str, Any]:
        """
        Append one order to the ledger.

        Args:
            order_data: the order as serialized on the wire (camelCase keys)

        Returns:
            dict with success flag, message, order_id and exported_at
        """
        self._ensure_data_dir()

        order_id = order_data.get("_id", "unknown")
        result = {
            "success": False,
            "message": "",
            "order_id": order_id,
            "exported_at": None,
        }

        try:
            lock = FileLock(str(self.lock_file), timeout=self.lock_timeout)

            with lock:
                logger.debug(f"Lock acquired for Order #{order_id}")

                df = self._load_or_create_df()
                export_time = datetime.now().isoformat()
                new_row = self._ledger_row(order_data, export_time)

                if df.empty:
                    df = pd.DataFrame([new_row], columns=self.LEDGER_COLUMNS)
                else:
                    df = pd.concat([df, pd.DataFrame([new_row])], ignore_index=True)
                df.to_excel(str(self.ledger_file), index=False, engine="openpyxl")

                logger.info(f"Order #{order_id} exported to ledger")

                result["success"] = True
                result["message"] = f"Order #{order_id} exported"
                result["exported_at"] = export_time

            logger.debug(f"Lock released for Order #{order_id}")

        except Timeout:
            result["message"] = f"Lock timeout ({self.lock_timeout}s)"
            logger.error(f"Lock timeout for Order #{order_id}")

        return result

    def get_all_orders(self) -> list[dict[str, Any]]:
        """Get all ledger rows."""
        if not self.ledger_file.exists():
            return []

        df = pd.read_excel(self.ledger_file, engine="openpyxl")
        # NaN is not valid JSON
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict("records")

    def clear_all(self) -> bool:
        """Delete the ledger and its lock file."""
        for f in (self.ledger_file, self.lock_file):
            if f.exists():
                f.unlink()
        logger.info("Ledger cleared")
        return True
