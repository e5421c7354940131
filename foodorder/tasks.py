"""
Celery Tasks
Background export of finished orders to the Excel ledger.
"""

import logging
import time
from datetime import datetime

from foodorder.celery_worker import celery_app
from foodorder.services.excel_manager import ExcelManager

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(OSError,),
    retry_backoff=True
)
def export_order_to_ledger(self, order_data: dict) -> dict:
    """
    Append a delivered or cancelled order to the Excel ledger.

    Args:
        order_data: Order as serialized in API responses

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    order_id = order_data.get("_id", "unknown")

    logger.info(f"Task {task_id}: exporting order #{order_id}")
    start_time = time.time()

    result = ExcelManager().export_order(order_data)

    elapsed = round(time.time() - start_time, 3)
    result["task_id"] = task_id
    result["processing_time_seconds"] = elapsed

    if result["success"]:
        logger.info(f"Task {task_id}: order #{order_id} exported in {elapsed}s")
    else:
        logger.warning(f"Task {task_id}: order #{order_id} not exported - {result['message']}")

    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        "status": "healthy",
        "worker": "celery",
        "timestamp": datetime.now().isoformat()
    }
