"""
Ledger Verification Script

Verifies data integrity of the Excel ledger of finished orders.
Run from project root: python scripts/verify.py
"""

import json
import sys
from datetime import datetime

import pandas as pd

from foodorder.services.excel_manager import ExcelManager

FINISHED_STATUSES = {"delivered", "cancelled"}


def verify_ledger(manager: ExcelManager) -> bool:
    """Check the ledger for missing columns, duplicates and bad totals."""
    ledger = manager.ledger_file

    print("=" * 60)
    print("LEDGER VERIFICATION REPORT")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"File: {ledger}")
    print("=" * 60)

    if not ledger.exists():
        print("\nLedger file not found!")
        print("   Enable LEDGER_EXPORT_ENABLED, run a Celery worker and deliver some orders.")
        return False

    df = pd.read_excel(ledger, engine="openpyxl")
    ok = True

    print("\nSTATISTICS:")
    print(f"   Rows: {len(df)}")

    missing = [col for col in ExcelManager.LEDGER_COLUMNS if col not in df.columns]
    if missing:
        print(f"\nMissing Columns: {missing}")
        ok = False
    else:
        print("All ledger columns present")

    if "order_id" in df.columns:
        duplicates = int(df["order_id"].duplicated().sum())
        if duplicates:
            print(f"{duplicates} duplicate order IDs found!")
            ok = False
        else:
            print("No duplicate order IDs")

    if "order_status" in df.columns:
        unexpected = sorted(set(df["order_status"].dropna()) - FINISHED_STATUSES)
        if unexpected:
            print(f"Unfinished statuses in ledger: {unexpected}")
            ok = False

    if {"items", "total_amount"} <= set(df.columns):
        mismatched = 0
        for _, row in df.iterrows():
            items = json.loads(row["items"])
            computed = round(sum(i["price"] * i["quantity"] for i in items), 2)
            if abs(computed - float(row["total_amount"])) > 0.01:
                mismatched += 1
        if mismatched:
            print(f"{mismatched} rows whose total does not match their items")
            ok = False
        else:
            print("All totals match their items")

    if "total_amount" in df.columns and "order_status" in df.columns:
        delivered = df[df["order_status"] == "delivered"]
        print("\nREVENUE:")
        print(f"   Delivered orders: {len(delivered)}")
        print(f"   Delivered total: {delivered['total_amount'].sum():.2f}")

    print("\nRECENT ROWS:")
    print("-" * 60)
    if len(df) > 0:
        cols = [c for c in ["order_id", "customer_name", "total_amount", "order_status"] if c in df.columns]
        print(df[cols].tail(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("VERIFICATION COMPLETE" if ok else "VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    sys.exit(0 if verify_ledger(ExcelManager()) else 1)
