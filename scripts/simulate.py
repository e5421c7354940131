"""
Order Flow Simulation Script

Drives a running server through the full customer/owner lifecycle, then
fires many concurrent customer orders and has the owner work through them.
Run from project root: python scripts/simulate.py

Usage:
    python scripts/simulate.py --url http://localhost:5000 --orders 20
"""

import argparse
import asyncio
import random
import sys
import tempfile
import time
import uuid
from pathlib import Path
from typing import Any

import httpx

from foodorder.client import (
    APIError,
    ClientSession,
    CustomerView,
    FoodOrderAPI,
    OwnerView,
    format_order,
)

# Configuration
API_BASE_URL = "http://localhost:5000"
TOTAL_ORDERS = 20

# Sample data for random customers
FIRST_NAMES = ["Aarav", "Diya", "Kabir", "Meera", "Rohan", "Isha", "Vikram", "Anaya", "Arjun", "Sara"]
LAST_NAMES = ["Sharma", "Iyer", "Khan", "Patel", "Reddy", "Das", "Menon", "Singh", "Joshi", "Nair"]
STREETS = ["MG Road", "Brigade Road", "Linking Road", "Park Street", "Anna Salai", "FC Road"]
PAYMENT_METHODS = ["cash", "card", "upi"]

# Owner action sequence for a happy-path order
FULFILLMENT = ["accept", "start preparing", "dispatch", "deliver"]


def _session_file() -> Path:
    """Each simulated client gets its own throwaway session file."""
    return Path(tempfile.gettempdir()) / f"foodorder-sim-{uuid.uuid4().hex}.json"


def generate_random_customer() -> dict[str, str]:
    """Generate random customer registration fields."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "name": f"{first} {last}",
        "email": f"{first.lower()}.{last.lower()}.{uuid.uuid4().hex[:8]}@example.com",
        "password": "secret",
        "phone": f"9{random.randint(100000000, 999999999)}",
        "address": f"{random.randint(1, 300)} {random.choice(STREETS)}",
    }


# =============================================================================
# SINGLE END-TO-END FLOW
# =============================================================================

async def run_lifecycle(api: FoodOrderAPI) -> bool:
    """Owner adds a dish, customer orders and rates it, owner fulfils."""
    print("\n" + "=" * 70)
    print("ORDER LIFECYCLE")
    print("=" * 70)

    owner = OwnerView(api, ClientSession(_session_file()))
    customer = CustomerView(api, ClientSession(_session_file()))

    suffix = uuid.uuid4().hex[:8]
    await owner.register(
        name="Simulation Owner",
        email=f"owner.{suffix}@example.com",
        password="secret",
        phone="9000000000",
        address="1 Kitchen Lane",
        restaurant_name="Simulation Kitchen",
    )
    pizza = await owner.add_item(name=f"Pizza {suffix}", category="Pizza", price=300, rating=4.5)
    print(f"\n1. Owner added {pizza['name']} ({pizza['_id']})")

    await customer.register(**generate_random_customer())
    customer.cart.add(pizza)
    order = await customer.place_order(payment_method="upi")
    print(f"2. Customer placed order #{order['_id']} [{order['status']}]")

    for action in FULFILLMENT:
        order = await owner.advance(order["_id"], action)
        print(f"3. Owner: {action} -> {order['status']}")

    order = await customer.rate(order["_id"], 5, "great")
    print(f"4. Customer rated {order['feedback']['rating']}/5")

    try:
        await customer.rate(order["_id"], 4, "again")
        print("   Second rating was accepted (unexpected)")
        return False
    except APIError as e:
        print(f"   Second rating refused: {e.code}")

    await owner.delete_item(pizza["_id"])
    print("\n" + format_order(order))
    return True


# =============================================================================
# CONCURRENT ORDERS
# =============================================================================

async def place_random_order(
    api: FoodOrderAPI,
    menu: list[dict[str, Any]],
    order_num: int,
) -> dict[str, Any]:
    """Register a fresh customer and submit a random cart."""
    customer = CustomerView(api, ClientSession(_session_file()))
    start_time = time.time()

    try:
        await customer.register(**generate_random_customer())
        for item in random.sample(menu, k=random.randint(1, min(4, len(menu)))):
            for _ in range(random.randint(1, 3)):
                customer.cart.add(item)
        order = await customer.place_order(random.choice(PAYMENT_METHODS))
        customer.logout()
        return {
            "order_num": order_num,
            "success": True,
            "order_id": order["_id"],
            "total": order["totalAmount"],
            "time": round(time.time() - start_time, 3),
        }
    except (APIError, httpx.HTTPError) as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }


async def fulfil_all(api: FoodOrderAPI, order_ids: list[str]) -> dict[str, int]:
    """Owner walks every order to delivered, rejecting roughly one in ten."""
    owner = OwnerView(api, ClientSession(_session_file()))
    outcome = {"delivered": 0, "cancelled": 0}

    for order_id in order_ids:
        if random.random() < 0.1:
            await owner.advance(order_id, "reject")
            outcome["cancelled"] += 1
            continue
        for action in FULFILLMENT:
            await owner.advance(order_id, action)
        outcome["delivered"] += 1

    return outcome


async def run_simulation(api: FoodOrderAPI, num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """Fire concurrent orders, then fulfil them."""
    print("=" * 70)
    print("CONCURRENT ORDER SIMULATION")
    print("=" * 70)
    print(f"Total Orders: {num_orders}")
    print(f"Target: {api.base_url}")
    print("=" * 70)

    menu = await api.list_items()
    if not menu:
        print("\nCatalog is empty; start the server with SEED_CATALOG=true")
        return {"total": num_orders, "successful": 0, "failed": num_orders}

    start_time = time.time()
    results = await asyncio.gather(
        *[place_random_order(api, menu, i + 1) for i in range(num_orders)]
    )
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\nSuccessful Orders: {len(successful)}/{num_orders}")
    print(f"Failed Orders: {len(failed)}/{num_orders}")
    print(f"Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r["total"] for r in successful)
        print(f"   Average Response: {avg_time}s")
        print(f"   Order Value: {total_revenue:.2f}")

    if failed:
        print("\nFailed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f['error']}")

    outcome = await fulfil_all(api, [r["order_id"] for r in successful])
    print(f"\nOwner delivered {outcome['delivered']}, rejected {outcome['cancelled']}")

    print("\n" + "=" * 70)
    print("VERIFICATION STEPS")
    print("=" * 70)
    print("1. With LEDGER_EXPORT_ENABLED=true, check the Celery worker log")
    print("2. Run: python scripts/verify.py")
    print(f"3. Visit {api.base_url}/dashboard")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        **outcome,
    }


async def main(url: str, num_orders: int, skip_lifecycle: bool) -> int:
    async with FoodOrderAPI(url) as api:
        if not skip_lifecycle and not await run_lifecycle(api):
            print("\nLifecycle check failed. Fix issues before running the simulation.")
            return 1
        summary = await run_simulation(api, num_orders)
    return 0 if summary["failed"] == 0 else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Flow Simulation")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--skip-lifecycle", action="store_true", help="Skip the end-to-end check")
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.url, args.orders, args.skip_lifecycle)))
