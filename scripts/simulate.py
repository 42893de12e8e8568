"""
Rush Hour Simulation Script

Fires concurrent table orders at a running server, then walks a sample
of them through the kitchen lifecycle.
Run from project root: python scripts/simulate.py

Author: Khalil_Bannouri
Version: 4.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:5001"
TOTAL_ORDERS = 50
TOTAL_TABLES = 20

LIFECYCLE = ["confirmed", "preparing", "ready", "served"]


def generate_random_items(menu: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Pick 1-4 menu items with random quantities."""
    items = []
    for dish in random.sample(menu, k=min(len(menu), random.randint(1, 4))):
        items.append({
            "name": dish["name"],
            "price": dish["price"],
            "quantity": random.randint(1, 3),
            "category": dish["category"],
            "prepTime": dish.get("prepTime"),
        })
    return items


def generate_order_payload(menu: list[dict[str, Any]]) -> dict[str, Any]:
    """Generate payload for POST /api/order."""
    items = generate_random_items(menu)
    return {
        "tableNo": random.randint(1, TOTAL_TABLES),
        "items": items,
        "total": round(sum(i["price"] * i["quantity"] for i in items), 2),
    }


async def fetch_menu(client: httpx.AsyncClient) -> list[dict[str, Any]]:
    response = await client.get(f"{API_BASE_URL}/api/menu")
    response.raise_for_status()
    return response.json()["data"]


async def send_order(
    client: httpx.AsyncClient,
    menu: list[dict[str, Any]],
    order_num: int,
) -> dict[str, Any]:
    """Place one order and time it."""
    payload = generate_order_payload(menu)
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/order",
            json=payload,
            timeout=30.0
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()["data"]
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data["id"],
                "table_no": data["tableNo"],
                "total": data["total"],
                "estimated_time": data["estimatedTime"],
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def walk_lifecycle(client: httpx.AsyncClient, order_id: int) -> bool:
    """Move one order from pending to served."""
    for status in LIFECYCLE:
        response = await client.put(
            f"{API_BASE_URL}/api/order/{order_id}/status",
            json={"status": status},
            timeout=30.0,
        )
        if response.status_code != 200:
            print(f"   ⚠️ Order #{order_id} stuck before {status}: {response.text[:80]}")
            return False
    return True


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    num_orders: int = TOTAL_ORDERS,
    lifecycle_sample: int = 10,
) -> dict[str, Any]:
    """
    Run the rush hour simulation.

    Args:
        num_orders: Number of orders to place concurrently
        lifecycle_sample: How many placed orders to walk to "served"
    """
    print("=" * 70)
    print("🔥 RUSH HOUR SIMULATION - CONCURRENT TABLE ORDERS")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        menu = await fetch_menu(client)
        print(f"\n📖 Menu loaded: {len(menu)} items")

        print("\n🚀 Firing orders...\n")
        results = await asyncio.gather(
            *(send_order(client, menu, i + 1) for i in range(num_orders))
        )

        successful = [r for r in results if r["success"]]
        sample = successful[:lifecycle_sample]
        print(f"🍳 Walking {len(sample)} orders through the kitchen...\n")
        walked = await asyncio.gather(
            *(walk_lifecycle(client, r["order_id"]) for r in sample)
        )

    total_time = round(time.time() - start_time, 2)
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"🍽️ Served: {sum(walked)}/{len(sample)}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        avg_prep = round(
            sum(r["estimated_time"] for r in successful) / len(successful), 1
        )
        total_revenue = sum(r["total"] for r in successful)
        tables = len({r["table_no"] for r in successful})

        print(f"\n📈 Performance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   Average Prep Estimate: {avg_prep} min")
        print(f"   Tables Served: {tables}")
        print(f"   💰 Total Revenue: ₹{total_revenue:.2f}")

    if failed:
        print(f"\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "served": sum(walked),
        "total_time": total_time,
    }


async def check_health() -> bool:
    """Pre-flight health check."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"   ❌ Server unreachable: {e}")
            return False

    if response.status_code != 200:
        print(f"   ❌ Failed: {response.text}")
        return False

    data = response.json()
    print(f"   ✅ Status: {data.get('status')}")
    print(f"   Storage: {data.get('storage')}")
    print(f"   Database: {data.get('database')}")
    return data.get("status") == "healthy"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rush Hour Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--lifecycle", type=int, default=10, help="Orders to walk to served")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    print("\n1️⃣ Health Check...")
    if not asyncio.run(check_health()):
        print("\n❌ Pre-flight check failed. Start the server first.")
        sys.exit(1)

    asyncio.run(run_simulation(args.orders, args.lifecycle))
