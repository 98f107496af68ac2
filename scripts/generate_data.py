"""
Sample data generator for the bakery system.

Builds a deterministic pseudo-random snapshot (products, customers, staff and
orders spread over past days, some already shipped) and writes it where the CLI
will pick it up.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path

import typer

from bakery.config import get_settings
from bakery.domain.models import ShippingSpeed
from bakery.infrastructure.snapshot_store import Snapshot, SnapshotStore
from bakery.services import BakeryService

app = typer.Typer(help="Generate a sample bakery snapshot (catalog, accounts, orders).")

FIRST_NAMES = ["Ada", "Grace", "Alan", "Edsger", "Barbara", "Donald", "Frances", "Ken"]
LAST_NAMES = ["Lovelace", "Hopper", "Turing", "Dijkstra", "Liskov", "Knuth", "Allen", "Thompson"]
CITIES = [("Springfield", "IL", "62701"), ("Portland", "OR", "97201"), ("Austin", "TX", "73301")]
EXTRA_PRODUCTS = [
    ("Sourdough Loaf", "Bread", 6.50, 460),
    ("Cinnamon Roll", "Pastry", 3.75, 420),
    ("Almond Biscotti", "Cookie", 1.80, 120),
    ("Lemon Tart", "Pastry", 4.25, 350),
    ("Rye Bread", "Bread", 5.40, 390),
    ("Oatmeal Cookie", "Cookie", 1.50, 160),
]
ALLERGENS = ["wheat", "milk", "egg", "nuts", "soy"]


def build_snapshot(customers: int, orders: int, shipped_ratio: float, seed: int) -> Snapshot:
    rng = random.Random(seed)
    now = datetime.now(UTC)
    service = BakeryService(get_settings())

    service.seed_default_products()
    for name, category, price, calories in EXTRA_PRODUCTS:
        service.add_product(
            name,
            price,
            category=category,
            stock=rng.randint(20, 200),
            allergens=rng.sample(ALLERGENS, k=rng.randint(1, 3)),
            calories=calories,
        )

    service.register_employee(
        first_name="Morgan", last_name="Baker", email="manager@bakery.test", password="manager", is_manager=True
    )
    service.register_employee(
        first_name="Riley", last_name="Counter", email="staff@bakery.test", password="staff"
    )

    accounts = []
    for i in range(customers):
        city, state, zip_code = rng.choice(CITIES)
        accounts.append(
            service.register_customer(
                first_name=rng.choice(FIRST_NAMES),
                last_name=rng.choice(LAST_NAMES),
                email=f"customer{i}@example.com",
                password=f"pw{i}",
                address=f"{rng.randint(1, 999)} Main St",
                phone=f"555-{rng.randint(1000, 9999)}",
                city=city,
                state=state,
                zip=zip_code,
            )
        )

    catalog = service.catalog.all_by_name()
    placed = 0
    for _ in range(orders if accounts else 0):
        in_stock = [product for product in catalog if product.stock > 0]
        if not in_stock:
            break
        product = rng.choice(in_stock)
        service.place_order(
            rng.choice(accounts),
            [(product.name, rng.randint(1, min(3, product.stock)))],
            rng.choice(list(ShippingSpeed)),
            created_at=now - timedelta(days=rng.randint(0, 14), minutes=rng.randint(0, 600)),
        )
        placed += 1

    for _ in range(int(placed * shipped_ratio)):
        service.ship_next()

    return service.snapshot()


@app.command()
def main(
    customers: int = typer.Option(
        10,
        "--customers",
        "-c",
        help="Number of customer accounts to create.",
    ),
    orders: int = typer.Option(
        40,
        "--orders",
        "-n",
        help="Number of orders to place.",
    ),
    shipped_ratio: float = typer.Option(
        0.25,
        "--shipped-ratio",
        min=0.0,
        max=1.0,
        help="Fraction of placed orders to ship, highest priority first.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Snapshot path (defaults to the configured snapshot location).",
    ),
) -> None:
    """
    Generate a sample snapshot and write it to disk.
    """
    start = time.perf_counter()
    path = output or get_settings().snapshot_path

    typer.echo(f"Generating {customers} customers and {orders} orders -> {path} (seed={seed})")
    snapshot = build_snapshot(customers, orders, shipped_ratio, seed)
    SnapshotStore(path).save(snapshot)

    duration = time.perf_counter() - start
    typer.echo(
        f"Wrote {len(snapshot.products)} products, {len(snapshot.customers)} customers, "
        f"{len(snapshot.orders)} orders in {duration:.2f}s"
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
