from __future__ import annotations

import sys
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

import typer
from pydantic import ValidationError

from bakery.config import get_settings
from bakery.domain.models import ShippingSpeed
from bakery.errors import BakeryError, EmptyError
from bakery.infrastructure.snapshot_store import SnapshotStore
from bakery.reporter import print_history, print_orders, print_products
from bakery.services import BakeryService
from bakery.utils.logging import configure_logging

app = typer.Typer(help="Bakery order fulfillment CLI.")


class SortKey(str, Enum):
    name = "name"
    price = "price"


def _open_service() -> Tuple[BakeryService, SnapshotStore]:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    store = SnapshotStore(settings.snapshot_path)
    return BakeryService.from_snapshot(store.load(), settings), store


def _save(service: BakeryService, store: SnapshotStore) -> None:
    store.save(service.snapshot())


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn domain and validation failures into `Error: ...` on stderr with exit code 1."""
    try:
        yield
    except (BakeryError, ValidationError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _parse_item(raw: str) -> Tuple[str, int]:
    name, sep, quantity = raw.rpartition("=")
    if not sep or not name.strip():
        raise typer.BadParameter(f"Expected NAME=QTY, got {raw!r}", param_hint="--item")
    try:
        return name.strip(), int(quantity)
    except ValueError:
        raise typer.BadParameter(f"Quantity must be an integer in {raw!r}", param_hint="--item") from None


def _email_option() -> Any:
    return typer.Option(..., "--email", "-e", help="Account email.")


def _password_option() -> Any:
    return typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Account password.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} | snapshot={settings.snapshot_path} | "
        f"log_level={settings.log_level} json_logs={settings.json_logs} | "
        f"buckets=customers:{settings.customer_buckets} employees:{settings.employee_buckets} | "
        f"id_start={settings.id_start}"
    )


@app.command()
def products(
    sort: SortKey = typer.Option(SortKey.name, "--sort", "-s", help="Sort by name or price."),
) -> None:
    """
    List the catalog, sorted by name or by price.
    """
    service, _ = _open_service()
    if sort is SortKey.price:
        print_products(service.catalog.all_by_price(), title="Products by price")
    else:
        print_products(service.catalog.all_by_name(), title="Products by name")


@app.command("add-product")
def add_product(
    email: str = _email_option(),
    password: str = _password_option(),
    name: str = typer.Option(..., "--name", "-n", help="Product name (unique, case-insensitive)."),
    price: float = typer.Option(..., "--price", help="Unit price."),
    category: str = typer.Option("", "--category", help="Product category."),
    stock: int = typer.Option(0, "--stock", help="Units in stock."),
    description: str = typer.Option("", "--description", help="Short description."),
    allergens: Optional[List[str]] = typer.Option(None, "--allergen", help="Allergen (repeatable)."),
    calories: int = typer.Option(1, "--calories", help="Calories per unit."),
) -> None:
    """
    Add a product to the catalog (manager only).
    """
    service, store = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password, manager=True)
        product = service.add_product(
            name,
            price,
            category=category,
            stock=stock,
            description=description,
            allergens=allergens or [],
            calories=calories,
        )
        _save(service, store)
    typer.echo(f"Added: {product}")


@app.command("remove-product")
def remove_product(
    email: str = _email_option(),
    password: str = _password_option(),
    name: str = typer.Option(..., "--name", "-n", help="Product to remove."),
) -> None:
    """
    Remove a product from the catalog (manager only).
    """
    service, store = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password, manager=True)
        product = service.remove_product(name)
        _save(service, store)
    typer.echo(f"Removed: {product.name}")


@app.command("update-product")
def update_product(
    email: str = _email_option(),
    password: str = _password_option(),
    name: str = typer.Option(..., "--name", "-n", help="Product to update."),
    price: Optional[float] = typer.Option(None, "--price", help="New unit price."),
    stock: Optional[int] = typer.Option(None, "--stock", help="New stock level."),
    description: Optional[str] = typer.Option(None, "--description", help="New description."),
) -> None:
    """
    Change a product's price, stock or description (manager only).
    """
    service, store = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password, manager=True)
        product = service.update_product(name, price=price, stock=stock, description=description)
        _save(service, store)
    typer.echo(f"Updated: {product}")


@app.command()
def register(
    email: str = _email_option(),
    password: str = _password_option(),
    first_name: str = typer.Option("", "--first-name", help="First name."),
    last_name: str = typer.Option("", "--last-name", help="Last name."),
    address: str = typer.Option("", "--address", help="Street address."),
    phone: str = typer.Option("", "--phone", help="Phone number."),
    city: str = typer.Option("", "--city", help="City."),
    state: str = typer.Option("", "--state", help="State."),
    zip_code: str = typer.Option("", "--zip", help="ZIP code."),
    employee: bool = typer.Option(False, "--employee", help="Register a staff account instead."),
    manager: bool = typer.Option(False, "--manager", help="Staff account may edit the catalog."),
) -> None:
    """
    Register a customer account, or a staff account with --employee.
    """
    service, store = _open_service()
    with _reported_errors():
        if employee or manager:
            account = service.register_employee(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=password,
                is_manager=manager,
            )
        else:
            account = service.register_customer(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=password,
                address=address,
                phone=phone,
                city=city,
                state=state,
                zip=zip_code,
            )
        _save(service, store)
    typer.echo(f"Registered: {account}")


@app.command()
def order(
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Account email."),
    password: Optional[str] = typer.Option(None, "--password", "-p", hide_input=True, help="Account password."),
    guest: bool = typer.Option(False, "--guest", help="Order without an account; requires --address."),
    items: List[str] = typer.Option(..., "--item", "-i", help="NAME=QTY (repeatable)."),
    speed: ShippingSpeed = typer.Option(
        ShippingSpeed.STANDARD, "--speed", case_sensitive=False, help="Shipping speed."
    ),
    address: Optional[str] = typer.Option(None, "--address", help="Ship somewhere other than the account address."),
) -> None:
    """
    Place an order as a registered customer, or as a guest with --guest.
    """
    parsed = [_parse_item(raw) for raw in items]
    if guest:
        if not address:
            raise typer.BadParameter("Guest orders need a shipping address", param_hint="--address")
    elif not email:
        raise typer.BadParameter("Required unless --guest is given", param_hint="--email")
    elif password is None:
        password = typer.prompt("Password", hide_input=True)
    service, store = _open_service()
    with _reported_errors():
        customer = service.guest() if guest else service.authenticate_customer(email, password)
        placed = service.place_order(customer, parsed, speed, address=address)
        _save(service, store)
    typer.echo(f"Placed: {placed}")


@app.command()
def queue(
    email: str = _email_option(),
    password: str = _password_option(),
) -> None:
    """
    Show the next order to fulfil and every unshipped order by priority (staff only).
    """
    service, _ = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password)
    if service.queue.is_empty():
        typer.echo("No orders waiting.")
        return
    typer.echo(f"Next: {service.next_order()}")
    print_orders(service.orders_by_priority(), title="Unshipped orders", caption="Highest priority first")


@app.command("ship-next")
def ship_next(
    email: str = _email_option(),
    password: str = _password_option(),
) -> None:
    """
    Ship the highest-priority order (staff only).
    """
    service, store = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password)
        try:
            shipped = service.ship_next()
        except EmptyError:
            typer.echo("No orders waiting.")
            return
        _save(service, store)
    typer.echo(f"Shipped: {shipped}")
    typer.echo(f"Estimated delivery: {shipped.estimated_delivery():%Y-%m-%d}")


@app.command()
def history(
    email: str = _email_option(),
    password: str = _password_option(),
) -> None:
    """
    Show a customer's unshipped and shipped orders.
    """
    service, _ = _open_service()
    with _reported_errors():
        customer = service.authenticate_customer(email, password)
    print_history(customer)


@app.command("find-order")
def find_order(
    email: str = _email_option(),
    password: str = _password_option(),
    order_id: str = typer.Option(..., "--id", help="Order id, e.g. O1000."),
) -> None:
    """
    Look up an order by id, queued or shipped (staff only).
    """
    service, _ = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password)
    found = service.find_order(order_id)
    if found is None:
        typer.echo(f"No order with id {order_id.strip().upper()}.")
        return
    typer.echo(f"Found: {found}")
    print_orders([found], title=f"Order {found.id}")


@app.command("search-product")
def search_product(
    email: str = _email_option(),
    password: str = _password_option(),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Search the name index."),
    price: Optional[float] = typer.Option(None, "--price", help="Search the price index for an exact price."),
) -> None:
    """
    Find a product by name or by exact price (manager only).
    """
    if (name is None) == (price is None):
        raise typer.BadParameter("Give exactly one of --name or --price")
    service, _ = _open_service()
    with _reported_errors():
        service.authenticate_employee(email, password, manager=True)
    if name is not None:
        found = service.catalog.find_by_name(name)
        missing = f"No product named {name.strip()!r}."
    else:
        found = service.catalog.find_by_exact_price(price)
        missing = f"No product priced at ${price:.2f}."
    if found is None:
        typer.echo(missing)
        return
    print_products([found], title="Search result")


@app.command()
def seed() -> None:
    """
    Load the sample products into an empty catalog.
    """
    service, store = _open_service()
    added = service.seed_default_products()
    if not added:
        typer.echo("Catalog already has products; nothing seeded.")
        return
    _save(service, store)
    typer.echo(f"Seeded {len(added)} products: " + ", ".join(product.name for product in added))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
