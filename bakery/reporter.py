from __future__ import annotations

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from bakery.domain.models import Customer, Order, Product


def product_table(products: Iterable[Product], title: str = "Products", caption: Optional[str] = None) -> Table:
    table = Table(title=title, box=box.ROUNDED, caption=caption)

    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="blue")
    table.add_column("Price", justify="right", style="bold green")
    table.add_column("Stock", justify="right", style="magenta")
    table.add_column("Calories", justify="right", style="yellow")
    table.add_column("Allergens", style="red")

    for product in products:
        table.add_row(
            product.id,
            product.name,
            product.category,
            f"${product.price:.2f}",
            str(product.stock),
            str(product.calories),
            ", ".join(sorted(product.allergens)) or "-",
        )
    return table


def order_table(orders: Iterable[Order], title: str = "Orders", caption: Optional[str] = None) -> Table:
    table = Table(title=title, box=box.ROUNDED, caption=caption)

    table.add_column("Order", style="cyan", no_wrap=True)
    table.add_column("Customer", style="blue")
    table.add_column("Speed", style="magenta")
    table.add_column("Priority", justify="right", style="yellow")
    table.add_column("Items", justify="right")
    table.add_column("Total", justify="right", style="bold green")
    table.add_column("Status", style="red")

    for order in orders:
        table.add_row(
            order.id,
            order.customer_email,
            order.shipping_speed.value,
            str(order.priority),
            str(sum(item.quantity for item in order.items)),
            f"${order.total:.2f}",
            "Shipped" if order.shipped else "Pending",
        )
    return table


def print_products(
    products: Iterable[Product],
    title: str = "Products",
    caption: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render catalog products as a rich table, in the order given.
    """
    console = console or Console()
    products = list(products)
    if not products:
        console.print("[yellow]No products in the catalog.[/yellow]")
        return
    console.print(product_table(products, title=title, caption=caption))


def print_orders(
    orders: Iterable[Order],
    title: str = "Orders",
    caption: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    orders = list(orders)
    if not orders:
        console.print(f"[yellow]{title}: none.[/yellow]")
        return
    console.print(order_table(orders, title=title, caption=caption))


def print_history(customer: Customer, console: Optional[Console] = None) -> None:
    """
    Render a customer's unshipped orders (placement order) and shipped orders
    (shipment order) as two tables.
    """
    console = console or Console()
    console.print(f"[bold]{customer.full_name or customer.email}[/bold]")
    print_orders(customer.unshipped_orders, title="Unshipped orders", console=console)
    print_orders(customer.shipped_orders, title="Shipped orders", console=console)


__all__ = ["product_table", "order_table", "print_products", "print_orders", "print_history"]
