"""
Service facade for the bakery system: accounts, catalog edits, order placement,
fulfillment and shipment.

A single `BakeryService` owns every in-memory index: the product catalog, the
order priority queue, the running list of all orders, the customer and employee
hash tables and the id generators. The CLI builds one per invocation from a
snapshot and exports a snapshot back when it is done.

Usage:
    from bakery.services import BakeryService
    from bakery.domain.models import ShippingSpeed

    service = BakeryService()
    service.seed_default_products()
    alice = service.register_customer(email="alice@example.com", password="pw", address="1 Main St")
    service.place_order(alice, [("Brioche", 2)], ShippingSpeed.RUSH)
    shipped = service.ship_next()
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bakery.catalog import ProductCatalog
from bakery.config import Settings, get_settings
from bakery.domain.ids import IdGenerator
from bakery.domain.models import Customer, Employee, Order, OrderItem, Product, ShippingSpeed
from bakery.errors import (
    AuthenticationError,
    DuplicateAccountError,
    DuplicateProductError,
    InsufficientStockError,
    PermissionDeniedError,
    ProductNotFoundError,
)
from bakery.infrastructure.snapshot_store import Snapshot
from bakery.structures.hash_table import HashTable
from bakery.structures.linked_list import LinkedList
from bakery.structures.priority_queue import PriorityQueue
from bakery.utils.logging import get_logger

log = get_logger(__name__)

GUEST_EMAIL = "guest@noemail"

DEFAULT_PRODUCTS: Tuple[Dict[str, Any], ...] = (
    {
        "name": "Chocolate Croissant",
        "category": "Pastry",
        "price": 2.20,
        "stock": 50,
        "description": "Flaky butter croissant with a dark chocolate center",
        "allergens": {"wheat", "milk", "egg"},
        "calories": 330,
    },
    {
        "name": "Custard Bun",
        "category": "Pastry",
        "price": 2.50,
        "stock": 30,
        "description": "Soft milk bun filled with vanilla custard",
        "allergens": {"wheat", "milk", "egg"},
        "calories": 280,
    },
    {
        "name": "Brioche",
        "category": "Bread",
        "price": 3.20,
        "stock": 20,
        "description": "Rich enriched loaf",
        "allergens": {"wheat", "milk", "egg"},
        "calories": 810,
    },
)


class BakeryService:
    """
    Process-wide application context.

    Parameters
    ----------
    settings : Settings | None
        Sizing for the account tables and the first id to hand out.
        Defaults to the cached environment settings.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.settings = settings
        self.catalog = ProductCatalog()
        self.queue: PriorityQueue[Order] = PriorityQueue()
        self.all_orders: LinkedList[Order] = LinkedList()
        self.customers: HashTable[Customer] = HashTable(settings.customer_buckets)
        self.employees: HashTable[Employee] = HashTable(settings.employee_buckets)
        self.order_ids = IdGenerator("O", start=settings.id_start)
        self.product_ids = IdGenerator("P", start=settings.id_start)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def register_customer(self, **fields: Any) -> Customer:
        customer = Customer(**fields)
        with self._lock:
            if self.customers.contains(customer):
                raise DuplicateAccountError(f"A customer with email {customer.email} already exists")
            self.customers.add(customer)
        log.info("Customer registered", extra={"email": customer.email})
        return customer

    def register_employee(self, **fields: Any) -> Employee:
        employee = Employee(**fields)
        with self._lock:
            if self.employees.contains(employee):
                raise DuplicateAccountError(f"An employee with email {employee.email} already exists")
            self.employees.add(employee)
        log.info(
            "Employee registered",
            extra={"email": employee.email, "is_manager": employee.is_manager},
        )
        return employee

    def authenticate_customer(self, email: str, password: str) -> Customer:
        found = self.customers.get(Customer.probe(email))
        if found is None or found.password != password.strip():
            log.warning("Customer login failed", extra={"email": email.strip().lower()})
            raise AuthenticationError("Invalid email or password")
        return found

    def authenticate_employee(self, email: str, password: str, manager: bool = False) -> Employee:
        found = self.employees.get(Employee.probe(email))
        if found is None or found.password != password.strip():
            log.warning("Employee login failed", extra={"email": email.strip().lower()})
            raise AuthenticationError("Invalid email or password")
        if manager and not found.is_manager:
            log.warning("Manager login refused", extra={"email": found.email})
            raise PermissionDeniedError(f"{found.email} is not a manager")
        return found

    def guest(self) -> Customer:
        """An unregistered customer; its order histories are not persisted."""
        return Customer(first_name="Guest", last_name="User", email=GUEST_EMAIL)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def add_product(self, name: str, price: float, **fields: Any) -> Product:
        with self._lock:
            if self.catalog.find_by_name(name) is not None:
                raise DuplicateProductError(f"Product {name.strip()!r} already exists")
            product = Product.create(self.product_ids, name=name, price=price, **fields)
            self.catalog.add_product(product)
        log.info("Product added", extra={"product_id": product.id, "product": product.name})
        return product

    def find_product(self, name: str) -> Optional[Product]:
        return self.catalog.find_by_name(name)

    def _require_product(self, name: str) -> Product:
        product = self.catalog.find_by_name(name)
        if product is None:
            raise ProductNotFoundError(f"No product named {name.strip()!r}")
        return product

    def remove_product(self, name: str) -> Product:
        with self._lock:
            product = self._require_product(name)
            self.catalog.remove_product(product)
        log.info("Product removed", extra={"product_id": product.id, "product": product.name})
        return product

    def update_product(
        self,
        name: str,
        price: Optional[float] = None,
        stock: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Product:
        with self._lock:
            product = self._require_product(name)
            self.catalog.update_product(product, price=price, stock=stock, description=description)
        log.info(
            "Product updated",
            extra={"product": product.name, "price": product.price, "stock": product.stock},
        )
        return product

    def seed_default_products(self) -> List[Product]:
        """Load the sample products; does nothing when the catalog already has entries."""
        if len(self.catalog):
            return []
        return [self.add_product(**dict(fields)) for fields in DEFAULT_PRODUCTS]

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def place_order(
        self,
        customer: Customer,
        items: Sequence[Tuple[str, int]],
        speed: ShippingSpeed = ShippingSpeed.STANDARD,
        address: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Order:
        """
        Place an order for `customer`.

        Stock for every line is checked before anything is decremented, so a
        failed placement leaves the catalog untouched.

        Parameters
        ----------
        customer : Customer
            The ordering account. Registered customers get the order appended to
            their unshipped list.
        items : sequence of (product name, quantity)
            Repeated names are merged into one line.
        speed : ShippingSpeed
            Shipping tier; determines the order priority.
        address : str | None
            Shipping address. Defaults to the customer's mailing address.
        created_at : datetime | None
            Placement time; defaults to now. Loaders and generators pass historic times.
        """
        if not items:
            raise ValueError("An order needs at least one item")

        with self._lock:
            wanted: Dict[str, Tuple[Product, int]] = {}
            for name, quantity in items:
                if quantity < 1:
                    raise ValueError(f"Invalid quantity for {name!r}: {quantity}")
                product = self._require_product(name)
                _, already = wanted.get(product.key, (product, 0))
                wanted[product.key] = (product, already + quantity)

            for product, quantity in wanted.values():
                if quantity > product.stock:
                    raise InsufficientStockError(
                        f"Only {product.stock} of {product.name!r} in stock, {quantity} requested"
                    )

            order = Order.create(
                self.order_ids,
                customer_email=customer.email,
                items=[
                    OrderItem(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=quantity,
                        unit_price=product.price,
                    )
                    for product, quantity in wanted.values()
                ],
                shipping_speed=speed,
                shipping_address=address or customer.mailing_address,
                created_at=created_at,
            )
            for product, quantity in wanted.values():
                product.decrement_stock(quantity)

            self.queue.insert(order)
            customer.add_unshipped_order(order)
            self.all_orders.add_last(order)

        log.info(
            "Order placed",
            extra={
                "order_id": order.id,
                "customer": order.customer_email,
                "speed": order.shipping_speed.value,
                "priority": order.priority,
                "total": order.total,
            },
        )
        return order

    # ------------------------------------------------------------------
    # Fulfillment
    # ------------------------------------------------------------------
    def next_order(self) -> Order:
        """The highest-priority unshipped order; raises `EmptyError` when none is waiting."""
        return self.queue.peek()

    def find_order(self, order_id: str) -> Optional[Order]:
        order_id = order_id.strip().upper()
        queued = self.queue.search_by_id(order_id)
        if queued is not None:
            return queued
        for order in self.all_orders:
            if order.id == order_id:
                return order
        return None

    def orders_for_customer(self, email: str) -> List[Order]:
        """Unshipped orders for `email`, in heap order."""
        return self.queue.search_by_customer(email)

    def orders_by_priority(self) -> List[Order]:
        return self.queue.sorted_descending()

    # ------------------------------------------------------------------
    # Shipment
    # ------------------------------------------------------------------
    def ship_next(self) -> Order:
        with self._lock:
            order = self.queue.remove()
            order.mark_shipped()
            customer = self.customers.get(Customer.probe(order.customer_email))
            moved = customer is not None and customer.move_order_to_shipped(order)
        if not moved:
            log.warning(
                "Shipped order has no registered owner",
                extra={"order_id": order.id, "customer": order.customer_email},
            )
        log.info(
            "Order shipped",
            extra={"order_id": order.id, "customer": order.customer_email, "remaining": len(self.queue)},
        )
        return order

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        """Detached copy of the current state; later mutations do not leak into it."""
        with self._lock:
            live = Snapshot(
                saved_at=datetime.now(timezone.utc),
                products=self.catalog.all_by_name(),
                customers=list(self.customers),
                employees=list(self.employees),
                orders=list(self.all_orders),
            )
            return Snapshot.model_validate(live.model_dump())

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, settings: Optional[Settings] = None) -> "BakeryService":
        """
        Rebuild every index from `snapshot`.

        Unshipped orders go back into the queue and their owner's unshipped list.
        Shipped orders go only into their owner's shipped list, in shipment order.
        """
        service = cls(settings)
        for product in snapshot.products:
            service.catalog.add_product(product)
            service.product_ids.advance_past(product.id)
        for customer in snapshot.customers:
            service.customers.add(customer)
        for employee in snapshot.employees:
            service.employees.add(employee)

        shipped: List[Order] = []
        for order in snapshot.orders:
            service.all_orders.add_last(order)
            service.order_ids.advance_past(order.id)
            if order.shipped:
                shipped.append(order)
                continue
            service.queue.insert(order)
            owner = service.customers.get(Customer.probe(order.customer_email))
            if owner is not None:
                owner.add_unshipped_order(order)

        for order in _by_shipment_time(shipped):
            owner = service.customers.get(Customer.probe(order.customer_email))
            if owner is not None:
                owner.shipped_orders.add_last(order)

        log.info(
            "Service restored from snapshot",
            extra={
                "products": len(service.catalog),
                "customers": len(service.customers),
                "queued": len(service.queue),
            },
        )
        return service


def _by_shipment_time(orders: Iterable[Order]) -> List[Order]:
    return sorted(orders, key=lambda order: order.shipped_at or order.created_at)


__all__ = ["BakeryService", "DEFAULT_PRODUCTS", "GUEST_EMAIL"]
