"""
Bakery - order fulfillment for a small bakery, built on hand-written containers.

This package keeps every index in memory and persists a JSON snapshot between runs:

- A doubly linked list with cursors for per-customer order histories
- Chained hash tables for customer and employee accounts
- Two binary search trees indexing the product catalog by name and by price
- A binary max-heap ordering unshipped orders by shipping tier, then age

The service layer ties them together for order placement, fulfillment and
shipment. A typer CLI drives it from the command line.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from bakery.catalog import ProductCatalog
from bakery.config import Settings, get_settings
from bakery.domain.models import Customer, Employee, Order, OrderItem, Product, ShippingSpeed
from bakery.errors import BakeryError, ContainerError, EmptyError
from bakery.infrastructure.snapshot_store import Snapshot, SnapshotStore
from bakery.services import BakeryService
from bakery.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Service
    "BakeryService",
    "ProductCatalog",
    # Records
    "Customer",
    "Employee",
    "Order",
    "OrderItem",
    "Product",
    "ShippingSpeed",
    # Persistence
    "Snapshot",
    "SnapshotStore",
    # Errors
    "BakeryError",
    "ContainerError",
    "EmptyError",
    # Logging
    "configure_logging",
    "get_logger",
]
