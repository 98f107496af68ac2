"""
Domain package for the bakery system.

Exports the records (products, orders, accounts) and the id generator used by
the catalog, the service layer and the snapshot store. Keep this package focused
on data definitions, validation and record identity.
"""

from bakery.domain.ids import IdGenerator
from bakery.domain.models import (
    Customer,
    Employee,
    Order,
    OrderItem,
    Product,
    ShippingSpeed,
    User,
    days_since_epoch,
    order_priority,
    role,
)

__all__ = [
    "IdGenerator",
    "Customer",
    "Employee",
    "Order",
    "OrderItem",
    "Product",
    "ShippingSpeed",
    "User",
    "days_since_epoch",
    "order_priority",
    "role",
]
