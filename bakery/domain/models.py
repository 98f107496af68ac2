"""
Domain models for the bakery system.

Products, orders and user accounts are pydantic models so that they validate on
construction and serialize straight into the JSON snapshot. Each record defines
its own identity (`__eq__` / `__hash__`) because the hash table and BSTs look
records up by probe keys: partially populated instances built with
`model_construct` that carry only the identity fields.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Set, Union

from pydantic import BaseModel, Field, PrivateAttr, computed_field, field_validator

from bakery.domain.ids import IdGenerator
from bakery.errors import InsufficientStockError, OrderStateError
from bakery.structures.linked_list import LinkedList

EPOCH = date(1970, 1, 1)
TIER_WEIGHT = 1_000_000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are read as UTC; aware ones are converted to it."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _sanitize(text: str) -> str:
    """Collapse commas and line breaks to spaces so values stay single-field."""
    for char in (",", "\n", "\r"):
        text = text.replace(char, " ")
    return text.strip()


# ----------------------------------------------------------------------
# Shipping and priority
# ----------------------------------------------------------------------
class ShippingSpeed(str, Enum):
    """Shipping options; the tier dominates the order priority."""

    STANDARD = "STANDARD"
    RUSH = "RUSH"
    OVERNIGHT = "OVERNIGHT"

    @property
    def tier(self) -> int:
        return _SPEED_TABLE[self][0]

    @property
    def cost(self) -> float:
        return _SPEED_TABLE[self][1]

    @property
    def estimated_days(self) -> int:
        return _SPEED_TABLE[self][2]


# speed -> (tier, cost, estimated delivery days)
_SPEED_TABLE = {
    ShippingSpeed.STANDARD: (1, 5.99, 5),
    ShippingSpeed.RUSH: (2, 15.99, 2),
    ShippingSpeed.OVERNIGHT: (3, 29.99, 1),
}


def days_since_epoch(day: date) -> int:
    return (day - EPOCH).days


def order_priority(speed: ShippingSpeed, created_on: date) -> int:
    """
    `tier * 1_000_000 - days_since_epoch(created_on)`.

    A faster tier always wins. Within a tier an earlier date subtracts less,
    so older orders rank higher (FIFO within tier).
    """
    return speed.tier * TIER_WEIGHT - days_since_epoch(created_on)


# ----------------------------------------------------------------------
# Orders
# ----------------------------------------------------------------------
class OrderItem(BaseModel):
    """One catalog product line inside an order."""

    product_id: str = Field(..., description="Catalog id of the product.")
    product_name: str = Field(..., description="Product name at order time.")
    quantity: int = Field(..., ge=1, description="Units ordered.")
    unit_price: float = Field(..., gt=0, description="Price per unit at order time.")

    model_config = {"frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> float:
        return round(self.quantity * self.unit_price, 2)


class Order(BaseModel):
    """
    A customer order.

    `priority` is derived from the frozen `shipping_speed` and `created_at`
    fields, so it never changes over the order's lifetime.
    """

    id: str = Field(..., frozen=True, description="Unique order id, e.g. O1000.")
    customer_email: str = Field(..., frozen=True, description="Owning customer's email.")
    items: List[OrderItem] = Field(..., min_length=1)
    shipping_speed: ShippingSpeed = Field(ShippingSpeed.STANDARD, frozen=True)
    shipping_address: str = Field(...)
    created_at: datetime = Field(default_factory=_utcnow, frozen=True)
    shipped: bool = False
    shipped_at: Optional[datetime] = None

    @field_validator("customer_email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("customer email cannot be empty")
        return value

    @field_validator("shipping_address")
    @classmethod
    def _clean_address(cls, value: str) -> str:
        value = value.replace("\n", " ").replace("\r", " ").strip()
        if not value:
            raise ValueError("shipping address cannot be empty")
        return value

    @field_validator("created_at", "shipped_at")
    @classmethod
    def _to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @classmethod
    def create(
        cls,
        ids: IdGenerator,
        customer_email: str,
        items: List[OrderItem],
        shipping_speed: ShippingSpeed,
        shipping_address: str,
        created_at: Optional[datetime] = None,
    ) -> "Order":
        """Build a new order; the id is drawn from `ids` only once the fields validate."""
        draft = cls(
            id="",
            customer_email=customer_email,
            items=items,
            shipping_speed=shipping_speed,
            shipping_address=shipping_address,
            created_at=created_at or _utcnow(),
        )
        return draft.model_copy(update={"id": ids.next_id()})

    @computed_field  # type: ignore[prop-decorator]
    @property
    def priority(self) -> int:
        return order_priority(self.shipping_speed, self.created_at.date())

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> float:
        return round(sum(item.subtotal for item in self.items), 2)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def shipping_cost(self) -> float:
        return self.shipping_speed.cost

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> float:
        return round(self.subtotal + self.shipping_cost, 2)

    def mark_shipped(self, at: Optional[datetime] = None) -> None:
        if self.shipped:
            raise OrderStateError(f"Order {self.id} has already been shipped")
        self.shipped = True
        self.shipped_at = _as_utc(at) or _utcnow()

    def estimated_delivery(self) -> datetime:
        base = self.shipped_at or _utcnow()
        return base + timedelta(days=self.shipping_speed.estimated_days)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        status = "Shipped" if self.shipped else "Pending"
        return (
            f"Order #{self.id} | Customer: {self.customer_email} | "
            f"{self.shipping_speed.value} | Total: ${self.total:.2f} | Status: {status}"
        )


# ----------------------------------------------------------------------
# Products
# ----------------------------------------------------------------------
class Product(BaseModel):
    """
    A catalog product. `name` is the case-insensitive primary key; `price` is
    the secondary (non-unique) key used by the price index.
    """

    id: str = Field("", description="Catalog id, e.g. P1000.")
    name: str = Field(...)
    category: str = ""
    price: float = Field(..., ge=0.01)
    stock: int = Field(0, ge=0)
    description: str = ""
    allergens: Set[str] = Field(default_factory=set)
    calories: int = Field(1, ge=1)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str) -> str:
        value = _sanitize(value)
        if not value:
            raise ValueError("product name cannot be empty")
        return value

    @field_validator("category", "description")
    @classmethod
    def _clean_text(cls, value: str) -> str:
        return _sanitize(value)

    @field_validator("allergens", mode="before")
    @classmethod
    def _normalize_allergens(cls, value: Any) -> Any:
        if value is None:
            return set()
        if isinstance(value, str):
            value = value.split(",")
        return {str(item).strip().lower() for item in value if str(item).strip()}

    @classmethod
    def create(cls, ids: IdGenerator, **fields: Any) -> "Product":
        product = cls(**fields)
        product.id = ids.next_id()
        return product

    @classmethod
    def probe(cls, name: str = "", price: float = 0.0) -> "Product":
        """Unvalidated lookup key carrying only a name and/or price."""
        return cls.model_construct(name=_sanitize(name), price=price)

    @property
    def key(self) -> str:
        return self.name.casefold()

    def set_price(self, price: float) -> None:
        if price < 0.01:
            raise ValueError(f"Invalid price: {price}")
        self.price = price
        self.updated_at = _utcnow()

    def set_stock(self, stock: int) -> None:
        if stock < 0:
            raise ValueError(f"Invalid stock: {stock}")
        self.stock = stock
        self.updated_at = _utcnow()

    def set_description(self, description: str) -> None:
        self.description = _sanitize(description)
        self.updated_at = _utcnow()

    def decrement_stock(self, quantity: int) -> None:
        if quantity > self.stock:
            raise InsufficientStockError(
                f"Only {self.stock} of {self.name!r} in stock, {quantity} requested"
            )
        self.stock -= quantity
        self.updated_at = _utcnow()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.name} | {self.category} | ${self.price:.2f} | {self.stock} in stock"


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------
class _Account(BaseModel):
    """Identity and credential fields shared by every account kind."""

    first_name: str = ""
    last_name: str = ""
    email: str = Field(...)
    password: str = ""

    @field_validator("first_name", "last_name", "password")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @classmethod
    def probe(cls, email: str):
        """Identity-only key for hash table lookups."""
        return cls.model_construct(email=email.strip().lower())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Account):
            return NotImplemented
        return type(self) is type(other) and self.email == other.email

    def __hash__(self) -> int:
        return hash(self.email)


class Customer(_Account):
    """A customer with contact details and per-customer order history."""

    kind: Literal["customer"] = "customer"
    address: str = ""
    phone: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""

    _unshipped: LinkedList[Order] = PrivateAttr(default_factory=LinkedList)
    _shipped: LinkedList[Order] = PrivateAttr(default_factory=LinkedList)

    @property
    def unshipped_orders(self) -> LinkedList[Order]:
        return self._unshipped

    @property
    def shipped_orders(self) -> LinkedList[Order]:
        return self._shipped

    def add_unshipped_order(self, order: Order) -> None:
        self._unshipped.add_last(order)

    def move_order_to_shipped(self, order: Order) -> bool:
        """
        Move `order` from the unshipped list to the end of the shipped list,
        marking it shipped if needed. Returns False when it is not unshipped here.
        """
        self._unshipped.position_iterator()
        while not self._unshipped.off_end():
            if self._unshipped.get_iterator() == order:
                self._unshipped.remove_iterator()
                if not order.shipped:
                    order.mark_shipped()
                self._shipped.add_last(order)
                return True
            self._unshipped.advance_iterator()
        return False

    @property
    def mailing_address(self) -> str:
        parts = [self.address, self.city, f"{self.state} {self.zip}".strip()]
        return ", ".join(part for part in parts if part)

    def __str__(self) -> str:
        return (
            f"Customer [{self.full_name} | Email: {self.email} | "
            f"Addr: {self.mailing_address} | Phone: {self.phone}]"
        )


class Employee(_Account):
    """A staff account; managers may also edit the catalog."""

    kind: Literal["employee"] = "employee"
    is_manager: bool = False

    def __str__(self) -> str:
        title = "Manager" if self.is_manager else "Employee"
        return f"Employee [{self.full_name} | Email: {self.email} | Role: {title}]"


User = Annotated[Union[Customer, Employee], Field(discriminator="kind")]


def role(user: Union[Customer, Employee]) -> str:
    """Return `customer`, `employee` or `manager` by dispatching on the account kind."""
    if user.kind == "customer":
        return "customer"
    if user.kind == "employee":
        return "manager" if user.is_manager else "employee"
    raise ValueError(f"Unknown account kind: {user.kind!r}")


__all__ = [
    "ShippingSpeed",
    "OrderItem",
    "Order",
    "Product",
    "Customer",
    "Employee",
    "User",
    "role",
    "order_priority",
    "days_since_epoch",
]
