from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

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
from bakery.errors import InsufficientStockError, OrderStateError

CREATED = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
EXPECTED_DAYS = 19783  # 2024-03-01 minus 1970-01-01


def make_order(
    speed: ShippingSpeed = ShippingSpeed.STANDARD,
    created_at: datetime = CREATED,
    ids: IdGenerator | None = None,
) -> Order:
    return Order.create(
        ids or IdGenerator("O"),
        customer_email=" Ada@Example.com ",
        items=[
            OrderItem(product_id="P1000", product_name="Brioche", quantity=2, unit_price=3.20),
            OrderItem(product_id="P1001", product_name="Custard Bun", quantity=1, unit_price=2.50),
        ],
        shipping_speed=speed,
        shipping_address="12 Analytical Way\nLondon",
        created_at=created_at,
    )


@pytest.mark.parametrize(
    "speed, tier, cost, days",
    [
        (ShippingSpeed.STANDARD, 1, 5.99, 5),
        (ShippingSpeed.RUSH, 2, 15.99, 2),
        (ShippingSpeed.OVERNIGHT, 3, 29.99, 1),
    ],
)
def test_shipping_speed_table(speed: ShippingSpeed, tier: int, cost: float, days: int) -> None:
    assert speed.tier == tier
    assert speed.cost == cost
    assert speed.estimated_days == days


def test_priority_formula() -> None:
    assert days_since_epoch(date(2024, 3, 1)) == EXPECTED_DAYS
    assert order_priority(ShippingSpeed.RUSH, date(2024, 3, 1)) == 2_000_000 - EXPECTED_DAYS


def test_faster_tier_always_wins_and_older_wins_within_tier() -> None:
    old_standard = order_priority(ShippingSpeed.STANDARD, date(2000, 1, 1))
    new_rush = order_priority(ShippingSpeed.RUSH, date(2030, 1, 1))
    assert new_rush > old_standard

    earlier = order_priority(ShippingSpeed.STANDARD, date(2024, 1, 1))
    later = order_priority(ShippingSpeed.STANDARD, date(2024, 1, 2))
    assert earlier > later


def test_order_create_normalizes_and_totals() -> None:
    order = make_order(ShippingSpeed.RUSH)

    assert order.id == "O1000"
    assert order.customer_email == "ada@example.com"
    assert order.shipping_address == "12 Analytical Way London"
    assert order.subtotal == 8.90
    assert order.shipping_cost == 15.99
    assert order.total == 24.89
    assert order.priority == 2_000_000 - EXPECTED_DAYS
    assert str(order) == "Order #O1000 | Customer: ada@example.com | RUSH | Total: $24.89 | Status: Pending"


def test_order_requires_items_and_address() -> None:
    with pytest.raises(ValidationError):
        Order(id="O1", customer_email="a@x.com", items=[], shipping_address="here")
    with pytest.raises(ValidationError):
        Order(
            id="O1",
            customer_email="a@x.com",
            items=[OrderItem(product_id="P1", product_name="Bun", quantity=1, unit_price=1.0)],
            shipping_address="  ",
        )


def test_priority_inputs_are_frozen() -> None:
    order = make_order()
    with pytest.raises(ValidationError):
        order.shipping_speed = ShippingSpeed.OVERNIGHT
    with pytest.raises(ValidationError):
        order.created_at = CREATED + timedelta(days=1)


def test_mark_shipped_once() -> None:
    order = make_order(ShippingSpeed.OVERNIGHT)
    shipped_at = CREATED + timedelta(hours=3)
    order.mark_shipped(shipped_at)

    assert order.shipped
    assert order.estimated_delivery() == shipped_at + timedelta(days=1)
    assert str(order).endswith("Status: Shipped")
    with pytest.raises(OrderStateError):
        order.mark_shipped()


def test_priority_date_is_taken_in_utc() -> None:
    as_utc = make_order(ShippingSpeed.RUSH, datetime(2024, 5, 7, 2, 0, tzinfo=timezone.utc))
    eastern = timezone(timedelta(hours=-5))
    as_eastern = make_order(ShippingSpeed.RUSH, datetime(2024, 5, 6, 21, 0, tzinfo=eastern))

    assert as_eastern.created_at == as_utc.created_at
    assert as_eastern.created_at.tzinfo == timezone.utc
    assert as_eastern.priority == as_utc.priority == 2_000_000 - days_since_epoch(date(2024, 5, 7))


def test_naive_timestamps_are_read_as_utc() -> None:
    order = make_order(created_at=datetime(2024, 5, 7))
    order.mark_shipped(datetime(2024, 5, 8, 12, 0))

    assert order.created_at == datetime(2024, 5, 7, tzinfo=timezone.utc)
    assert order.shipped_at == datetime(2024, 5, 8, 12, 0, tzinfo=timezone.utc)
    assert order.shipped_at > CREATED


def test_rejected_order_does_not_consume_an_id() -> None:
    ids = IdGenerator("O")
    with pytest.raises(ValidationError):
        Order.create(
            ids,
            customer_email="guest@noemail",
            items=[OrderItem(product_id="P1", product_name="Bun", quantity=1, unit_price=1.0)],
            shipping_speed=ShippingSpeed.STANDARD,
            shipping_address=" ",
        )

    assert make_order(ids=ids).id == "O1000"


def test_orders_compare_by_id() -> None:
    first = make_order()
    same_id = first.model_copy(update={"shipping_address": "elsewhere"})
    assert first == same_id
    assert len({first, same_id}) == 1


def test_product_validation_and_normalization() -> None:
    product = Product.create(
        IdGenerator("P"),
        name=" Lemon, Tart ",
        category="Pastry",
        price=4.25,
        allergens="Wheat, MILK ,egg",
        calories=350,
    )

    assert product.id == "P1000"
    assert product.name == "Lemon  Tart"
    assert product.allergens == {"wheat", "milk", "egg"}
    assert str(product) == "Lemon  Tart | Pastry | $4.25 | 0 in stock"

    for bad in ({"price": 0}, {"stock": -1}, {"calories": 0}, {"name": "   "}):
        fields = {"name": "Bun", "price": 1.0, **bad}
        with pytest.raises(ValidationError):
            Product(**fields)


def test_product_identity_is_case_insensitive_name() -> None:
    product = Product(name="Brioche", price=3.20)
    assert product == Product.probe(name="BRIOCHE")
    assert hash(product) == hash(Product.probe(name="brioche"))
    assert product != Product(name="Baguette", price=3.20)


def test_product_mutators() -> None:
    product = Product(name="Bun", price=1.0, stock=3)
    product.set_price(1.5)
    product.set_stock(5)
    product.set_description("soft,\nsweet")
    product.decrement_stock(2)

    assert (product.price, product.stock, product.description) == (1.5, 3, "soft  sweet")
    with pytest.raises(ValueError):
        product.set_price(0)
    with pytest.raises(ValueError):
        product.set_stock(-1)
    with pytest.raises(InsufficientStockError):
        product.decrement_stock(4)
    assert product.stock == 3


def test_customer_moves_order_between_histories() -> None:
    customer = Customer(email="ada@example.com", address="1 Main St", city="Springfield", state="IL", zip="62701")
    ids = IdGenerator("O")
    first, other, never_added = (make_order(ids=ids) for _ in range(3))
    customer.add_unshipped_order(first)
    customer.add_unshipped_order(other)

    assert customer.move_order_to_shipped(other)
    assert other.shipped
    assert list(customer.unshipped_orders) == [first]
    assert list(customer.shipped_orders) == [other]
    assert not customer.move_order_to_shipped(never_added)
    assert customer.mailing_address == "1 Main St, Springfield, IL 62701"


def test_accounts_compare_by_kind_and_email() -> None:
    customer = Customer(email="Pat@Example.com", password=" secret ")
    employee = Employee(email="pat@example.com")

    assert customer.email == "pat@example.com"
    assert customer.password == "secret"
    assert customer == Customer.probe("PAT@example.com")
    assert customer != employee


@pytest.mark.parametrize(
    "payload, expected_type, expected_role",
    [
        ({"kind": "customer", "email": "c@x.com"}, Customer, "customer"),
        ({"kind": "employee", "email": "e@x.com"}, Employee, "employee"),
        ({"kind": "employee", "email": "m@x.com", "is_manager": True}, Employee, "manager"),
    ],
)
def test_user_union_dispatches_on_kind(payload: dict, expected_type: type, expected_role: str) -> None:
    user = TypeAdapter(User).validate_python(payload)
    assert isinstance(user, expected_type)
    assert role(user) == expected_role
