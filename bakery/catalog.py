"""
Product catalog backed by two binary search trees over the same products.

`by_name` orders products by case-insensitive name and answers name lookups.
`by_price` orders them by price, with the name as a tie-breaker so that removing
one product never removes a different product that happens to share its
price. Both trees always hold the same set of products.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional

from bakery.domain.models import Product
from bakery.errors import DuplicateProductError, ProductNotFoundError
from bakery.structures.bst import BinarySearchTree, by_key, natural_compare
from bakery.utils.logging import get_logger

log = get_logger(__name__)

PRICE_TOLERANCE = 1e-6


def compare_by_name(left: Product, right: Product) -> int:
    return natural_compare(left.key, right.key)


compare_by_price = by_key(lambda product: (product.price, product.key))


class ProductCatalog:
    """Dual-index catalog; every mutation touches both trees."""

    def __init__(self) -> None:
        self.by_name: BinarySearchTree[Product] = BinarySearchTree(compare_by_name)
        self.by_price: BinarySearchTree[Product] = BinarySearchTree(compare_by_price)

    def __len__(self) -> int:
        return self.by_name.size()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find_by_name(name) is not None

    def __iter__(self) -> Iterator[Product]:
        return iter(self.all_by_name())

    def add_product(self, product: Product) -> None:
        if self.by_name.search(product) is not None:
            raise DuplicateProductError(f"Product {product.name!r} already exists")
        self.by_name.insert(product)
        self.by_price.insert(product)
        log.debug("Product added", extra={"product": product.name, "price": product.price})

    def remove_product(self, product: Product) -> bool:
        """Remove `product` from both indices; returns False if it was not listed."""
        stored = self.by_name.search(product)
        if stored is None:
            return False
        self.by_name.remove(stored)
        self.by_price.remove(stored)
        log.debug("Product removed", extra={"product": stored.name})
        return True

    def find_by_name(self, name: str) -> Optional[Product]:
        return self.by_name.search(Product.probe(name=name))

    def find_by_exact_price(self, price: float) -> Optional[Product]:
        """Return a product priced at `price` (within 1e-6), descending the price index."""

        def probe(stored: Product) -> int:
            if math.isclose(price, stored.price, rel_tol=0.0, abs_tol=PRICE_TOLERANCE):
                return 0
            return -1 if price < stored.price else 1

        return self.by_price.search_with(probe)

    def update_product(
        self,
        product: Product,
        price: Optional[float] = None,
        stock: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Product:
        """
        Re-key the listed product matching `product` after changing its fields.

        Raises `ProductNotFoundError` when no product with that name is listed.
        """
        stored = self.by_name.search(product)
        if stored is None:
            raise ProductNotFoundError(f"No product named {product.name!r}")
        self.by_name.remove(stored)
        self.by_price.remove(stored)
        try:
            if price is not None:
                stored.set_price(price)
            if stock is not None:
                stored.set_stock(stock)
            if description is not None:
                stored.set_description(description)
        finally:
            self.by_name.insert(stored)
            self.by_price.insert(stored)
        return stored

    def all_by_name(self) -> List[Product]:
        return self.by_name.in_order()

    def all_by_price(self) -> List[Product]:
        return self.by_price.in_order()

    def products_in_price_range(self, low: float, high: float) -> List[Product]:
        return [product for product in self.by_price.in_order() if low <= product.price <= high]


__all__ = ["ProductCatalog", "compare_by_name", "compare_by_price"]
