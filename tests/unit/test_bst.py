from __future__ import annotations

import random

import pytest

from bakery.domain.models import Product
from bakery.errors import EmptyError
from bakery.structures.bst import BinarySearchTree, by_key

VALUES = [50, 30, 70, 20, 40, 60, 80]


@pytest.fixture
def tree() -> BinarySearchTree[int]:
    return BinarySearchTree(values=VALUES)


def test_in_order_is_sorted_and_size_counts_inserts() -> None:
    rng = random.Random(7)
    tree: BinarySearchTree[int] = BinarySearchTree(values=[5, 5, 1])
    values = [rng.randint(0, 50) for _ in range(40)]
    for value in values:
        tree.insert(value)

    result = tree.in_order()
    assert result == sorted(result)
    assert tree.size() == len(values) + 3
    assert len(tree) == tree.size()


def test_traversals(tree: BinarySearchTree[int]) -> None:
    assert tree.in_order() == [20, 30, 40, 50, 60, 70, 80]
    assert tree.pre_order() == [50, 30, 20, 40, 70, 60, 80]
    assert tree.post_order() == [20, 40, 30, 60, 80, 70, 50]
    assert tree.level_order() == [50, 30, 70, 20, 40, 60, 80]
    assert str(tree) == "[50, 30, 70, 20, 40, 60, 80]"
    assert tree.in_order_string() == "20 30 40 50 60 70 80"


def test_height_and_extremes(tree: BinarySearchTree[int]) -> None:
    assert tree.height() == 2
    assert tree.find_min() == 20
    assert tree.find_max() == 80
    assert BinarySearchTree().height() == -1
    assert BinarySearchTree(values=[1]).height() == 0


@pytest.mark.parametrize("operation", ["find_min", "find_max"])
def test_extremes_of_empty_tree_raise(operation: str) -> None:
    with pytest.raises(EmptyError):
        getattr(BinarySearchTree(), operation)()


def test_search_returns_none_when_absent(tree: BinarySearchTree[int]) -> None:
    assert tree.search(40) == 40
    assert tree.search(45) is None
    assert 60 in tree
    assert 65 not in tree


@pytest.mark.parametrize("victim", [20, 30, 50])
def test_remove_leaf_one_child_and_two_children(tree: BinarySearchTree[int], victim: int) -> None:
    assert tree.remove(victim)
    remaining = [value for value in VALUES if value != victim]
    assert tree.in_order() == sorted(remaining)
    assert tree.search(victim) is None


def test_remove_root_uses_in_order_successor(tree: BinarySearchTree[int]) -> None:
    tree.remove(50)
    assert tree.level_order()[0] == 60


def test_remove_missing_value_returns_false(tree: BinarySearchTree[int]) -> None:
    assert not tree.remove(99)
    assert tree.size() == len(VALUES)


def test_duplicates_route_right_and_stay_reachable() -> None:
    names = BinarySearchTree(by_key(lambda product: product.key))
    first = Product(name="Scone", price=2.00, description="plain")
    second = Product(name="scone", price=2.50, description="cheese")
    names.insert(first)
    names.insert(second)

    assert names.size() == 2
    root, child = names.pre_order()
    assert root is first
    assert child is second
    assert names.search(Product.probe(name="SCONE")) is first
    assert names.remove(Product.probe(name="scone"))
    assert names.search(Product.probe(name="scone")) is second


def test_remove_two_children_with_duplicate_successor() -> None:
    tree = BinarySearchTree(values=[10, 5, 20, 20, 15])
    assert tree.remove(10)
    assert tree.in_order() == [5, 15, 20, 20]


def test_search_with_descends_on_custom_comparison(tree: BinarySearchTree[int]) -> None:
    def near_41(stored: int) -> int:
        if abs(stored - 41) <= 1:
            return 0
        return -1 if 41 < stored else 1

    assert tree.search_with(near_41) == 40


def test_lowest_common_ancestor(tree: BinarySearchTree[int]) -> None:
    assert tree.lowest_common_ancestor(20, 40) == 30
    assert tree.lowest_common_ancestor(20, 80) == 50
    assert tree.lowest_common_ancestor(60, 70) == 70
    assert tree.lowest_common_ancestor(20, 99) is None


def test_copy_is_structurally_identical_and_independent(tree: BinarySearchTree[int]) -> None:
    clone = tree.copy()
    assert clone.pre_order() == tree.pre_order()

    clone.insert(90)
    assert 90 not in tree


def test_clear(tree: BinarySearchTree[int]) -> None:
    tree.clear()
    assert tree.is_empty()
    assert tree.in_order() == []
