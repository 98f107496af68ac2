"""
Unbalanced binary search tree ordered by a caller-supplied comparison.

The ordering lives in the tree, not in the values: one tree type serves both
catalog indices, each built with its own comparison function. Duplicates (compare
== 0) are routed to the right subtree and retained. The tree is never
rebalanced, so height depends on insertion order.

Usage:
    by_name = BinarySearchTree(by_key(lambda p: p.name.casefold()))
    by_name.insert(product)
    by_name.search(Product.probe(name="Brioche"))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from bakery.errors import EmptyError
from bakery.structures.linked_list import LinkedList

T = TypeVar("T")
K = TypeVar("K")

Compare = Callable[[T, T], int]


def natural_compare(left: Any, right: Any) -> int:
    """Three-way comparison using the values' own `<` and `>`."""
    return (left > right) - (left < right)


def by_key(key: Callable[[T], Any]) -> Compare[T]:
    """Build a three-way comparison that orders values by `key(value)`."""

    def compare(left: T, right: T) -> int:
        return natural_compare(key(left), key(right))

    return compare


@dataclass(slots=True, eq=False)
class _TreeNode(Generic[T]):
    value: T
    left: Optional["_TreeNode[T]"] = None
    right: Optional["_TreeNode[T]"] = None


class BinarySearchTree(Generic[T]):
    """
    BST with left < node <= right under `compare`.

    Parameters
    ----------
    compare : Callable[[T, T], int]
        Three-way comparison; negative, zero or positive.
    values : iterable, optional
        Values inserted in order at construction.
    """

    def __init__(self, compare: Compare[T] = natural_compare, values: Optional[Iterable[T]] = None) -> None:
        self._compare = compare
        self._root: Optional[_TreeNode[T]] = None
        if values is not None:
            for value in values:
                self.insert(value)

    @property
    def compare(self) -> Compare[T]:
        return self._compare

    def copy(self) -> "BinarySearchTree[T]":
        """Return a structurally identical tree sharing the same values."""
        return BinarySearchTree(self._compare, self.pre_order())

    # ------------------------------------------------------------------
    # Size and shape
    # ------------------------------------------------------------------
    def is_empty(self) -> bool:
        return self._root is None

    def size(self) -> int:
        return self._size(self._root)

    def _size(self, node: Optional[_TreeNode[T]]) -> int:
        if node is None:
            return 0
        return 1 + self._size(node.left) + self._size(node.right)

    __len__ = size

    def height(self) -> int:
        """Height in edges; -1 for an empty tree, 0 for a single node."""
        return self._height(self._root)

    def _height(self, node: Optional[_TreeNode[T]]) -> int:
        if node is None:
            return -1
        return 1 + max(self._height(node.left), self._height(node.right))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find_min(self) -> T:
        if self._root is None:
            raise EmptyError("find_min(): tree is empty")
        return self._min_node(self._root).value

    def find_max(self) -> T:
        if self._root is None:
            raise EmptyError("find_max(): tree is empty")
        node = self._root
        while node.right is not None:
            node = node.right
        return node.value

    @staticmethod
    def _min_node(node: _TreeNode[T]) -> _TreeNode[T]:
        while node.left is not None:
            node = node.left
        return node

    def search(self, probe: T) -> Optional[T]:
        """Return the first stored value comparing equal to `probe`, or None. O(height)."""
        return self.search_with(lambda stored: self._compare(probe, stored))

    def search_with(self, probe: Callable[[T], int]) -> Optional[T]:
        """
        Descend using a one-argument probe.

        `probe(stored)` returns negative to go left, positive to go right and
        zero on a match. Lets a caller search the price index by price alone.
        """
        node = self._root
        while node is not None:
            cmp = probe(node.value)
            if cmp == 0:
                return node.value
            node = node.left if cmp < 0 else node.right
        return None

    def __contains__(self, probe: object) -> bool:
        return self.search(probe) is not None  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, value: T) -> None:
        new = _TreeNode(value)
        if self._root is None:
            self._root = new
            return
        node = self._root
        while True:
            if self._compare(value, node.value) < 0:
                if node.left is None:
                    node.left = new
                    return
                node = node.left
            else:
                if node.right is None:
                    node.right = new
                    return
                node = node.right

    def remove(self, probe: T) -> bool:
        """Remove the first value comparing equal to `probe`; return whether one was found."""
        self._root, removed = self._remove(probe, self._root)
        return removed

    def _remove(self, probe: T, node: Optional[_TreeNode[T]]) -> tuple[Optional[_TreeNode[T]], bool]:
        if node is None:
            return None, False
        cmp = self._compare(probe, node.value)
        if cmp < 0:
            node.left, removed = self._remove(probe, node.left)
            return node, removed
        if cmp > 0:
            node.right, removed = self._remove(probe, node.right)
            return node, removed
        if node.left is None:
            return node.right, True
        if node.right is None:
            return node.left, True
        # Two children: take the in-order successor's value, then remove it from the right.
        successor = self._min_node(node.right)
        node.value = successor.value
        node.right, _ = self._remove(successor.value, node.right)
        return node, True

    def clear(self) -> None:
        self._root = None

    # ------------------------------------------------------------------
    # Traversals (recomputed on every call)
    # ------------------------------------------------------------------
    def in_order(self) -> List[T]:
        result: List[T] = []
        self._in_order(self._root, result)
        return result

    def _in_order(self, node: Optional[_TreeNode[T]], out: List[T]) -> None:
        if node is None:
            return
        self._in_order(node.left, out)
        out.append(node.value)
        self._in_order(node.right, out)

    def pre_order(self) -> List[T]:
        result: List[T] = []
        self._pre_order(self._root, result)
        return result

    def _pre_order(self, node: Optional[_TreeNode[T]], out: List[T]) -> None:
        if node is None:
            return
        out.append(node.value)
        self._pre_order(node.left, out)
        self._pre_order(node.right, out)

    def post_order(self) -> List[T]:
        result: List[T] = []
        self._post_order(self._root, result)
        return result

    def _post_order(self, node: Optional[_TreeNode[T]], out: List[T]) -> None:
        if node is None:
            return
        self._post_order(node.left, out)
        self._post_order(node.right, out)
        out.append(node.value)

    def level_order(self) -> List[T]:
        result: List[T] = []
        if self._root is None:
            return result
        queue: LinkedList[_TreeNode[T]] = LinkedList([self._root])
        while not queue.is_empty():
            node = queue.remove_first()
            result.append(node.value)
            if node.left is not None:
                queue.add_last(node.left)
            if node.right is not None:
                queue.add_last(node.right)
        return result

    def __iter__(self) -> Iterator[T]:
        return iter(self.in_order())

    # ------------------------------------------------------------------
    # Lowest common ancestor
    # ------------------------------------------------------------------
    def lowest_common_ancestor(self, first: T, second: T) -> Optional[T]:
        """
        Return the value of the deepest node whose subtree holds both values,
        or None if either value is absent from the tree.
        """
        if self.search(first) is None or self.search(second) is None:
            return None
        node = self._root
        while node is not None:
            cmp_first = self._compare(first, node.value)
            cmp_second = self._compare(second, node.value)
            if cmp_first < 0 and cmp_second < 0:
                node = node.left
            elif cmp_first > 0 and cmp_second > 0:
                node = node.right
            else:
                return node.value
        return None

    def in_order_string(self) -> str:
        return " ".join(str(value) for value in self.in_order())

    def __str__(self) -> str:
        return "[" + ", ".join(str(value) for value in self.level_order()) + "]"


__all__ = ["BinarySearchTree", "natural_compare", "by_key", "Compare"]
