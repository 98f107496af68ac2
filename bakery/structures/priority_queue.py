"""
Array-backed binary max-heap that decides which unshipped order ships next.

Slots are 1-indexed; slot 0 is an unused sentinel so that the parent of slot
`i` is `i // 2` and its children are `2i` and `2i + 1`. After every public
method returns, `priority(slots[i]) <= priority(slots[i // 2])` holds for all
`i > 1`. Ties are not broken stably.

Lookups by id or customer are linear scans: beyond the root the heap array is
not sorted, so O(n) is the expected cost of those inspection helpers.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Callable, Generic, Iterator, List, Optional, Protocol, TypeVar, runtime_checkable

from bakery.errors import EmptyError


@runtime_checkable
class Prioritized(Protocol):
    """Anything carrying an integer `priority`; higher means more urgent."""

    priority: int


@runtime_checkable
class QueueableOrder(Prioritized, Protocol):
    """The order surface the queue's search helpers rely on."""

    id: str
    customer_email: str


T = TypeVar("T")

priority_of: Callable[[Prioritized], int] = attrgetter("priority")


class PriorityQueue(Generic[T]):
    """
    Max-heap of orders keyed by their derived priority.

    Parameters
    ----------
    key : Callable[[T], int]
        Reads the priority of an element. Defaults to the `priority` attribute.
    """

    def __init__(self, key: Callable[[T], int] = priority_of) -> None:  # type: ignore[assignment]
        self._key = key
        self._slots: List[Optional[T]] = [None]

    # ------------------------------------------------------------------
    # Index helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _parent(index: int) -> int:
        return index // 2

    @staticmethod
    def _left(index: int) -> int:
        return 2 * index

    @staticmethod
    def _right(index: int) -> int:
        return 2 * index + 1

    def _priority(self, index: int) -> int:
        return self._key(self._slots[index])  # type: ignore[arg-type]

    def _swap(self, i: int, j: int) -> None:
        self._slots[i], self._slots[j] = self._slots[j], self._slots[i]

    # ------------------------------------------------------------------
    # Size
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._slots) - 1

    def is_empty(self) -> bool:
        return len(self) == 0

    def __iter__(self) -> Iterator[T]:
        """Iterate in heap (slot) order, not priority order."""
        return iter(self.as_list())

    # ------------------------------------------------------------------
    # Heap operations
    # ------------------------------------------------------------------
    def insert(self, order: T) -> None:
        self._slots.append(order)
        self._sift_up(len(self))

    def peek(self) -> T:
        if self.is_empty():
            raise EmptyError("peek(): no orders in queue")
        return self._slots[1]  # type: ignore[return-value]

    def remove(self) -> T:
        """Extract and return the highest-priority order."""
        if self.is_empty():
            raise EmptyError("remove(): no orders in queue")
        top = self._slots[1]
        last = self._slots.pop()
        if not self.is_empty():
            self._slots[1] = last
            self._sift_down(1)
        return top  # type: ignore[return-value]

    def _sift_up(self, index: int) -> None:
        while index > 1 and self._priority(index) > self._priority(self._parent(index)):
            self._swap(index, self._parent(index))
            index = self._parent(index)

    def _sift_down(self, index: int) -> None:
        size = len(self)
        while True:
            left, right = self._left(index), self._right(index)
            highest = index
            if left <= size and self._priority(left) > self._priority(highest):
                highest = left
            if right <= size and self._priority(right) > self._priority(highest):
                highest = right
            if highest == index:
                return
            self._swap(index, highest)
            index = highest

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def search_by_id(self, order_id: str) -> Optional[T]:
        for order in self._slots[1:]:
            if getattr(order, "id") == order_id:
                return order
        return None

    def search_by_customer(self, email: str) -> List[T]:
        email = email.strip().lower()
        return [order for order in self._slots[1:] if getattr(order, "customer_email") == email]

    def sorted_descending(self) -> List[T]:
        """Return a priority-sorted snapshot; the heap itself is untouched."""
        return sorted(self.as_list(), key=self._key, reverse=True)

    def as_list(self) -> List[T]:
        """Copy of the live slots in heap order."""
        return list(self._slots[1:])  # type: ignore[arg-type]


__all__ = ["PriorityQueue", "Prioritized", "QueueableOrder", "priority_of"]
