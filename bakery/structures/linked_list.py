"""
Generic doubly linked list with position-based cursors.

The list keeps one built-in cursor, driven by `position_iterator`,
`advance_iterator`, `get_iterator`, `remove_iterator` and friends. Collaborators
use it for the scan-and-remove pattern, e.g. moving an order from a customer's
unshipped list to the shipped list.

`LinkedList.cursor()` hands out additional independent cursors, so a nested
traversal does not disturb the built-in one. A node removed through any cursor
is detached, and every cursor still resting on it reports `off_end()`.

Usage:
    orders = LinkedList()
    orders.add_last(order)
    orders.position_iterator()
    while not orders.off_end():
        if orders.get_iterator() == target:
            orders.remove_iterator()
            break
        orders.advance_iterator()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, Optional, TypeVar

from bakery.errors import CursorError, EmptyError

T = TypeVar("T")


@dataclass(slots=True, eq=False)
class _Node(Generic[T]):
    value: T
    prev: Optional["_Node[T]"] = None
    next: Optional["_Node[T]"] = None
    linked: bool = True


class Cursor(Generic[T]):
    """
    A position inside a `LinkedList`.

    A fresh cursor is unpositioned (off end). After `remove()` the cursor is
    unpositioned again and must be re-positioned before traversal continues.
    """

    def __init__(self, owner: "LinkedList[T]") -> None:
        self._owner = owner
        self._node: Optional[_Node[T]] = None

    @property
    def index(self) -> int:
        """
        Zero-based position of the cursor, or -1 when off end.

        Counted back from the node on each call, so edits made through the list
        or through other cursors are reflected.
        """
        if self.off_end():
            return -1
        index = 0
        node = self._node.prev  # type: ignore[union-attr]
        while node is not None:
            index += 1
            node = node.prev
        return index

    def off_end(self) -> bool:
        return self._node is None or not self._node.linked

    def position(self) -> None:
        self._node = self._owner._first

    def move_to(self, index: int) -> None:
        """Place the cursor on the node at `index`."""
        if index < 0 or index >= len(self._owner):
            raise IndexError(f"move_to(): index {index} out of range for length {len(self._owner)}")
        node = self._owner._first
        for _ in range(index):
            node = node.next  # type: ignore[union-attr]
        self._node = node

    def _require(self, operation: str) -> _Node[T]:
        if self.off_end():
            raise CursorError(f"{operation}(): cursor is off end")
        assert self._node is not None
        return self._node

    def advance(self) -> None:
        node = self._require("advance")
        self._node = node.next

    def reverse(self) -> None:
        node = self._require("reverse")
        self._node = node.prev

    def get(self) -> T:
        return self._require("get").value

    def insert_after(self, value: T) -> None:
        node = self._require("insert_after")
        self._owner._insert_after(node, value)

    def remove(self) -> T:
        node = self._require("remove")
        self._owner._unlink(node)
        self._node = None
        return node.value


class LinkedList(Generic[T]):
    """
    Doubly linked list owning its nodes exclusively.

    Invariants: `first.prev is None`, `last.next is None`, and `len(self)` equals
    the number of nodes reachable from `first`.
    """

    def __init__(self, values: Optional[Iterable[T]] = None) -> None:
        self._first: Optional[_Node[T]] = None
        self._last: Optional[_Node[T]] = None
        self._length = 0
        self._iterator: Cursor[T] = Cursor(self)
        if values is not None:
            for value in values:
                self.add_last(value)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[T]:
        node = self._first
        while node is not None:
            yield node.value
            node = node.next

    def is_empty(self) -> bool:
        return self._length == 0

    def get_first(self) -> T:
        if self._first is None:
            raise EmptyError("get_first(): list is empty")
        return self._first.value

    def get_last(self) -> T:
        if self._last is None:
            raise EmptyError("get_last(): list is empty")
        return self._last.value

    def find_index(self, value: T) -> int:
        """Return the index of the first element equal to `value`, or -1."""
        for index, current in enumerate(self):
            if current == value:
                return index
        return -1

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def add_first(self, value: T) -> None:
        node = _Node(value)
        if self._first is None:
            self._first = self._last = node
        else:
            node.next = self._first
            self._first.prev = node
            self._first = node
        self._length += 1

    def add_last(self, value: T) -> None:
        node = _Node(value)
        if self._last is None:
            self._first = self._last = node
        else:
            node.prev = self._last
            self._last.next = node
            self._last = node
        self._length += 1

    def remove_first(self) -> T:
        if self._first is None:
            raise EmptyError("remove_first(): list is empty")
        node = self._first
        self._unlink(node)
        return node.value

    def remove_last(self) -> T:
        if self._last is None:
            raise EmptyError("remove_last(): list is empty")
        node = self._last
        self._unlink(node)
        return node.value

    def clear(self) -> None:
        node = self._first
        while node is not None:
            following = node.next
            node.linked = False
            node.prev = node.next = None
            node = following
        self._first = self._last = None
        self._length = 0

    def _insert_after(self, node: _Node[T], value: T) -> None:
        if node is self._last:
            self.add_last(value)
            return
        new = _Node(value, prev=node, next=node.next)
        node.next.prev = new  # type: ignore[union-attr]
        node.next = new
        self._length += 1

    def _unlink(self, node: _Node[T]) -> None:
        if node.prev is None:
            self._first = node.next
        else:
            node.prev.next = node.next
        if node.next is None:
            self._last = node.prev
        else:
            node.next.prev = node.prev
        node.prev = node.next = None
        node.linked = False
        self._length -= 1

    # ------------------------------------------------------------------
    # Built-in cursor
    # ------------------------------------------------------------------
    def cursor(self) -> Cursor[T]:
        """Return a new, unpositioned cursor independent of the built-in one."""
        return Cursor(self)

    def position_iterator(self) -> None:
        self._iterator.position()

    def off_end(self) -> bool:
        return self._iterator.off_end()

    def advance_iterator(self) -> None:
        self._iterator.advance()

    def reverse_iterator(self) -> None:
        self._iterator.reverse()

    def get_iterator(self) -> T:
        return self._iterator.get()

    def add_iterator(self, value: T) -> None:
        """Insert `value` right after the cursor."""
        self._iterator.insert_after(value)

    def remove_iterator(self) -> T:
        """Remove the element under the cursor; the cursor becomes unpositioned."""
        return self._iterator.remove()

    def advance_iterator_to_index(self, index: int) -> None:
        self._iterator.move_to(index)

    # ------------------------------------------------------------------
    # Additional operations
    # ------------------------------------------------------------------
    def spin(self, moves: int) -> None:
        """
        Rotate the list `moves` steps toward the end; nodes falling off the end
        wrap to the front. [1, 2, 3, 4, 5] spun by 2 becomes [4, 5, 1, 2, 3].
        Cursors keep referencing the same nodes.
        """
        if moves < 0:
            raise ValueError("spin(): moves must be >= 0")
        if self._length < 2:
            return
        for _ in range(moves % self._length):
            node = self._last
            assert node is not None and node.prev is not None
            self._last = node.prev
            self._last.next = None
            node.prev = None
            node.next = self._first
            self._first.prev = node  # type: ignore[union-attr]
            self._first = node

    def interleave(self, other: "LinkedList[T]") -> "LinkedList[T]":
        """Return a new list alternating values from self and `other`."""
        result: LinkedList[T] = LinkedList()
        mine, theirs = self._first, other._first
        while mine is not None or theirs is not None:
            if mine is not None:
                result.add_last(mine.value)
                mine = mine.next
            if theirs is not None:
                result.add_last(theirs.value)
                theirs = theirs.next
        return result

    def numbered(self) -> str:
        """Render the elements as a 1-based numbered listing."""
        if self.is_empty():
            return "(empty)\n"
        return "".join(f"{position}. {value}\n" for position, value in enumerate(self, start=1))

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, LinkedList):
            return NotImplemented
        if self._length != other._length:
            return False
        return all(mine == theirs for mine, theirs in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return " ".join(str(value) for value in self)

    def __repr__(self) -> str:
        return f"LinkedList([{', '.join(repr(value) for value in self)}])"


__all__ = ["LinkedList", "Cursor"]
