"""
Fixed-size hash table with separate chaining.

Each bucket is a `LinkedList`. Values are their own keys: lookups hash and
compare a probe value, and `get` returns the stored value that compares equal.
A probe may carry only the identity fields (e.g. a customer with just an email)
and still retrieve the fully populated record.

The table never rehashes. `load_factor` is reported but does not trigger any
structural change, so worst-case lookups are bounded by chain length.
"""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

from bakery.errors import ConfigError, NullKeyError
from bakery.structures.linked_list import LinkedList

T = TypeVar("T")

_NON_NEGATIVE_MASK = 0x7FFFFFFF


class HashTable(Generic[T]):
    """
    Chained hash table keyed by the values' own `__hash__` / `__eq__`.

    Keeping hash and equality consistent (equal values hash equally) is the
    caller's obligation and is not checked.
    """

    def __init__(self, bucket_count: int, values: Optional[Iterable[T]] = None) -> None:
        if bucket_count <= 0:
            raise ConfigError(f"HashTable bucket_count must be > 0, got {bucket_count}")
        self._buckets: List[LinkedList[T]] = [LinkedList() for _ in range(bucket_count)]
        self._count = 0
        if values is not None:
            for value in values:
                self.add(value)

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    @property
    def load_factor(self) -> float:
        return self._count / len(self._buckets)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[T]:
        for bucket in self._buckets:
            yield from bucket

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]

    def bucket_of(self, value: T) -> int:
        """Return the bucket index `value` hashes to."""
        if value is None:
            raise NullKeyError("bucket_of(): value cannot be None")
        return (hash(value) & _NON_NEGATIVE_MASK) % len(self._buckets)

    def add(self, value: T) -> None:
        if value is None:
            raise NullKeyError("add(): value cannot be None")
        self._buckets[self.bucket_of(value)].add_last(value)
        self._count += 1

    def get(self, probe: T) -> Optional[T]:
        """Return the stored value equal to `probe`, or None."""
        if probe is None:
            raise NullKeyError("get(): probe cannot be None")
        for stored in self._buckets[self.bucket_of(probe)]:
            if stored == probe:
                return stored
        return None

    def find(self, probe: T) -> int:
        """Return the bucket index holding `probe`, or -1 if absent."""
        if probe is None:
            raise NullKeyError("find(): probe cannot be None")
        bucket = self.bucket_of(probe)
        return bucket if self._buckets[bucket].find_index(probe) != -1 else -1

    def contains(self, probe: T) -> bool:
        if probe is None:
            raise NullKeyError("contains(): probe cannot be None")
        return self.find(probe) != -1

    def delete(self, probe: T) -> bool:
        """Remove the first stored value equal to `probe`; return whether one was removed."""
        if probe is None:
            raise NullKeyError("delete(): probe cannot be None")
        bucket = self._buckets[self.bucket_of(probe)]
        bucket.position_iterator()
        while not bucket.off_end():
            if bucket.get_iterator() == probe:
                bucket.remove_iterator()
                self._count -= 1
                return True
            bucket.advance_iterator()
        return False

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._count = 0

    def _check_bucket(self, index: int, operation: str) -> LinkedList[T]:
        if index < 0 or index >= len(self._buckets):
            raise IndexError(f"{operation}(): bucket index {index} out of range")
        return self._buckets[index]

    def count_bucket(self, index: int) -> int:
        return len(self._check_bucket(index, "count_bucket"))

    def bucket_to_string(self, index: int) -> str:
        return str(self._check_bucket(index, "bucket_to_string"))

    def rows(self) -> str:
        """One line per bucket showing its first value or `empty`."""
        lines = []
        for index, bucket in enumerate(self._buckets):
            head = "empty" if bucket.is_empty() else str(bucket.get_first())
            lines.append(f"Bucket {index}: {head}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return "\n".join(str(bucket) for bucket in self._buckets if not bucket.is_empty())


__all__ = ["HashTable"]
