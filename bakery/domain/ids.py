"""
Sequential identifier generation for orders and products.

The counter is the only state shared across record creation, so `next_id` holds a
lock across the read-increment-format step. One generator per record type lives
on the application context (`BakeryService`) and is injected into the
`Order.create` / `Product.create` factories.
"""

from __future__ import annotations

import re
import threading

_NUMERIC_SUFFIX = re.compile(r"(\d+)$")


class IdGenerator:
    """
    Thread-safe `<prefix><n>` generator, e.g. `O1000`, `O1001`, ...

    Parameters
    ----------
    prefix : str
        Leading tag identifying the record type.
    start : int
        First number handed out.
    """

    def __init__(self, prefix: str, start: int = 1000) -> None:
        self.prefix = prefix
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{self.prefix}{value}"

    def peek(self) -> str:
        """The id the next call to `next_id` will return."""
        with self._lock:
            return f"{self.prefix}{self._next}"

    def advance_past(self, identifier: str) -> None:
        """
        Make sure future ids sort after `identifier` (an id loaded from storage).
        Ids without a numeric suffix are ignored.
        """
        match = _NUMERIC_SUFFIX.search(identifier)
        if match is None:
            return
        with self._lock:
            self._next = max(self._next, int(match.group(1)) + 1)


__all__ = ["IdGenerator"]
