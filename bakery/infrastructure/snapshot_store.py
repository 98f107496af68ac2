"""
JSON snapshot persistence for the bakery system.

The data structures never touch the filesystem. At startup the CLI loads a
`Snapshot` and rebuilds the in-memory indices from it. At shutdown it exports a
fresh snapshot from the catalog's in-order traversal, the account tables and
the running list of all orders.

Writes go to a temporary sibling file first and are then renamed over the target,
so a crash never leaves a half-written snapshot. Transient `OSError`s (locked files,
flaky network mounts) are retried with exponential backoff via tenacity.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bakery.domain.models import Customer, Employee, Order, Product
from bakery.utils.logging import get_logger

log = get_logger(__name__)

SNAPSHOT_VERSION = 1

_io_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)


class Snapshot(BaseModel):
    """
    Serializable image of the whole system state.
    """

    version: int = Field(SNAPSHOT_VERSION, description="Snapshot schema version.")
    saved_at: Optional[datetime] = Field(None, description="When the snapshot was taken.")
    products: List[Product] = Field(default_factory=list)
    customers: List[Customer] = Field(default_factory=list)
    employees: List[Employee] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list, description="All orders, oldest first.")


class SnapshotStore:
    """
    Reads and writes a `Snapshot` as a single JSON document.

    Parameters
    ----------
    path : Path | str
        Location of the JSON file. Parent directories are created on save.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @_io_retry
    def load(self) -> Snapshot:
        """Return the stored snapshot, or an empty one if nothing was saved yet."""
        if not self.path.exists():
            log.info("No snapshot found, starting empty", extra={"path": str(self.path)})
            return Snapshot()
        snapshot = Snapshot.model_validate_json(self.path.read_text(encoding="utf-8"))
        log.info(
            "Snapshot loaded",
            extra={
                "path": str(self.path),
                "products": len(snapshot.products),
                "orders": len(snapshot.orders),
            },
        )
        return snapshot

    @_io_retry
    def save(self, snapshot: Snapshot) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(snapshot.model_dump_json(indent=2))
        os.replace(tmp_path, self.path)
        log.info("Snapshot saved", extra={"path": str(self.path)})
        return self.path


__all__ = ["Snapshot", "SnapshotStore", "SNAPSHOT_VERSION"]
