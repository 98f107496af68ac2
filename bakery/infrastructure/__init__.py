"""
Infrastructure package for the bakery system.

Centralizes persistence concerns (loading and saving the JSON snapshot).
Keep this layer focused on I/O, decoupled from the data structures and the
service logic.
"""

from bakery.infrastructure.snapshot_store import SNAPSHOT_VERSION, Snapshot, SnapshotStore

__all__ = [
    "Snapshot",
    "SnapshotStore",
    "SNAPSHOT_VERSION",
]
