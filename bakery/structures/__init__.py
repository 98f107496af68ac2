"""
Structures package for the bakery system.

Re-exports the generic containers backing order fulfillment (linked list,
hash table, binary search tree, priority queue) so downstream code can import
from `bakery.structures` directly. Nothing in here knows about products or
customers beyond the `priority` / `id` / `customer_email` attributes the queue
reads.
"""

from bakery.structures.bst import BinarySearchTree, by_key, natural_compare
from bakery.structures.hash_table import HashTable
from bakery.structures.linked_list import Cursor, LinkedList
from bakery.structures.priority_queue import (
    Prioritized,
    PriorityQueue,
    QueueableOrder,
    priority_of,
)

__all__ = [
    # Sequences
    "LinkedList",
    "Cursor",
    # Indexes
    "HashTable",
    "BinarySearchTree",
    "by_key",
    "natural_compare",
    # Fulfillment
    "PriorityQueue",
    "Prioritized",
    "QueueableOrder",
    "priority_of",
]
