"""
Error taxonomy for the bakery system.

Container errors are raised by the data structures in `bakery.structures` at the
point of violation and are never caught inside them. Domain and service errors
are raised by the catalog, the models and `BakeryService`; the CLI is the only
layer that turns them into user-facing messages.

Lookups that find nothing (`search`, `get`, `find_by_name`, ...) return None
instead of raising.
"""

from __future__ import annotations


class BakeryError(RuntimeError):
    """Base exception for every error raised by this package."""


# ----------------------------------------------------------------------
# Container errors
# ----------------------------------------------------------------------
class ContainerError(BakeryError):
    """Base exception for linked list, hash table, BST and heap errors."""


class EmptyError(ContainerError, LookupError):
    """Raised when an operation needs a non-empty collection."""


class CursorError(ContainerError):
    """Raised when a cursor operation is attempted while the cursor is off end."""


class NullKeyError(ContainerError, TypeError):
    """Raised when a hash table receives None as a value or probe."""


class ConfigError(ContainerError, ValueError):
    """Raised when a container is constructed with invalid parameters."""


# ----------------------------------------------------------------------
# Domain / service errors
# ----------------------------------------------------------------------
class OrderStateError(BakeryError):
    """Raised on an invalid order state transition (e.g. shipping twice)."""


class InsufficientStockError(BakeryError):
    """Raised when an order asks for more units than a product has in stock."""


class DuplicateProductError(BakeryError):
    """Raised when a product name already exists in the catalog."""


class ProductNotFoundError(BakeryError):
    """Raised when a named product is missing from the catalog."""


class DuplicateAccountError(BakeryError):
    """Raised when registering an email that is already taken."""


class AuthenticationError(BakeryError):
    """Raised when an email/password pair does not match a stored account."""


class PermissionDeniedError(BakeryError):
    """Raised when an authenticated user lacks the required role."""


__all__ = [
    "BakeryError",
    "ContainerError",
    "EmptyError",
    "CursorError",
    "NullKeyError",
    "ConfigError",
    "OrderStateError",
    "InsufficientStockError",
    "DuplicateProductError",
    "ProductNotFoundError",
    "DuplicateAccountError",
    "AuthenticationError",
    "PermissionDeniedError",
]
