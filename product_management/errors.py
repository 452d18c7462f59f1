"""Product management domain errors."""

from __future__ import annotations


class ProductManagementError(Exception):
    """Base error for every recoverable failure of a menu operation."""
    pass


class NotFoundError(ProductManagementError):
    """A referenced record does not exist."""
    pass


class OrderNotPendingError(NotFoundError):
    """The order exists but is no longer pending."""
    pass


class InsufficientStockError(ProductManagementError):
    """Requested quantity exceeds the available stock."""
    pass


class InvalidInputError(ProductManagementError):
    """Unparseable or out-of-range input."""
    pass


class ConfigError(ProductManagementError):
    """Invalid configuration value."""
    pass


class StoreUnavailableError(ProductManagementError):
    """The backing store could not be reached."""
    pass
