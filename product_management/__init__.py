"""Product management - catalog, offers, sales orders and profit accounting."""

__version__ = "0.1.0"
