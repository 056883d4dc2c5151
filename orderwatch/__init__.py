"""Order Watch: buy-order change monitor for market pages."""

__version__ = "0.1.0"
