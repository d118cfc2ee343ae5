"""Price-time priority limit order book, an SPSC ring queue and a benchmark."""

__version__ = "0.1.0"
__all__ = ["order", "ring", "book", "benchmark"]