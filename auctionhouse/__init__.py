"""Timed auctions over HTTP with batched bid storage in MongoDB."""

__version__ = "0.1.0"