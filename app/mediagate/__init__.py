"""mediagate -- on-device HTTP gateway for a local media collection."""

__version__ = "0.1.0"
