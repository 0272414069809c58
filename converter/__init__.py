"""Streaming CSV to JSON converter."""

__version__ = "0.0.2"
