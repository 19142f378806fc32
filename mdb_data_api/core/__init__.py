"""
Core Data API components.

Provides the ConnectionManager that owns the MongoDB client.
"""

from .connection import ConnectionManager

__all__ = ["ConnectionManager"]
