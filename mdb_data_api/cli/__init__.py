"""
CLI for MDB_DATA_API.
"""

from .main import cli

__all__ = ["cli"]
