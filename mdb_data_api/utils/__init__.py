"""
Utility functions and helpers for MDB_DATA_API.
"""

from .mongo import (
    clean_mongo_docs,
    clean_mongo_value,
    coerce_id_filter,
    isoformat_utc,
    parse_extended_json,
)

__all__ = [
    "clean_mongo_docs",
    "clean_mongo_value",
    "coerce_id_filter",
    "isoformat_utc",
    "parse_extended_json",
]
