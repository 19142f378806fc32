"""
MongoDB utility functions for the Data API.

This module provides the conversions that sit between HTTP JSON and BSON:
Extended JSON request decoding, JSON-safe response encoding and the
``_id`` filter widening used for string identifiers.
"""

import base64
import json
import math
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from bson import DBRef, Decimal128, MaxKey, MinKey, ObjectId, Regex, Timestamp, json_util
from bson.code import Code
from bson.json_util import RELAXED_JSON_OPTIONS

_BSON_EXTENDED_TYPES = (Regex, Timestamp, Code, MinKey, MaxKey, DBRef)

# Keys of the legacy {"$regex": ..., "$options": ...} wrapper
_REGEX_WRAPPER_KEYS = frozenset(("$regex", "$options"))


def _extended_json_hook(document: dict[str, Any]) -> Any:
    # A $regex next to other query operators is the query operator form
    if "$regex" in document and not _REGEX_WRAPPER_KEYS.issuperset(document):
        return document
    return json_util.object_hook(document, json_options=RELAXED_JSON_OPTIONS)


def parse_extended_json(raw: bytes | str) -> Any:
    """
    Decode a request body as relaxed Extended JSON.

    Plain JSON decodes unchanged; ``{"$oid": ...}``, ``{"$date": ...}`` and
    the other Extended JSON wrappers become their BSON types. An object that
    mixes ``$regex`` with other query operators (``$nin``, ``$ne``, ...) is
    kept as a plain document so none of its operators are lost.

    Raises:
        ValueError: If the body is not valid JSON
        bson.errors.BSONError: If an Extended JSON wrapper is malformed
    """
    return json.loads(raw, object_hook=_extended_json_hook)


def isoformat_utc(value: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision and ``Z``.

    The driver returns naive datetimes that are already UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def clean_mongo_value(value: Any) -> Any:
    """
    Convert a MongoDB value to a JSON-serializable one.

    Recursively converts MongoDB-specific types to JSON-compatible types:
    - ObjectId -> str
    - datetime -> ISO-8601 UTC string
    - Decimal128 -> decimal string
    - UUID -> canonical string
    - bytes / Binary -> base64 string
    - NaN / Infinity -> None
    - other BSON types -> relaxed Extended JSON

    Args:
        value: Document, list or scalar as returned by the driver

    Returns:
        JSON-serializable equivalent

    Example:
        ```python
        doc = {"_id": ObjectId("507f1f77bcf86cd799439011"), "tags": ["a"]}
        clean_mongo_value(doc)
        # {"_id": "507f1f77bcf86cd799439011", "tags": ["a"]}
        ```
    """
    if isinstance(value, dict):
        return {key: clean_mongo_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [clean_mongo_value(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return isoformat_utc(value)
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, _BSON_EXTENDED_TYPES):
        return clean_mongo_value(json_util.default(value, json_options=RELAXED_JSON_OPTIONS))
    return value


def clean_mongo_docs(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Apply clean_mongo_value to each document in a list."""
    return [clean_mongo_value(doc) for doc in docs]


def coerce_id_filter(filter_doc: dict[str, Any] | None) -> dict[str, Any]:
    """
    Widen a string ``_id`` that looks like an ObjectId to match either form.

    Identifiers leave this API as hex strings, so a client that feeds an
    ``insertedId`` back into a filter would otherwise never match the
    ObjectId stored in the collection. Only a top-level string ``_id`` is
    touched; operators and other fields pass through unchanged.

    Example:
        ```python
        coerce_id_filter({"_id": "507f1f77bcf86cd799439011"})
        # {"_id": {"$in": [ObjectId("507f1f77bcf86cd799439011"),
        #                  "507f1f77bcf86cd799439011"]}}
        ```
    """
    if not filter_doc:
        return {}

    id_value = filter_doc.get("_id")
    if not isinstance(id_value, str) or not ObjectId.is_valid(id_value):
        return filter_doc

    coerced = dict(filter_doc)
    coerced["_id"] = {"$in": [ObjectId(id_value), id_value]}
    return coerced
