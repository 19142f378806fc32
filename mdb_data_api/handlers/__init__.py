"""
Data API operation handlers, request models and result type.
"""

from .operations import ACTION_SPECS, ActionSpec, DataApiHandlers, format_validation_error
from .requests import (
    AggregateRequest,
    DataApiRequest,
    DeleteManyRequest,
    DeleteOneRequest,
    FindOneRequest,
    FindRequest,
    InsertManyRequest,
    InsertOneRequest,
    UpdateManyRequest,
    UpdateOneRequest,
)
from .results import OperationResult

__all__ = [
    # Handlers
    "DataApiHandlers",
    "ActionSpec",
    "ACTION_SPECS",
    "format_validation_error",
    # Results
    "OperationResult",
    # Requests
    "DataApiRequest",
    "FindOneRequest",
    "FindRequest",
    "InsertOneRequest",
    "InsertManyRequest",
    "UpdateOneRequest",
    "UpdateManyRequest",
    "DeleteOneRequest",
    "DeleteManyRequest",
    "AggregateRequest",
]
