"""
Data API operation handlers.

Each handler validates its payload, resolves the target collection through
the ConnectionManager, performs exactly one driver call and maps the driver
result to the documented response shape. Failures never escape a handler:
they come back as an error OperationResult carrying a stable error code.

This module is part of MDB_DATA_API.
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel, ValidationError
from pymongo.errors import PyMongoError

from ..constants import (
    ACTION_AGGREGATE,
    ACTION_DELETE_MANY,
    ACTION_DELETE_ONE,
    ACTION_FIND,
    ACTION_FIND_ONE,
    ACTION_INSERT_MANY,
    ACTION_INSERT_ONE,
    ACTION_UPDATE_MANY,
    ACTION_UPDATE_ONE,
    ERROR_AGGREGATE,
    ERROR_DELETE_MANY,
    ERROR_DELETE_ONE,
    ERROR_FIND,
    ERROR_FIND_ONE,
    ERROR_INSERT_MANY,
    ERROR_INSERT_ONE,
    ERROR_UPDATE_MANY,
    ERROR_UPDATE_ONE,
)
from ..core.connection import ConnectionManager
from ..exceptions import DataApiError
from ..observability import get_logger as get_contextual_logger
from ..observability import log_action, record_operation
from ..utils.mongo import clean_mongo_docs, clean_mongo_value, coerce_id_filter
from .requests import (
    AggregateRequest,
    DeleteManyRequest,
    DeleteOneRequest,
    FindOneRequest,
    FindRequest,
    InsertManyRequest,
    InsertOneRequest,
    UpdateManyRequest,
    UpdateOneRequest,
    UpdateRequest,
)
from .results import OperationResult

contextual_logger = get_contextual_logger(__name__)

# Failures converted into error results rather than propagated
_OPERATION_FAILURES = (
    PyMongoError,
    BSONError,
    DataApiError,
    TypeError,
    ValueError,
    OverflowError,
)

Handler = Callable[[dict[str, Any]], Awaitable[OperationResult]]


@dataclass(frozen=True)
class ActionSpec:
    """Static description of one action."""

    name: str
    model: type[BaseModel]
    error_code: str
    failure_verb: str


ACTION_SPECS: dict[str, ActionSpec] = {
    spec.name: spec
    for spec in (
        ActionSpec(ACTION_FIND_ONE, FindOneRequest, ERROR_FIND_ONE, "find document"),
        ActionSpec(ACTION_FIND, FindRequest, ERROR_FIND, "find documents"),
        ActionSpec(ACTION_INSERT_ONE, InsertOneRequest, ERROR_INSERT_ONE, "insert document"),
        ActionSpec(ACTION_INSERT_MANY, InsertManyRequest, ERROR_INSERT_MANY, "insert documents"),
        ActionSpec(ACTION_UPDATE_ONE, UpdateOneRequest, ERROR_UPDATE_ONE, "update document"),
        ActionSpec(ACTION_UPDATE_MANY, UpdateManyRequest, ERROR_UPDATE_MANY, "update documents"),
        ActionSpec(ACTION_DELETE_ONE, DeleteOneRequest, ERROR_DELETE_ONE, "delete document"),
        ActionSpec(ACTION_DELETE_MANY, DeleteManyRequest, ERROR_DELETE_MANY, "delete documents"),
        ActionSpec(ACTION_AGGREGATE, AggregateRequest, ERROR_AGGREGATE, "aggregate documents"),
    )
}


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into ``field: message`` pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "body"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


class DataApiHandlers:
    """
    The nine Data API operations.

    Handlers are stateless apart from the injected ConnectionManager; the
    same instance serves every request.

    Example:
        handlers = DataApiHandlers(connection_manager)
        result = await handlers.find_one(
            {"dataSource": "Cluster0", "database": "shop", "collection": "orders",
             "filter": {"status": "open"}}
        )
        if result.ok:
            print(result.payload["document"])
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        coerce_object_ids: bool = True,
    ) -> None:
        """
        Initialize the handlers.

        Args:
            connection_manager: Connected (or connectable) ConnectionManager
            coerce_object_ids: Widen string ``_id`` filters to match ObjectIds
        """
        self._connection_manager = connection_manager
        self._coerce_object_ids = coerce_object_ids
        self._handlers: dict[str, Handler] = {
            ACTION_FIND_ONE: self.find_one,
            ACTION_FIND: self.find,
            ACTION_INSERT_ONE: self.insert_one,
            ACTION_INSERT_MANY: self.insert_many,
            ACTION_UPDATE_ONE: self.update_one,
            ACTION_UPDATE_MANY: self.update_many,
            ACTION_DELETE_ONE: self.delete_one,
            ACTION_DELETE_MANY: self.delete_many,
            ACTION_AGGREGATE: self.aggregate,
        }

    def get_handler(self, action: str) -> Handler | None:
        """Resolve an action name (as used in the URL) to its handler."""
        return self._handlers.get(action)

    # ------------------------------------------------------------------
    # Public handlers
    # ------------------------------------------------------------------

    async def find_one(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_FIND_ONE, body, self._find_one)

    async def find(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_FIND, body, self._find)

    async def insert_one(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_INSERT_ONE, body, self._insert_one)

    async def insert_many(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_INSERT_MANY, body, self._insert_many)

    async def update_one(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_UPDATE_ONE, body, self._update_one)

    async def update_many(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_UPDATE_MANY, body, self._update_many)

    async def delete_one(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_DELETE_ONE, body, self._delete_one)

    async def delete_many(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_DELETE_MANY, body, self._delete_many)

    async def aggregate(self, body: dict[str, Any]) -> OperationResult:
        return await self._execute(ACTION_AGGREGATE, body, self._aggregate)

    # ------------------------------------------------------------------
    # Driver calls
    # ------------------------------------------------------------------

    async def _find_one(
        self, collection: AsyncIOMotorCollection, request: FindOneRequest
    ) -> OperationResult:
        document = await collection.find_one(self._filter(request.filter), request.projection)
        return OperationResult.success(document=clean_mongo_value(document))

    async def _find(
        self, collection: AsyncIOMotorCollection, request: FindRequest
    ) -> OperationResult:
        cursor = collection.find(self._filter(request.filter), request.projection)
        if request.sort:
            cursor = cursor.sort(list(request.sort.items()))
        if request.skip:
            cursor = cursor.skip(request.skip)
        if request.limit:
            cursor = cursor.limit(request.limit)
        documents = await cursor.to_list(length=None)
        return OperationResult.success(documents=clean_mongo_docs(documents))

    async def _insert_one(
        self, collection: AsyncIOMotorCollection, request: InsertOneRequest
    ) -> OperationResult:
        result = await collection.insert_one(request.document)
        return OperationResult.success(insertedId=str(result.inserted_id))

    async def _insert_many(
        self, collection: AsyncIOMotorCollection, request: InsertManyRequest
    ) -> OperationResult:
        result = await collection.insert_many(request.documents)
        return OperationResult.success(insertedIds=[str(i) for i in result.inserted_ids])

    async def _update_one(
        self, collection: AsyncIOMotorCollection, request: UpdateOneRequest
    ) -> OperationResult:
        result = await collection.update_one(
            self._update_filter(request), request.update, upsert=request.upsert
        )
        return self._update_result(result)

    async def _update_many(
        self, collection: AsyncIOMotorCollection, request: UpdateManyRequest
    ) -> OperationResult:
        result = await collection.update_many(
            self._update_filter(request), request.update, upsert=request.upsert
        )
        return self._update_result(result)

    async def _delete_one(
        self, collection: AsyncIOMotorCollection, request: DeleteOneRequest
    ) -> OperationResult:
        result = await collection.delete_one(self._filter(request.filter))
        return OperationResult.success(deletedCount=result.deleted_count)

    async def _delete_many(
        self, collection: AsyncIOMotorCollection, request: DeleteManyRequest
    ) -> OperationResult:
        result = await collection.delete_many(self._filter(request.filter))
        return OperationResult.success(deletedCount=result.deleted_count)

    async def _aggregate(
        self, collection: AsyncIOMotorCollection, request: AggregateRequest
    ) -> OperationResult:
        cursor = collection.aggregate(request.pipeline)
        documents = await cursor.to_list(length=None)
        return OperationResult.success(documents=clean_mongo_docs(documents))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _filter(self, filter_doc: dict[str, Any] | None) -> dict[str, Any]:
        if not self._coerce_object_ids:
            return filter_doc or {}
        return coerce_id_filter(filter_doc)

    def _update_filter(self, request: UpdateRequest) -> dict[str, Any]:
        # An upsert copies equality fields from the filter into the new document
        if request.upsert:
            return request.filter
        return self._filter(request.filter)

    @staticmethod
    def _update_result(result: Any) -> OperationResult:
        payload: dict[str, Any] = {
            "matchedCount": result.matched_count,
            "modifiedCount": result.modified_count,
        }
        if result.upserted_id is not None:
            payload["upsertedId"] = str(result.upserted_id)
        return OperationResult.success(**payload)

    async def _execute(
        self,
        action: str,
        body: dict[str, Any],
        operation: Callable[[AsyncIOMotorCollection, Any], Awaitable[OperationResult]],
    ) -> OperationResult:
        """Validate, run one driver call and convert failures to an error result."""
        spec = ACTION_SPECS[action]
        start_time = time.time()

        try:
            request = spec.model.model_validate(body)
            collection = self._connection_manager.get_collection(
                request.database, request.collection
            )
            result = await operation(collection, request)
        except ValidationError as e:
            result = OperationResult.failure(
                spec.error_code, f"Failed to {spec.failure_verb}: {format_validation_error(e)}"
            )
        except _OPERATION_FAILURES as e:
            result = OperationResult.failure(
                spec.error_code, f"Failed to {spec.failure_verb}: {e}"
            )

        duration_ms = (time.time() - start_time) * 1000
        record_operation(f"action.{action}", duration_ms, success=result.ok)
        log_action(
            contextual_logger, f"action.{action}", duration_ms, error_code=result.error_code
        )
        return result
