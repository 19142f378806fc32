"""
Pydantic request models for Data API actions.

The envelope fields are shared by every action; each action adds its own
payload fields. Filters, projections, sorts, updates, documents and
pipeline stages are opaque: they are type-checked as mappings (or lists of
mappings) and handed to the driver untouched.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

Document = dict[str, Any]


class DataApiRequest(BaseModel):
    """Request envelope shared by every action."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    data_source: Any = Field(alias="dataSource")
    database: str = Field(min_length=1)
    collection: str = Field(min_length=1)


class FindOneRequest(DataApiRequest):
    """Payload for ``findOne``."""

    filter: Document | None = None
    projection: Document | None = None


class FindRequest(DataApiRequest):
    """Payload for ``find``."""

    filter: Document | None = None
    projection: Document | None = None
    sort: Document | None = None
    skip: NonNegativeInt | None = None
    limit: NonNegativeInt | None = None


class InsertOneRequest(DataApiRequest):
    """Payload for ``insertOne``."""

    document: Document


class InsertManyRequest(DataApiRequest):
    """Payload for ``insertMany``."""

    documents: list[Document]


class UpdateRequest(DataApiRequest):
    """Payload for ``updateOne`` and ``updateMany``."""

    filter: Document
    update: Any
    upsert: bool = False


class UpdateOneRequest(UpdateRequest):
    """Payload for ``updateOne``."""


class UpdateManyRequest(UpdateRequest):
    """Payload for ``updateMany``."""


class DeleteRequest(DataApiRequest):
    """Payload for ``deleteOne`` and ``deleteMany``."""

    filter: Document


class DeleteOneRequest(DeleteRequest):
    """Payload for ``deleteOne``."""


class DeleteManyRequest(DeleteRequest):
    """Payload for ``deleteMany``."""


class AggregateRequest(DataApiRequest):
    """Payload for ``aggregate``."""

    pipeline: list[Document]
