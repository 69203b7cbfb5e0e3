# fleetflow/crud/base.py
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import ValidationError as SchemaError
from pymongo.errors import PyMongoError

from fleetflow.errors import NotFoundError, OperationFailed
from fleetflow.models.base import DocumentModel, as_datetime
from fleetflow.utils.object_id import parse_object_id

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=DocumentModel)

SortSpec = Sequence[Tuple[str, int]]


def _encode(value: Any) -> Any:
    # enums by value, plain dates as midnight datetimes
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date) and not isinstance(value, datetime):
        return as_datetime(value)
    if isinstance(value, Mapping):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def to_document(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Prepare field values for BSON; the id is owned by the store."""
    return {k: _encode(v) for k, v in values.items() if k not in ("id", "_id")}


def to_query(query: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _encode(v) for k, v in query.items()}


class CRUDBase(Generic[ModelType]):
    """Read/write contract for one document collection."""

    def __init__(self, collection_name: str, model: Type[ModelType], entity: str):
        self.collection_name = collection_name
        self.model = model
        self.entity = entity

    def collection(self, db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
        return db[self.collection_name]

    def _failed(self, action: str, error: PyMongoError) -> OperationFailed:
        logger.error("Failed to %s %s: %s", action, self.entity, error)
        return OperationFailed(
            message=f"Failed to {action} {self.entity}",
            details=str(error),
        )

    def _to_model(self, document: Mapping[str, Any]) -> ModelType:
        try:
            return self.model.model_validate(document)
        except SchemaError as e:
            logger.error("Malformed %s record %s: %s", self.entity, document.get("_id"), e)
            raise OperationFailed(
                message=f"Invalid {self.entity} record",
                details=f"Stored {self.entity} {document.get('_id')} does not match the expected shape",
            )

    async def get(self, db: AsyncIOMotorDatabase, id: str) -> Optional[ModelType]:
        oid = parse_object_id(id, self.entity)
        try:
            document = await self.collection(db).find_one({"_id": oid})
        except PyMongoError as e:
            raise self._failed("read", e)
        return self._to_model(document) if document else None

    async def get_or_raise(self, db: AsyncIOMotorDatabase, id: str) -> ModelType:
        obj = await self.get(db, id)
        if obj is None:
            raise NotFoundError(
                message=f"{self.entity.capitalize()} not found",
                details=f"No {self.entity} found with ID: {id}",
                example=f"Please ensure you're using a valid {self.entity} ID"
            )
        return obj

    async def find_one(self, db: AsyncIOMotorDatabase, query: Dict[str, Any]) -> Optional[ModelType]:
        try:
            document = await self.collection(db).find_one(to_query(query))
        except PyMongoError as e:
            raise self._failed("read", e)
        return self._to_model(document) if document else None

    async def get_multi(
        self,
        db: AsyncIOMotorDatabase,
        *,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[ModelType]:
        cursor = self.collection(db).find(to_query(query or {}))
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        try:
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._failed("list", e)
        models = []
        for document in documents:
            try:
                models.append(self._to_model(document))
            except OperationFailed:
                # logged by _to_model; skip it
                continue
        return models

    async def count(self, db: AsyncIOMotorDatabase, query: Optional[Dict[str, Any]] = None) -> int:
        try:
            return await self.collection(db).count_documents(to_query(query or {}))
        except PyMongoError as e:
            raise self._failed("count", e)

    async def create(self, db: AsyncIOMotorDatabase, *, obj_in: Mapping[str, Any]) -> ModelType:
        document = to_document(obj_in)
        try:
            result = await self.collection(db).insert_one(document)
            created = await self.collection(db).find_one({"_id": result.inserted_id})
        except PyMongoError as e:
            raise self._failed("create", e)
        if not created:
            raise OperationFailed(
                message=f"{self.entity.capitalize()} creation failed",
                details=f"Failed to create {self.entity} record in database",
            )
        return self._to_model(created)

    async def update(self, db: AsyncIOMotorDatabase, id: str, *, values: Mapping[str, Any]) -> None:
        oid = parse_object_id(id, self.entity)
        try:
            result = await self.collection(db).update_one({"_id": oid}, {"$set": to_document(values)})
        except PyMongoError as e:
            raise self._failed("update", e)
        if result.matched_count == 0:
            raise NotFoundError(
                message=f"{self.entity.capitalize()} not found",
                details=f"No {self.entity} found with ID: {id}",
            )

    async def remove(self, db: AsyncIOMotorDatabase, id: str) -> None:
        oid = parse_object_id(id, self.entity)
        try:
            result = await self.collection(db).delete_one({"_id": oid})
        except PyMongoError as e:
            raise self._failed("delete", e)
        if result.deleted_count == 0:
            raise NotFoundError(
                message=f"{self.entity.capitalize()} not found",
                details=f"No {self.entity} found with ID: {id}",
            )

    async def restore(self, db: AsyncIOMotorDatabase, obj: ModelType) -> None:
        """Re-insert a removed document under its original id."""
        document = to_document(obj.model_dump())
        document["_id"] = parse_object_id(obj.id, self.entity)
        try:
            await self.collection(db).insert_one(document)
        except PyMongoError as e:
            raise self._failed("restore", e)

    def watch(self, db: AsyncIOMotorDatabase, pipeline: Optional[List[Dict[str, Any]]] = None):
        """Open a change stream on the collection.

        Use as ``async with crud.driver.watch(db) as stream: async for change in stream``;
        leaving the block closes the stream.
        """
        return self.collection(db).watch(pipeline or [], full_document="updateLookup")
