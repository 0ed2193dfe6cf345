from __future__ import annotations

from typing import ClassVar, Protocol, TypeVar

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pydantic import BaseModel, ValidationError
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from app.core.config import settings

logger = structlog.get_logger(__name__)


class StoredRecord(BaseModel):
    """
    Base for every persisted row.

    Subclasses name their collection the way Mongo documents do:

        class Settings:
            name = "check_ins"
    """

    user_id: str
    timestamp: str

    class Settings:
        name: ClassVar[str] = ""

    @classmethod
    def collection_name(cls) -> str:
        name = cls.Settings.name
        if not name:
            raise TypeError(f"{cls.__name__} does not declare Settings.name")
        return name


R = TypeVar("R", bound=StoredRecord)


class Store(Protocol):
    async def append(self, record: StoredRecord) -> bool: ...

    async def recent(
        self, record_type: type[R], user_id: str, limit: int = 50
    ) -> list[R]: ...


class MongoStore:
    """Best-effort persistence: writes never raise, failures are logged and reported as False."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._db = database

    async def append(self, record: StoredRecord) -> bool:
        collection = record.collection_name()
        try:
            await self._db[collection].insert_one(record.model_dump(mode="json"))
        except PyMongoError as exc:
            logger.warning("store_append_failed", collection=collection, error=str(exc))
            return False
        logger.debug("store_append_ok", collection=collection)
        return True

    async def recent(
        self, record_type: type[R], user_id: str, limit: int = 50
    ) -> list[R]:
        """Latest ``limit`` records for a user, returned oldest first."""
        collection = record_type.collection_name()
        try:
            cursor = (
                self._db[collection]
                .find({"user_id": user_id}, {"_id": 0})
                .sort("timestamp", DESCENDING)
                .limit(limit)
            )
            rows = await cursor.to_list(length=limit)
        except PyMongoError as exc:
            logger.warning("store_read_failed", collection=collection, error=str(exc))
            return []

        records: list[R] = []
        for row in reversed(rows):
            try:
                records.append(record_type.model_validate(row))
            except ValidationError as exc:
                logger.warning(
                    "store_row_skipped", collection=collection, error=str(exc)
                )
        return records


class NullStore:
    """Used when no database is configured."""

    async def append(self, record: StoredRecord) -> bool:
        logger.warning("store_not_configured", collection=record.collection_name())
        return False

    async def recent(
        self, record_type: type[R], user_id: str, limit: int = 50
    ) -> list[R]:
        return []


def init_db() -> tuple[AsyncIOMotorClient | None, Store]:
    """
    Create the Motor client once at app startup and wrap it in a Store.

    Without MONGODB_URL the service still runs, it just persists nothing.
    """
    if not settings.MONGODB_URL:
        logger.warning("mongodb_not_configured")
        return None, NullStore()

    client = AsyncIOMotorClient(
        settings.MONGODB_URL,
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=5000,
    )
    database: AsyncIOMotorDatabase = client[settings.MONGODB_DB_NAME]
    return client, MongoStore(database)
