"""NPS configuration repository."""

from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import SETTINGS_COLLECTION

CONFIG_DOCUMENT_ID = "nps"


class ConfigRepositoryInterface(ABC):
    """Abstract repository interface for the configuration record."""

    @abstractmethod
    async def load_document(self) -> Any:
        """Return the raw persisted document, or None when nothing is stored."""
        pass

    @abstractmethod
    async def save_document(self, document: dict[str, Any]) -> bool:
        """Replace the persisted document."""
        pass


class MongoConfigRepository(ConfigRepositoryInterface):
    """MongoDB implementation of configuration repository."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[SETTINGS_COLLECTION]

    async def load_document(self) -> Any:
        doc = await self._collection.find_one({"_id": CONFIG_DOCUMENT_ID})
        if not doc:
            return None
        doc.pop("_id", None)
        return doc

    async def save_document(self, document: dict[str, Any]) -> bool:
        result = await self._collection.replace_one(
            {"_id": CONFIG_DOCUMENT_ID},
            {"_id": CONFIG_DOCUMENT_ID, **document},
            upsert=True,
        )
        return result.acknowledged


class InMemoryConfigRepository(ConfigRepositoryInterface):
    """In-memory implementation, used by tests and local runs."""

    def __init__(self, document: Any = None):
        self._document = deepcopy(document)

    async def load_document(self) -> Any:
        return deepcopy(self._document)

    async def save_document(self, document: dict[str, Any]) -> bool:
        self._document = deepcopy(document)
        return True
