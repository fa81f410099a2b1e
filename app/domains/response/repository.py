"""NPS response repository."""

import asyncio
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

import redis.asyncio as redis
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import RESPONSES_COLLECTION
from app.db.redis import collection_lock
from app.domains.response.models import NpsResponse


class ResponseRepositoryInterface(ABC):
    """Abstract repository interface for NPS responses."""

    @abstractmethod
    def lock(self) -> AbstractAsyncContextManager:
        """Lock serializing writers of the response collection."""
        pass

    @abstractmethod
    async def find(self, criteria: dict[str, str] | None = None) -> list[NpsResponse]:
        """Responses matching exact-field ``criteria``, in storage order."""
        pass

    @abstractmethod
    async def get_by_id(self, response_id: str) -> NpsResponse | None:
        """Get response by ID."""
        pass

    @abstractmethod
    async def upsert(self, response: NpsResponse) -> NpsResponse:
        """Replace the response with the same id, or append it."""
        pass


class MongoResponseRepository(ResponseRepositoryInterface):
    """MongoDB implementation of response repository."""

    def __init__(self, db: AsyncIOMotorDatabase, redis_client: redis.Redis | None = None):
        self._db = db
        self._redis = redis_client
        self._collection = db[RESPONSES_COLLECTION]

    def lock(self) -> AbstractAsyncContextManager:
        return collection_lock(RESPONSES_COLLECTION, self._redis)

    async def find(self, criteria: dict[str, str] | None = None) -> list[NpsResponse]:
        cursor = self._collection.find(dict(criteria or {})).sort("$natural", 1)
        responses = []
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            responses.append(NpsResponse(**doc))
        return responses

    async def get_by_id(self, response_id: str) -> NpsResponse | None:
        doc = await self._collection.find_one({"_id": response_id})
        if not doc:
            return None
        return NpsResponse(**doc)

    async def upsert(self, response: NpsResponse) -> NpsResponse:
        await self._collection.replace_one(
            {"_id": response.id},
            response.to_document(),
            upsert=True,
        )
        return response


class InMemoryResponseRepository(ResponseRepositoryInterface):
    """In-memory implementation; keeps insertion order like the Mongo natural order."""

    def __init__(self, responses: list[NpsResponse] | None = None):
        self._responses: list[NpsResponse] = [r.model_copy() for r in responses or []]
        self._lock = asyncio.Lock()

    def lock(self) -> AbstractAsyncContextManager:
        return self._lock

    async def find(self, criteria: dict[str, str] | None = None) -> list[NpsResponse]:
        criteria = criteria or {}
        return [
            r.model_copy()
            for r in self._responses
            if all(getattr(r, field) == value for field, value in criteria.items())
        ]

    async def get_by_id(self, response_id: str) -> NpsResponse | None:
        for response in self._responses:
            if response.id == response_id:
                return response.model_copy()
        return None

    async def upsert(self, response: NpsResponse) -> NpsResponse:
        for index, existing in enumerate(self._responses):
            if existing.id == response.id:
                self._responses[index] = response.model_copy()
                return response
        self._responses.append(response.model_copy())
        return response
