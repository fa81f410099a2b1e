"""Pending survey repository."""

import asyncio
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

import redis.asyncio as redis
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReplaceOne

from app.db.mongodb import SURVEYS_COLLECTION
from app.db.redis import collection_lock
from app.domains.survey.models import PendingSurvey, SurveyStatus


class SurveyRepositoryInterface(ABC):
    """Abstract repository interface for queued surveys."""

    @abstractmethod
    def lock(self) -> AbstractAsyncContextManager:
        """Lock serializing writers of the survey collection."""
        pass

    @abstractmethod
    async def create(self, survey: PendingSurvey) -> PendingSurvey:
        """Append a new survey."""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> PendingSurvey | None:
        """Get survey by its public token."""
        pass

    @abstractmethod
    async def list_surveys(
        self,
        status: SurveyStatus | None = None,
        contact_id: str | None = None,
    ) -> list[PendingSurvey]:
        """List surveys in storage order."""
        pass

    @abstractmethod
    async def save_many(self, surveys: list[PendingSurvey]) -> None:
        """Write back a batch of existing surveys in one operation."""
        pass


class MongoSurveyRepository(SurveyRepositoryInterface):
    """MongoDB implementation of survey repository."""

    def __init__(self, db: AsyncIOMotorDatabase, redis_client: redis.Redis | None = None):
        self._db = db
        self._redis = redis_client
        self._collection = db[SURVEYS_COLLECTION]

    def lock(self) -> AbstractAsyncContextManager:
        return collection_lock(SURVEYS_COLLECTION, self._redis)

    async def create(self, survey: PendingSurvey) -> PendingSurvey:
        await self._collection.insert_one(survey.to_document())
        return survey

    async def get_by_token(self, token: str) -> PendingSurvey | None:
        doc = await self._collection.find_one({"token": token})
        if not doc:
            return None
        return PendingSurvey(**doc)

    async def list_surveys(
        self,
        status: SurveyStatus | None = None,
        contact_id: str | None = None,
    ) -> list[PendingSurvey]:
        query: dict = {}

        if status:
            query["status"] = status.value if isinstance(status, SurveyStatus) else status
        if contact_id is not None:
            query["contact_id"] = contact_id

        surveys = []
        async for doc in self._collection.find(query).sort("$natural", 1):
            surveys.append(PendingSurvey(**doc))
        return surveys

    async def save_many(self, surveys: list[PendingSurvey]) -> None:
        if not surveys:
            return
        await self._collection.bulk_write(
            [ReplaceOne({"_id": s.id}, s.to_document()) for s in surveys],
            ordered=True,
        )


class InMemorySurveyRepository(SurveyRepositoryInterface):
    """In-memory implementation, used by tests and local runs."""

    def __init__(self, surveys: list[PendingSurvey] | None = None):
        self._surveys: list[PendingSurvey] = [s.model_copy() for s in surveys or []]
        self._lock = asyncio.Lock()

    def lock(self) -> AbstractAsyncContextManager:
        return self._lock

    async def create(self, survey: PendingSurvey) -> PendingSurvey:
        self._surveys.append(survey.model_copy())
        return survey

    async def get_by_token(self, token: str) -> PendingSurvey | None:
        for survey in self._surveys:
            if survey.token == token:
                return survey.model_copy()
        return None

    async def list_surveys(
        self,
        status: SurveyStatus | None = None,
        contact_id: str | None = None,
    ) -> list[PendingSurvey]:
        return [
            s.model_copy()
            for s in self._surveys
            if (status is None or s.status == status)
            and (contact_id is None or s.contact_id == contact_id)
        ]

    async def save_many(self, surveys: list[PendingSurvey]) -> None:
        by_id = {s.id: s for s in surveys}
        self._surveys = [
            by_id[s.id].model_copy() if s.id in by_id else s for s in self._surveys
        ]
