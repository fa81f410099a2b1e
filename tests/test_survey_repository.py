"""Tests for the survey repositories."""

import pytest

from app.db.mongodb import SURVEYS_COLLECTION
from app.domains.survey.models import PendingSurvey, SurveyStatus
from app.domains.survey.repository import InMemorySurveyRepository, MongoSurveyRepository


class RecordingCursor:
    def __init__(self, documents):
        self._documents = list(documents)

    def sort(self, key, direction):
        return self

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._documents:
            raise StopAsyncIteration
        return self._documents.pop(0)


class RecordingCollection:
    """Collection stand-in that remembers the queries it receives."""

    def __init__(self):
        self.queries = []

    def find(self, query):
        self.queries.append(query)
        return RecordingCursor([])


def _survey(survey_id: str, contact_id: str) -> PendingSurvey:
    return PendingSurvey(
        id=survey_id,
        token=f"tok-{survey_id}",
        contact_id=contact_id,
        ticket_id="T1",
        status=SurveyStatus.PENDING,
        queued_at="2026-03-15T12:00:00Z",
        send_at="2026-03-16T12:00:00Z",
    )


@pytest.mark.asyncio
async def test_mongo_list_surveys_keeps_empty_contact_filter():
    collection = RecordingCollection()
    repository = MongoSurveyRepository({SURVEYS_COLLECTION: collection})

    await repository.list_surveys(status=SurveyStatus.PENDING, contact_id="")
    await repository.list_surveys()

    assert collection.queries == [{"status": "pending", "contact_id": ""}, {}]


@pytest.mark.asyncio
async def test_memory_list_surveys_matches_empty_contact_exactly():
    repository = InMemorySurveyRepository([_survey("s1", "C1"), _survey("s2", "")])

    surveys = await repository.list_surveys(status=SurveyStatus.PENDING, contact_id="")

    assert [s.id for s in surveys] == ["s2"]
