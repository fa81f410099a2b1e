"""NPS response service - append/upsert log and filtering."""

import logging
from typing import Any, Mapping

from app.core.merge import deep_merge
from app.core.security import generate_record_id
from app.core.timeutils import Clock, end_of_day, parse_iso, start_of_day, to_iso, utcnow
from app.domains.response.models import NpsResponse, clamp_score, response_template
from app.domains.response.repository import ResponseRepositoryInterface
from app.domains.response.schemas import ResponseFilter, ResponseWrite

logger = logging.getLogger(__name__)

RESPONSE_ID_PREFIX = "nps"


class ResponseService:
    """Response store: save-or-replace by id, query with filters."""

    def __init__(
        self,
        repository: ResponseRepositoryInterface,
        clock: Clock = utcnow,
    ):
        self._repo = repository
        self._clock = clock

    async def save(self, record: ResponseWrite | Mapping[str, Any]) -> NpsResponse:
        """
        Create or replace a response.

        A record without an id gets a fresh id and ``created_at = now``.
        Fields missing from ``record`` take the template defaults, the score
        is clamped into [0, 10], and the result replaces any stored response
        with the same id (or is appended).

        Args:
            record: Response fields; only the fields present are applied

        Returns:
            The stored response
        """
        if isinstance(record, ResponseWrite):
            data = record.model_dump(exclude_unset=True)
        else:
            data = dict(record)
        data = {key: value for key, value in data.items() if value is not None}

        async with self._repo.lock():
            if not data.get("id"):
                data["id"] = await self._new_id()
                data["created_at"] = to_iso(self._clock())
            elif not data.get("created_at"):
                existing = await self._repo.get_by_id(data["id"])
                if existing:
                    data["created_at"] = existing.created_at

            merged = deep_merge(response_template(), data)
            merged["score"] = clamp_score(merged["score"])
            response = NpsResponse(**merged)

            await self._repo.upsert(response)

        logger.debug(f"Saved NPS response {response.id} (score {response.score})")
        return response

    async def _new_id(self) -> str:
        response_id = generate_record_id(RESPONSE_ID_PREFIX)
        while await self._repo.get_by_id(response_id) is not None:
            response_id = generate_record_id(RESPONSE_ID_PREFIX)
        return response_id

    async def query(
        self,
        filters: ResponseFilter | None = None,
        **criteria: Any,
    ) -> list[NpsResponse]:
        """
        Get responses matching all given filters, newest first.

        Ordering compares the ``created_at`` strings; equal timestamps keep
        storage order. ``date_from``/``date_to`` are whole UTC days, with
        ``date_to`` inclusive through 23:59:59.

        Args:
            filters: Filter object; alternatively pass the fields as keywords

        Returns:
            The matching page of responses
        """
        if filters is None:
            filters = ResponseFilter(**criteria)

        responses = await self._repo.find(filters.equality_criteria())
        responses.sort(key=lambda r: r.created_at, reverse=True)

        if filters.date_from:
            start = start_of_day(filters.date_from)
            responses = [r for r in responses if _created_on_or_after(r, start)]

        if filters.date_to:
            end = end_of_day(filters.date_to)
            responses = [r for r in responses if _created_on_or_before(r, end)]

        if filters.offset > 0:
            responses = responses[filters.offset:]
        if filters.limit > 0:
            responses = responses[: filters.limit]

        return responses

    async def for_contact(self, contact_id: str) -> list[NpsResponse]:
        """Get a contact's NPS history, newest first."""
        return await self.query(contact_id=contact_id)

    async def latest_for_ticket(self, ticket_id: str) -> int | None:
        """Most recent score given for a ticket, if any."""
        responses = await self.query(ticket_id=ticket_id, limit=1)
        return responses[0].score if responses else None

    async def all(self) -> list[NpsResponse]:
        """Every response in storage order."""
        return await self._repo.find()


def _created_on_or_after(response: NpsResponse, start) -> bool:
    created = parse_iso(response.created_at)
    return created is not None and created >= start


def _created_on_or_before(response: NpsResponse, end) -> bool:
    created = parse_iso(response.created_at)
    return created is not None and created <= end
