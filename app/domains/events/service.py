"""Host event handlers - ticket resolution, sweep tick, submissions, lifecycle."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from pydantic import BaseModel

from app.core.exceptions import InvalidSurveyTokenError
from app.core.timeutils import Clock, to_iso, utcnow
from app.domains.events.schemas import QueueDecision
from app.domains.response.models import NpsResponse, clamp_score
from app.domains.survey.models import PendingSurvey
from app.domains.survey.service import ADMIN_CHANNEL, SurveyQueue
from app.domains.survey_config.service import ConfigService
from app.sockets.broadcast import Broadcaster

logger = logging.getLogger(__name__)

DEACTIVATED_EVENT = "nps.deactivated"


@dataclass
class TicketOutcome:
    decision: QueueDecision
    survey: PendingSurvey | None = None


def _ticket_fields(ticket: Any) -> dict[str, str]:
    """Normalize a ticket (mapping, pydantic model or object) to the fields we use."""
    if isinstance(ticket, BaseModel):
        data = ticket.model_dump()
    elif isinstance(ticket, Mapping):
        data = dict(ticket)
    else:
        data = dict(vars(ticket))

    def text(*keys: str) -> str:
        for key in keys:
            value = data.get(key)
            if value not in (None, ""):
                return str(value)
        return ""

    return {
        "contact_id": text("contact_id", "requester_id"),
        "ticket_id": text("id"),
        "agent_id": text("assignee_id", "agent_id"),
        "team_id": text("team_id"),
        "category": text("category"),
    }


class EventHandler:
    """
    Translates host events into survey queue operations.

    None of the host-facing handlers raise: a failure means no survey is
    queued or sent, never a broken ticket or cron pipeline on the host.
    """

    def __init__(
        self,
        config_service: ConfigService,
        survey_queue: SurveyQueue,
        broadcaster: Broadcaster | None = None,
        on_activate_hook: Callable[[], Awaitable[None]] | None = None,
        clock: Clock = utcnow,
    ):
        self._config = config_service
        self._queue = survey_queue
        self._broadcaster = broadcaster
        self._on_activate_hook = on_activate_hook
        self._clock = clock

    async def on_ticket_resolved(self, ticket: Any) -> PendingSurvey | None:
        """
        Queue a survey for the ticket's contact when allowed.

        Returns:
            The queued survey, or None when nothing was queued
        """
        outcome = await self.handle_ticket(ticket)
        return outcome.survey

    async def handle_ticket(self, ticket: Any) -> TicketOutcome:
        """Like ``on_ticket_resolved`` but also reports the decision taken."""
        try:
            return await self._queue_for_ticket(ticket)
        except Exception:
            logger.exception("Failed to handle resolved ticket")
            return TicketOutcome(QueueDecision.ERROR)

    async def send_survey_now(self, ticket: Any) -> TicketOutcome:
        """Manual "Send NPS Survey" ticket action; same guards as resolution."""
        return await self.handle_ticket(ticket)

    async def _queue_for_ticket(self, ticket: Any) -> TicketOutcome:
        config = await self._config.load()
        if not config.enabled:
            return TicketOutcome(QueueDecision.DISABLED)

        fields = _ticket_fields(ticket)
        contact_id = fields["contact_id"]
        ticket_id = fields["ticket_id"]

        if not contact_id or not ticket_id:
            return TicketOutcome(QueueDecision.MISSING_IDS)

        if not await self._queue.can_send(contact_id):
            logger.info(f"Survey throttled for contact {contact_id} (ticket #{ticket_id})")
            return TicketOutcome(QueueDecision.THROTTLED)

        if await self._queue.has_pending(contact_id):
            logger.info(f"Survey already pending for contact {contact_id} (ticket #{ticket_id})")
            return TicketOutcome(QueueDecision.ALREADY_PENDING)

        survey = await self._queue.enqueue(**fields)
        logger.info(
            f"Survey queued for contact {contact_id} (ticket #{ticket_id}), "
            f"send at: {survey.send_at}"
        )
        return TicketOutcome(QueueDecision.QUEUED, survey)

    async def on_periodic_sweep(self) -> list[PendingSurvey]:
        """Cron tick: process the survey queue."""
        try:
            return await self._queue.sweep()
        except Exception:
            logger.exception("Survey sweep failed")
            return []

    async def submit_survey(
        self,
        token: str,
        score: int,
        comment: str = "",
        follow_up_response: str = "",
    ) -> NpsResponse | None:
        """
        Handle a public survey submission.

        Returns:
            The saved response, or None for an unknown or used token
        """
        try:
            return await self._queue.submit(
                token,
                clamp_score(score),
                comment=comment,
                follow_up_response=follow_up_response,
            )
        except InvalidSurveyTokenError:
            return None

    async def on_activate(self) -> None:
        """Activation: make sure default config and storage indexes exist."""
        await self._config.ensure_defaults()
        if self._on_activate_hook is not None:
            await self._on_activate_hook()
        logger.info("NPS activated")

    async def on_deactivate(self) -> None:
        """Deactivation: data is kept; admins are notified."""
        if self._broadcaster is not None:
            await self._broadcaster.broadcast(
                ADMIN_CHANNEL,
                DEACTIVATED_EVENT,
                {"timestamp": to_iso(self._clock())},
            )
        logger.info("NPS deactivated")
