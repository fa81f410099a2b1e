"""Survey queue service - scheduling, throttling, sweeping, completion."""

import logging
from datetime import datetime, timedelta

from app.core.config import settings
from app.core.exceptions import InvalidSurveyTokenError
from app.core.security import generate_record_id, generate_survey_token
from app.core.timeutils import Clock, ensure_utc, parse_iso, to_iso, utcnow
from app.db.redis import refresh_lock
from app.domains.response.models import NpsResponse, clamp_score
from app.domains.response.service import ResponseService
from app.domains.scoring.engine import classify
from app.domains.survey.email import build_email_body, build_survey_url
from app.domains.survey.models import PendingSurvey, SurveyStatus
from app.domains.survey.repository import SurveyRepositoryInterface
from app.domains.survey_config.models import NpsConfig
from app.domains.survey_config.service import ConfigService
from app.integrations.mail.base import EmailMessage, EmailTransport
from app.sockets.broadcast import Broadcaster

logger = logging.getLogger(__name__)

SURVEY_ID_PREFIX = "srv"
ADMIN_CHANNEL = "admin"
RESPONSE_RECEIVED_EVENT = "nps.response_received"


class SurveyQueue:
    """
    Pending survey state machine.

    pending -> sent | skipped | failed on a sweep, and any status other
    than completed -> completed on submission. Nothing leaves completed.
    """

    def __init__(
        self,
        repository: SurveyRepositoryInterface,
        response_service: ResponseService,
        config_service: ConfigService,
        transport: EmailTransport | None = None,
        broadcaster: Broadcaster | None = None,
        clock: Clock = utcnow,
        public_base_url: str | None = None,
        mail_subject: str | None = None,
    ):
        self._repo = repository
        self._responses = response_service
        self._config = config_service
        self._transport = transport
        self._broadcaster = broadcaster
        self._clock = clock
        self._public_base_url = public_base_url or settings.public_base_url
        self._mail_subject = mail_subject or settings.mail_subject

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    async def can_send(self, contact_id: str, exclude_survey_id: str | None = None) -> bool:
        """
        Check whether ``contact_id`` may receive a survey now.

        Args:
            contact_id: Contact identifier
            exclude_survey_id: Survey to ignore when looking for pending ones

        Returns:
            True when throttling is off, when the newest response is at
            least ``frequency_limit_days`` old, or when the contact has no
            responses and no pending survey
        """
        config = await self._config.load()
        pending = await self._repo.list_surveys(
            status=SurveyStatus.PENDING, contact_id=contact_id
        )
        pending_elsewhere = any(s.id != exclude_survey_id for s in pending)
        now = ensure_utc(self._clock())
        return await self._can_send(config, contact_id, pending_elsewhere, now)

    async def has_pending(self, contact_id: str) -> bool:
        """Check if a contact already has a pending survey."""
        pending = await self._repo.list_surveys(
            status=SurveyStatus.PENDING, contact_id=contact_id
        )
        return bool(pending)

    async def _can_send(
        self,
        config: NpsConfig,
        contact_id: str,
        pending_elsewhere: bool,
        now: datetime,
    ) -> bool:
        if not config.throttling_enabled:
            return True

        responses = await self._responses.for_contact(contact_id)
        if not responses:
            return not pending_elsewhere

        # Responses come back newest first
        last_created_at = parse_iso(responses[0].created_at)
        if last_created_at is None:
            return True

        days_since = (now - last_created_at).total_seconds() / 86400
        return days_since >= config.frequency_limit_days

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    async def enqueue(
        self,
        contact_id: str,
        ticket_id: str,
        agent_id: str = "",
        team_id: str = "",
        category: str = "",
    ) -> PendingSurvey:
        """
        Queue a survey to be sent after the configured delay.

        No de-duplication happens here; callers check ``can_send`` and
        ``has_pending`` first.

        Returns:
            The queued survey
        """
        config = await self._config.load()
        now = self._clock()
        send_at = now + timedelta(hours=config.effective_delay_hours)

        async with self._repo.lock():
            survey = PendingSurvey(
                id=generate_record_id(SURVEY_ID_PREFIX),
                token=await self._new_token(),
                contact_id=contact_id,
                ticket_id=ticket_id,
                agent_id=agent_id,
                team_id=team_id,
                category=category,
                status=SurveyStatus.PENDING,
                queued_at=to_iso(now),
                send_at=to_iso(send_at),
            )
            await self._repo.create(survey)

        return survey

    async def _new_token(self) -> str:
        token = generate_survey_token()
        while await self._repo.get_by_token(token) is not None:
            token = generate_survey_token()
        return token

    async def sweep(self, now: datetime | None = None) -> list[PendingSurvey]:
        """
        Process every due pending survey.

        Each due survey is re-checked against throttling (skipped when it
        fails), then handed to the transport (sent or failed). Once a contact
        has been sent a survey, their other due surveys in the same sweep are
        skipped. Surveys that are not yet due are left alone. Each transition
        is written back as soon as it is decided, and a Redis lock has its
        expiry restarted before every delivery. When NPS is disabled nothing
        is evaluated.

        Args:
            now: Sweep time; defaults to the service clock. Naive values are
                read as UTC.

        Returns:
            The surveys whose status changed
        """
        config = await self._config.load()
        if not config.enabled:
            return []

        now = ensure_utc(now or self._clock())
        processed: list[PendingSurvey] = []
        # Contacts already handed a survey during this sweep
        delivered_contacts: set[str] = set()

        async with self._repo.lock() as held:
            surveys = await self._repo.list_surveys()

            for survey in surveys:
                if not survey.is_pending:
                    continue

                send_at = parse_iso(survey.send_at)
                if send_at is None or send_at > now:
                    continue

                if survey.contact_id in delivered_contacts:
                    allowed = False
                else:
                    allowed = await self._can_send(
                        config, survey.contact_id, pending_elsewhere=False, now=now
                    )

                if not allowed:
                    survey.status = SurveyStatus.SKIPPED
                    logger.info(
                        f"Survey {survey.id} skipped for contact {survey.contact_id} (throttled)"
                    )
                else:
                    await refresh_lock(held)
                    if await self._deliver(config, survey):
                        survey.status = SurveyStatus.SENT
                        survey.sent_at = to_iso(now)
                        delivered_contacts.add(survey.contact_id)
                        logger.info(f"Survey {survey.id} sent to contact {survey.contact_id}")
                    else:
                        survey.status = SurveyStatus.FAILED
                        logger.warning(
                            f"Survey {survey.id} delivery failed for contact {survey.contact_id}"
                        )

                await self._repo.save_many([survey])
                processed.append(survey)

        if processed:
            logger.info(f"Survey sweep processed {len(processed)} survey(s)")
        return processed

    async def _deliver(self, config: NpsConfig, survey: PendingSurvey) -> bool:
        # No transport configured: treated as delivered
        if self._transport is None:
            return True

        message = EmailMessage(
            to=survey.contact_id,
            subject=self._mail_subject,
            body=build_email_body(config, self.build_survey_url(survey.token)),
        )
        try:
            return bool(await self._transport.send(message))
        except Exception as e:
            logger.error(f"Email transport raised for survey {survey.id}: {e}")
            return False

    # ------------------------------------------------------------------
    # Public submission
    # ------------------------------------------------------------------

    async def get_by_token(self, token: str) -> PendingSurvey:
        """
        Get an answerable survey by token.

        Raises:
            InvalidSurveyTokenError: Unknown token or survey already completed
        """
        survey = await self._repo.get_by_token(token) if token else None
        if survey is None or survey.is_completed:
            raise InvalidSurveyTokenError()
        return survey

    async def submit(
        self,
        token: str,
        score: int,
        comment: str = "",
        follow_up_response: str = "",
    ) -> NpsResponse:
        """
        Record a public survey submission.

        Any survey not yet completed can be answered, including sent,
        skipped and failed ones.

        Args:
            token: Survey token from the emailed link
            score: NPS score, clamped into 0-10
            comment: Optional comment
            follow_up_response: Optional follow-up answer

        Returns:
            The saved response

        Raises:
            InvalidSurveyTokenError: Unknown token or survey already completed
        """
        async with self._repo.lock():
            survey = await self.get_by_token(token)

            response = await self._responses.save({
                "contact_id": survey.contact_id,
                "ticket_id": survey.ticket_id,
                "score": clamp_score(score),
                "comment": comment or "",
                "follow_up_response": follow_up_response or "",
                "agent_id": survey.agent_id,
                "team_id": survey.team_id,
                "category": survey.category,
            })

            survey.status = SurveyStatus.COMPLETED
            await self._repo.save_many([survey])

        logger.info(f"Survey {survey.id} completed with score {response.score}")

        if self._broadcaster is not None:
            await self._broadcaster.broadcast(
                ADMIN_CHANNEL,
                RESPONSE_RECEIVED_EVENT,
                {
                    "response_id": response.id,
                    "contact_id": response.contact_id,
                    "ticket_id": response.ticket_id,
                    "score": response.score,
                    "category": classify(response.score).value,
                    "timestamp": response.created_at,
                },
            )

        return response

    # ------------------------------------------------------------------
    # Operator views
    # ------------------------------------------------------------------

    async def list_surveys(self, status: SurveyStatus | None = None) -> list[PendingSurvey]:
        """List queued surveys in queue order."""
        return await self._repo.list_surveys(status=status)

    def build_survey_url(self, token: str) -> str:
        return build_survey_url(self._public_base_url, token)
