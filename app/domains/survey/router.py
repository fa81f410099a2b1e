"""Survey API routes - public survey page/submission and the operator queue view."""

from fastapi import APIRouter, Query

from app.core.exceptions import InvalidSurveyTokenError
from app.dependencies.auth import AdminOnly
from app.dependencies.services import Services
from app.domains.events.schemas import QueueResult, TicketResolvedEvent
from app.domains.response.models import clamp_score
from app.domains.scoring.engine import classify
from app.domains.survey.models import PendingSurvey, SurveyStatus
from app.domains.survey.schemas import (
    SurveyForm,
    SurveyListResponse,
    SurveyOut,
    SurveySubmit,
    SurveySubmitResult,
)

router = APIRouter(prefix="/nps")


def _survey_to_out(survey: PendingSurvey) -> SurveyOut:
    """Convert PendingSurvey to SurveyOut (drops the token)."""
    return SurveyOut(
        id=survey.id,
        contact_id=survey.contact_id,
        ticket_id=survey.ticket_id,
        agent_id=survey.agent_id,
        team_id=survey.team_id,
        category=survey.category,
        status=survey.status,
        queued_at=survey.queued_at,
        send_at=survey.send_at,
        sent_at=survey.sent_at,
    )


# ============================================================
# Public Endpoints (token is the credential)
# ============================================================


@router.get(
    "/survey/{token}",
    response_model=SurveyForm,
    summary="Get survey form",
    description="Question and branding for the public survey page.",
)
async def get_survey_form(
    token: str,
    services: Services,
    score: int | None = Query(None, description="Score picked in the email"),
):
    """Get the survey form for a token."""
    await services.surveys.get_by_token(token)
    config = await services.config.load()
    return SurveyForm(
        question=config.question,
        follow_up_question=config.follow_up_question,
        branding=config.branding,
        score=clamp_score(score) if score is not None else None,
    )


@router.post(
    "/survey/{token}",
    response_model=SurveySubmitResult,
    summary="Submit survey",
    description="Submit a score (clamped to 0-10) and optional comments.",
)
async def submit_survey(token: str, data: SurveySubmit, services: Services):
    """Submit a survey response."""
    response = await services.events.submit_survey(
        token,
        data.score,
        comment=data.comment,
        follow_up_response=data.follow_up_response,
    )
    if response is None:
        raise InvalidSurveyTokenError()

    return SurveySubmitResult(
        response_id=response.id,
        score=response.score,
        classification=classify(response.score),
    )


# ============================================================
# JWT Auth Endpoints (for dashboard)
# ============================================================


@router.get(
    "/surveys",
    response_model=SurveyListResponse,
    summary="List queued surveys",
)
async def list_surveys(
    admin: AdminOnly,
    services: Services,
    status: SurveyStatus | None = Query(None),
):
    """List surveys in the queue."""
    surveys = await services.surveys.list_surveys(status=status)
    return SurveyListResponse(
        items=[_survey_to_out(s) for s in surveys],
        total=len(surveys),
    )


@router.post(
    "/surveys",
    response_model=QueueResult,
    summary="Send NPS survey",
    description="Queue a survey for a ticket's contact, subject to the usual throttling.",
)
async def send_survey(data: TicketResolvedEvent, admin: AdminOnly, services: Services):
    """Queue a survey for a ticket on demand."""
    outcome = await services.events.send_survey_now(data)
    return QueueResult(
        queued=outcome.survey is not None,
        decision=outcome.decision,
        survey=_survey_to_out(outcome.survey) if outcome.survey else None,
    )
