"""Survey schemas for API requests/responses."""

from pydantic import BaseModel, Field

from app.domains.scoring.schemas import Classification
from app.domains.survey.models import SurveyStatus
from app.domains.survey_config.models import Branding


class SurveySubmit(BaseModel):
    """Public survey submission.

    Out-of-range scores are clamped into 0-10, not rejected.
    """

    score: int
    comment: str = Field("", max_length=5000)
    follow_up_response: str = Field("", max_length=5000)


class SurveySubmitResult(BaseModel):
    response_id: str
    score: int
    classification: Classification


class SurveyForm(BaseModel):
    """Data the public survey page renders."""

    question: str
    follow_up_question: str
    branding: Branding
    score: int | None = Field(None, description="Score preselected from the email link")


class SurveyOut(BaseModel):
    """Queued survey as shown to operators (token omitted)."""

    id: str
    contact_id: str
    ticket_id: str
    agent_id: str
    team_id: str
    category: str
    status: SurveyStatus
    queued_at: str
    send_at: str
    sent_at: str | None = None


class SurveyListResponse(BaseModel):
    items: list[SurveyOut]
    total: int
