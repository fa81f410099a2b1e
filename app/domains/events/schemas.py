"""Host event schemas."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.domains.survey.schemas import SurveyOut


class TicketResolvedEvent(BaseModel):
    """Ticket payload sent by the host on resolution.

    The contact may come as ``contact_id`` or ``requester_id`` and the
    agent as ``assignee_id`` or ``agent_id``; unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    contact_id: Any = None
    requester_id: Any = None
    assignee_id: Any = None
    agent_id: Any = None
    team_id: Any = None
    category: Any = None


class QueueDecision(str, Enum):
    """Why a resolution did or did not queue a survey."""

    QUEUED = "queued"
    DISABLED = "disabled"
    MISSING_IDS = "missing_ids"
    THROTTLED = "throttled"
    ALREADY_PENDING = "already_pending"
    ERROR = "error"


class QueueResult(BaseModel):
    queued: bool
    decision: QueueDecision
    survey: SurveyOut | None = None


class SweepResult(BaseModel):
    processed: list[SurveyOut]


class LifecycleResult(BaseModel):
    status: str
