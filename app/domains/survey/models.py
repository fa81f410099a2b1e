"""Pending survey models for MongoDB."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SurveyStatus(str, Enum):
    """Survey status enum."""

    PENDING = "pending"  # Queued, waiting for send_at
    SENT = "sent"  # Email delivered, awaiting response
    SKIPPED = "skipped"  # Throttled at send time
    FAILED = "failed"  # Transport reported failure
    COMPLETED = "completed"  # Contact submitted a response


class PendingSurvey(BaseModel):
    """Queued survey document model for MongoDB.

    Collection: nps_pending_surveys
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    id: str = Field(..., alias="_id")
    # Sole credential for the public submission endpoint
    token: str

    # Reference
    contact_id: str
    ticket_id: str
    agent_id: str = ""
    team_id: str = ""
    category: str = ""

    status: SurveyStatus = SurveyStatus.PENDING

    # Timestamps (ISO-8601 UTC)
    queued_at: str
    send_at: str
    sent_at: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == SurveyStatus.PENDING

    @property
    def is_completed(self) -> bool:
        return self.status == SurveyStatus.COMPLETED

    def to_document(self) -> dict:
        """Mongo document form (``_id`` key)."""
        return self.model_dump(by_alias=True)

    def to_record(self) -> dict:
        """Flat record form used by the API and exports (``id`` key)."""
        return self.model_dump()
