"""NPS response schemas for API requests/responses."""

from datetime import date

from pydantic import BaseModel, Field


class ResponseWrite(BaseModel):
    """Fields accepted by ResponseService.save; unset fields take template defaults."""

    id: str | None = None
    contact_id: str | None = None
    ticket_id: str | None = None
    agent_id: str | None = None
    team_id: str | None = None
    category: str | None = None
    score: int | None = None
    comment: str | None = None
    follow_up_response: str | None = None
    created_at: str | None = None


class ResponseFilter(BaseModel):
    """Conjunctive response filter; unset fields don't constrain."""

    contact_id: str | None = None
    ticket_id: str | None = None
    agent_id: str | None = None
    team_id: str | None = None
    category: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    offset: int = Field(0, ge=0)
    limit: int = Field(0, ge=0, description="0 means no limit")

    def equality_criteria(self) -> dict[str, str]:
        """Exact-match constraints on string fields."""
        fields = ("contact_id", "ticket_id", "agent_id", "team_id", "category")
        return {name: getattr(self, name) for name in fields if getattr(self, name)}


class ResponseOut(BaseModel):
    """NPS response."""

    id: str
    contact_id: str
    ticket_id: str
    agent_id: str
    team_id: str
    category: str
    score: int
    comment: str
    follow_up_response: str
    created_at: str


class ResponseListResponse(BaseModel):
    """Paginated response list."""

    items: list[ResponseOut]
    offset: int
    limit: int
