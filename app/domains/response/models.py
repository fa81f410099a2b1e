"""NPS response models for MongoDB."""

from pydantic import BaseModel, ConfigDict, Field

MIN_SCORE = 0
MAX_SCORE = 10


def clamp_score(value) -> int:
    """Coerce ``value`` to an int inside [0, 10]."""
    try:
        score = int(value)
    except (TypeError, ValueError):
        score = MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, score))


class NpsResponse(BaseModel):
    """Completed survey response document.

    Collection: nps_responses
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")

    # Reference
    contact_id: str = ""
    ticket_id: str = ""
    agent_id: str = ""
    team_id: str = ""
    category: str = ""

    # Survey data
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    comment: str = ""
    follow_up_response: str = ""

    # ISO-8601 UTC, set once on first save
    created_at: str = ""

    def to_document(self) -> dict:
        """Mongo document form (``_id`` key)."""
        return self.model_dump(by_alias=True)

    def to_record(self) -> dict:
        """Flat record form used by the API and exports (``id`` key)."""
        return self.model_dump()


def response_template() -> dict:
    """Default value for every response field."""
    return {
        "id": "",
        "contact_id": "",
        "ticket_id": "",
        "score": None,
        "comment": "",
        "follow_up_response": "",
        "agent_id": "",
        "team_id": "",
        "category": "",
        "created_at": "",
    }
