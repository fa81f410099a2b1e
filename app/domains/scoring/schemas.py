"""NPS scoring schemas."""

from enum import Enum

from pydantic import BaseModel

from app.domains.response.schemas import ResponseOut


class Classification(str, Enum):
    """NPS score band."""

    PROMOTER = "promoter"  # 9-10
    PASSIVE = "passive"  # 7-8
    DETRACTOR = "detractor"  # 0-6


class BreakdownDimension(str, Enum):
    """Response fields a breakdown can group by."""

    AGENT = "agent_id"
    TEAM = "team_id"
    CATEGORY = "category"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class NpsResult(BaseModel):
    """NPS metrics for a set of responses."""

    score: int = 0  # -100..100
    total: int = 0
    promoters: int = 0
    passives: int = 0
    detractors: int = 0
    promoter_pct: float = 0
    passive_pct: float = 0
    detractor_pct: float = 0


class TrendPoint(NpsResult):
    """NPS for one calendar month."""

    month: str  # YYYY-MM-01
    label: str  # e.g. "Oct 2026"


class BreakdownItem(NpsResult):
    """NPS for one value of a breakdown dimension."""

    dimension: BreakdownDimension
    key: str


class WidgetSummary(NpsResult):
    """Dashboard widget data."""

    trend: TrendDirection = TrendDirection.STABLE
    previous_score: int = 0
    enabled: bool = True


class ContactHistory(BaseModel):
    """A contact's recent responses and their NPS."""

    contact_id: str
    responses: list[ResponseOut]
    nps: NpsResult


class TicketScore(BaseModel):
    ticket_id: str
    score: int | None = None
