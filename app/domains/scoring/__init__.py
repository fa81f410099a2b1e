"""NPS scoring domain."""

from app.domains.scoring.engine import breakdown, calculate, classify, trend
from app.domains.scoring.schemas import (
    BreakdownDimension,
    BreakdownItem,
    Classification,
    NpsResult,
    TrendPoint,
)
from app.domains.scoring.service import ScoringService

__all__ = [
    "breakdown",
    "calculate",
    "classify",
    "trend",
    "BreakdownDimension",
    "BreakdownItem",
    "Classification",
    "NpsResult",
    "TrendPoint",
    "ScoringService",
]
