"""NPS reporting API routes (dashboard)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.exceptions import ValidationError
from app.dependencies.auth import AdminOnly
from app.dependencies.services import Services
from app.domains.response.router import response_filters
from app.domains.response.schemas import ResponseFilter
from app.domains.scoring.schemas import (
    BreakdownDimension,
    BreakdownItem,
    NpsResult,
    TrendPoint,
    WidgetSummary,
)

router = APIRouter(prefix="/nps/reports")

Filters = Annotated[ResponseFilter, Depends(response_filters)]

# URL segment -> response field
DIMENSIONS = {
    "agent": BreakdownDimension.AGENT,
    "team": BreakdownDimension.TEAM,
    "category": BreakdownDimension.CATEGORY,
}


@router.get(
    "/score",
    response_model=NpsResult,
    summary="NPS score",
    description="NPS over the responses matching the filters.",
)
async def get_score(admin: AdminOnly, services: Services, filters: Filters):
    return await services.scoring.score(filters)


@router.get(
    "/trend",
    response_model=list[TrendPoint],
    summary="NPS trend",
    description="Monthly NPS for the last N calendar months, oldest first.",
)
async def get_trend(
    admin: AdminOnly,
    services: Services,
    filters: Filters,
    months: int = Query(6, ge=1, le=36),
):
    return await services.scoring.trend(months=months, filters=filters)


@router.get(
    "/breakdown/{dimension}",
    response_model=list[BreakdownItem],
    summary="NPS breakdown",
    description="NPS per agent, team or category, best score first.",
)
async def get_breakdown(
    dimension: str,
    admin: AdminOnly,
    services: Services,
    filters: Filters,
):
    if dimension not in DIMENSIONS:
        raise ValidationError(
            f"Unsupported breakdown dimension '{dimension}'",
            details={"allowed": sorted(DIMENSIONS)},
        )
    return await services.scoring.breakdown_by(DIMENSIONS[dimension], filters)


@router.get(
    "/widget",
    response_model=WidgetSummary,
    summary="NPS dashboard widget",
    description="Overall NPS with month-over-month direction.",
)
async def get_widget(admin: AdminOnly, services: Services):
    return await services.scoring.widget()
