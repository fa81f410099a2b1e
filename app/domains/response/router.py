"""NPS response API routes (dashboard)."""

from datetime import date

from fastapi import APIRouter, Query

from app.dependencies.auth import AdminOnly
from app.dependencies.services import Services
from app.domains.response.schemas import ResponseFilter, ResponseListResponse, ResponseOut
from app.domains.scoring.schemas import ContactHistory, TicketScore

router = APIRouter(prefix="/nps")


def response_filters(
    contact_id: str | None = Query(None),
    ticket_id: str | None = Query(None),
    agent_id: str | None = Query(None),
    team_id: str | None = Query(None),
    category: str | None = Query(None),
    date_from: date | None = Query(None, description="First day, inclusive (YYYY-MM-DD)"),
    date_to: date | None = Query(None, description="Last day, inclusive (YYYY-MM-DD)"),
    offset: int = Query(0, ge=0),
    limit: int = Query(0, ge=0, le=1000, description="0 means no limit"),
) -> ResponseFilter:
    """Build a ResponseFilter from query parameters."""
    return ResponseFilter(
        contact_id=contact_id,
        ticket_id=ticket_id,
        agent_id=agent_id,
        team_id=team_id,
        category=category,
        date_from=date_from,
        date_to=date_to,
        offset=offset,
        limit=limit,
    )


@router.get(
    "/responses",
    response_model=ResponseListResponse,
    summary="List responses",
    description="Filtered responses, newest first.",
)
async def list_responses(
    admin: AdminOnly,
    services: Services,
    contact_id: str | None = Query(None),
    ticket_id: str | None = Query(None),
    agent_id: str | None = Query(None),
    team_id: str | None = Query(None),
    category: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=0, le=1000),
):
    """List NPS responses."""
    filters = response_filters(
        contact_id, ticket_id, agent_id, team_id, category, date_from, date_to, offset, limit
    )
    responses = await services.responses.query(filters)
    return ResponseListResponse(
        items=[ResponseOut(**r.to_record()) for r in responses],
        offset=offset,
        limit=limit,
    )


@router.get(
    "/contacts/{contact_id}/history",
    response_model=ContactHistory,
    summary="Contact NPS history",
    description="A contact's 10 most recent responses and their NPS.",
)
async def contact_history(contact_id: str, admin: AdminOnly, services: Services):
    """Get NPS history for a contact."""
    return await services.scoring.contact_history(contact_id)


@router.get(
    "/tickets/{ticket_id}/score",
    response_model=TicketScore,
    summary="Ticket NPS score",
    description="Most recent score given for a ticket (ticket list column).",
)
async def ticket_score(ticket_id: str, admin: AdminOnly, services: Services):
    """Get the NPS score recorded for a ticket."""
    score = await services.responses.latest_for_ticket(ticket_id)
    return TicketScore(ticket_id=ticket_id, score=score)


@router.get(
    "/export",
    summary="Export NPS data",
    description="Config, responses and queued surveys in the persisted layout.",
)
async def export_data(admin: AdminOnly, services: Services) -> dict:
    """Export all NPS collections."""
    config = await services.config.load()
    responses = await services.responses.all()
    surveys = await services.surveys.list_surveys()
    return {
        "config": config.model_dump(),
        "responses": [r.to_record() for r in responses],
        "surveys": [s.to_record() for s in surveys],
    }
