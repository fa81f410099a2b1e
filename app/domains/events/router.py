"""Host event API routes - called by the helpdesk platform."""

from fastapi import APIRouter

from app.dependencies.auth import HostKeyAuth
from app.dependencies.services import Services
from app.domains.events.schemas import (
    LifecycleResult,
    QueueResult,
    SweepResult,
    TicketResolvedEvent,
)
from app.domains.survey.router import _survey_to_out

router = APIRouter(prefix="/nps/events", dependencies=[HostKeyAuth])


@router.post(
    "/ticket-resolved",
    response_model=QueueResult,
    summary="Ticket resolved",
    description="Queue a survey for the ticket's contact when allowed.",
)
async def ticket_resolved(data: TicketResolvedEvent, services: Services):
    outcome = await services.events.handle_ticket(data)
    return QueueResult(
        queued=outcome.survey is not None,
        decision=outcome.decision,
        survey=_survey_to_out(outcome.survey) if outcome.survey else None,
    )


@router.post(
    "/sweep",
    response_model=SweepResult,
    summary="Process survey queue",
    description="Periodic tick: send due surveys. Returns the surveys that changed.",
)
async def sweep(services: Services):
    processed = await services.events.on_periodic_sweep()
    return SweepResult(processed=[_survey_to_out(s) for s in processed])


@router.post("/activate", response_model=LifecycleResult, summary="Plugin activated")
async def activate(services: Services):
    await services.events.on_activate()
    return LifecycleResult(status="activated")


@router.post("/deactivate", response_model=LifecycleResult, summary="Plugin deactivated")
async def deactivate(services: Services):
    await services.events.on_deactivate()
    return LifecycleResult(status="deactivated")
