"""Service container - one instance of each NPS service per process."""

from dataclasses import dataclass
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.timeutils import Clock, utcnow
from app.db.mongodb import ensure_indexes
from app.domains.events.service import EventHandler
from app.domains.response.repository import (
    InMemoryResponseRepository,
    MongoResponseRepository,
    ResponseRepositoryInterface,
)
from app.domains.response.service import ResponseService
from app.domains.scoring.service import ScoringService
from app.domains.survey.repository import (
    InMemorySurveyRepository,
    MongoSurveyRepository,
    SurveyRepositoryInterface,
)
from app.domains.survey.service import SurveyQueue
from app.domains.survey_config.repository import (
    ConfigRepositoryInterface,
    InMemoryConfigRepository,
    MongoConfigRepository,
)
from app.domains.survey_config.service import ConfigService
from app.integrations.mail.base import EmailTransport
from app.sockets.broadcast import Broadcaster


@dataclass
class NpsServices:
    """Wired NPS services shared by the routers and scripts."""

    config: ConfigService
    responses: ResponseService
    scoring: ScoringService
    surveys: SurveyQueue
    events: EventHandler


def build_services(
    config_repo: ConfigRepositoryInterface,
    response_repo: ResponseRepositoryInterface,
    survey_repo: SurveyRepositoryInterface,
    transport: EmailTransport | None = None,
    broadcaster: Broadcaster | None = None,
    clock: Clock = utcnow,
    on_activate_hook=None,
) -> NpsServices:
    """Wire the services on top of the given repositories."""
    config_service = ConfigService(config_repo)
    response_service = ResponseService(response_repo, clock=clock)
    scoring_service = ScoringService(response_service, config_service, clock=clock)
    survey_queue = SurveyQueue(
        repository=survey_repo,
        response_service=response_service,
        config_service=config_service,
        transport=transport,
        broadcaster=broadcaster,
        clock=clock,
    )
    event_handler = EventHandler(
        config_service=config_service,
        survey_queue=survey_queue,
        broadcaster=broadcaster,
        on_activate_hook=on_activate_hook,
        clock=clock,
    )
    return NpsServices(
        config=config_service,
        responses=response_service,
        scoring=scoring_service,
        surveys=survey_queue,
        events=event_handler,
    )


def build_mongo_services(
    db: AsyncIOMotorDatabase,
    redis_client: redis.Redis | None = None,
    transport: EmailTransport | None = None,
    broadcaster: Broadcaster | None = None,
) -> NpsServices:
    """Production wiring: MongoDB storage, Redis collection locks."""

    async def create_indexes() -> None:
        await ensure_indexes(db)

    return build_services(
        config_repo=MongoConfigRepository(db),
        response_repo=MongoResponseRepository(db, redis_client),
        survey_repo=MongoSurveyRepository(db, redis_client),
        transport=transport,
        broadcaster=broadcaster,
        on_activate_hook=create_indexes,
    )


def build_memory_services(
    transport: EmailTransport | None = None,
    broadcaster: Broadcaster | None = None,
    clock: Clock = utcnow,
    config_document: dict | None = None,
) -> NpsServices:
    """In-memory wiring for tests and local experiments."""
    return build_services(
        config_repo=InMemoryConfigRepository(config_document),
        response_repo=InMemoryResponseRepository(),
        survey_repo=InMemorySurveyRepository(),
        transport=transport,
        broadcaster=broadcaster,
        clock=clock,
    )


def get_services(request: Request) -> NpsServices:
    """Get the services attached to the running app."""
    services = getattr(request.app.state, "nps", None)
    if services is None:
        raise RuntimeError("NPS services are not initialized")
    return services


Services = Annotated[NpsServices, Depends(get_services)]
