"""NPS configuration API routes (dashboard)."""

from fastapi import APIRouter

from app.core.exceptions import DatabaseError
from app.dependencies.auth import AdminOnly
from app.dependencies.services import Services
from app.domains.survey_config.models import NpsConfig
from app.domains.survey_config.schemas import ConfigUpdate

router = APIRouter(prefix="/nps/config")


@router.get(
    "",
    response_model=NpsConfig,
    summary="Get NPS config",
)
async def get_config(admin: AdminOnly, services: Services):
    """Get the current NPS configuration."""
    return await services.config.load()


@router.put(
    "",
    response_model=NpsConfig,
    summary="Save NPS config",
    description="Fields left out of the body are reset to their defaults.",
)
async def save_config(data: ConfigUpdate, admin: AdminOnly, services: Services):
    """Save NPS configuration."""
    if not await services.config.save(data.to_partial()):
        raise DatabaseError("Failed to save NPS config")
    return await services.config.load()
