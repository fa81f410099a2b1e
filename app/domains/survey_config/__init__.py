"""NPS survey configuration domain."""

from app.domains.survey_config.models import Branding, NpsConfig
from app.domains.survey_config.schemas import ConfigUpdate
from app.domains.survey_config.service import ConfigService

__all__ = [
    "Branding",
    "NpsConfig",
    "ConfigUpdate",
    "ConfigService",
]
