"""NPS configuration service."""

import logging
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from app.core.merge import deep_merge
from app.domains.survey_config.models import NpsConfig, default_config_document
from app.domains.survey_config.repository import ConfigRepositoryInterface

logger = logging.getLogger(__name__)


class ConfigService:
    """Reads and writes the process-wide NPS configuration."""

    def __init__(self, repository: ConfigRepositoryInterface):
        self._repo = repository

    async def load(self) -> NpsConfig:
        """
        Return the persisted config merged over the defaults.

        A missing or malformed document yields the defaults as a whole;
        nothing from a broken document is kept.
        """
        try:
            document = await self._repo.load_document()
        except Exception as e:
            logger.warning(f"Could not read NPS config, using defaults: {e}")
            return NpsConfig()

        if not isinstance(document, Mapping):
            return NpsConfig()

        try:
            return NpsConfig.model_validate(deep_merge(default_config_document(), document))
        except PydanticValidationError as e:
            logger.warning(f"Stored NPS config is malformed, using defaults: {e}")
            return NpsConfig()

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a single configuration value."""
        value = (await self.load()).model_dump().get(key)
        return default if value is None else value

    async def save(self, partial: Mapping[str, Any]) -> bool:
        """
        Merge ``partial`` over the defaults and persist it.

        The previous value is not consulted: any field missing from
        ``partial`` goes back to its default.

        Returns:
            False when a value can't be coerced or the write fails
        """
        try:
            config = NpsConfig.model_validate(deep_merge(default_config_document(), partial))
        except PydanticValidationError as e:
            logger.warning(f"Rejected NPS config update: {e}")
            return False

        saved = await self._repo.save_document(config.model_dump())
        if saved:
            logger.info("NPS config saved")
        return saved

    async def ensure_defaults(self) -> None:
        """Persist the defaults when no config has been stored yet."""
        if await self._repo.load_document() is None:
            await self._repo.save_document(default_config_document())
            logger.info("Created default NPS config")
