"""Tests for the NPS config store."""

import pytest

from app.domains.survey_config.models import DEFAULT_QUESTION, NpsConfig
from app.domains.survey_config.repository import (
    ConfigRepositoryInterface,
    InMemoryConfigRepository,
)
from app.domains.survey_config.schemas import ConfigUpdate
from app.domains.survey_config.service import ConfigService


class BrokenConfigRepository(ConfigRepositoryInterface):
    async def load_document(self):
        raise OSError("storage offline")

    async def save_document(self, document):
        return False


@pytest.mark.asyncio
async def test_load_without_document_returns_defaults():
    config = await ConfigService(InMemoryConfigRepository()).load()

    assert config == NpsConfig()
    assert config.trigger_delay_hours == 24
    assert config.frequency_limit_days == 90
    assert config.branding.primary_color == "#3b82f6"
    assert config.enabled is True


@pytest.mark.asyncio
async def test_load_merges_nested_values_over_defaults():
    repo = InMemoryConfigRepository({"branding": {"logo_url": "https://cdn.test/logo.png"}})

    config = await ConfigService(repo).load()

    assert config.branding.logo_url == "https://cdn.test/logo.png"
    assert config.branding.primary_color == "#3b82f6"
    assert config.question == DEFAULT_QUESTION


@pytest.mark.parametrize("document", ["not a mapping", ["a", "b"], {"trigger_delay_hours": "soon"}])
@pytest.mark.asyncio
async def test_load_malformed_document_falls_back_to_defaults(document):
    config = await ConfigService(InMemoryConfigRepository(document)).load()

    assert config == NpsConfig()


@pytest.mark.asyncio
async def test_load_read_error_falls_back_to_defaults():
    config = await ConfigService(BrokenConfigRepository()).load()

    assert config == NpsConfig()


@pytest.mark.asyncio
async def test_save_resets_omitted_fields_to_defaults():
    service = ConfigService(InMemoryConfigRepository())
    await service.save({"trigger_delay_hours": 2, "question": "Rate us?"})

    assert await service.save({"frequency_limit_days": 30}) is True
    config = await service.load()

    assert config.frequency_limit_days == 30
    assert config.trigger_delay_hours == 24
    assert config.question == DEFAULT_QUESTION


@pytest.mark.asyncio
async def test_save_rejects_values_that_cannot_be_coerced():
    service = ConfigService(InMemoryConfigRepository())
    await service.save({"frequency_limit_days": 30})

    assert await service.save({"frequency_limit_days": "soon"}) is False
    assert (await service.load()).frequency_limit_days == 30


@pytest.mark.asyncio
async def test_save_from_partial_update_schema():
    service = ConfigService(InMemoryConfigRepository())
    update = ConfigUpdate(enabled=False, branding={"primary_color": "#000000"})

    await service.save(update.to_partial())
    config = await service.load()

    assert config.enabled is False
    assert config.branding.primary_color == "#000000"
    assert config.branding.logo_url == ""


@pytest.mark.asyncio
async def test_get_single_value():
    service = ConfigService(InMemoryConfigRepository({"frequency_limit_days": 7}))

    assert await service.get("frequency_limit_days") == 7
    assert await service.get("missing", "fallback") == "fallback"


@pytest.mark.asyncio
async def test_ensure_defaults_only_writes_once():
    repo = InMemoryConfigRepository()
    service = ConfigService(repo)

    await service.ensure_defaults()
    assert (await repo.load_document())["frequency_limit_days"] == 90

    await service.save({"frequency_limit_days": 5})
    await service.ensure_defaults()
    assert (await repo.load_document())["frequency_limit_days"] == 5


def test_delay_and_throttling_properties():
    assert NpsConfig(trigger_delay_hours=-5).effective_delay_hours == 0
    assert NpsConfig(frequency_limit_days=0).throttling_enabled is False
    assert NpsConfig().throttling_enabled is True
