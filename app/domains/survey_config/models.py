"""NPS survey configuration model."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_QUESTION = "How likely are you to recommend us to a friend or colleague?"
DEFAULT_FOLLOW_UP_QUESTION = "What is the main reason for your score?"


class Branding(BaseModel):
    """Survey email and page branding."""

    primary_color: str = "#3b82f6"
    logo_url: str = ""


class NpsConfig(BaseModel):
    """NPS configuration document.

    Collection: nps_settings (single document)
    """

    model_config = ConfigDict(extra="ignore")

    question: str = DEFAULT_QUESTION
    follow_up_question: str = DEFAULT_FOLLOW_UP_QUESTION

    # Hours between ticket resolution and send eligibility
    trigger_delay_hours: int = 24
    # Minimum days between surveys for one contact; <= 0 disables throttling
    frequency_limit_days: int = 90

    branding: Branding = Field(default_factory=Branding)

    # Global kill switch
    enabled: bool = True

    @property
    def effective_delay_hours(self) -> int:
        """Trigger delay with negative values treated as immediate."""
        return max(0, self.trigger_delay_hours)

    @property
    def throttling_enabled(self) -> bool:
        return self.frequency_limit_days > 0


def default_config_document() -> dict:
    """Compiled-in defaults as a plain nested document."""
    return NpsConfig().model_dump()
