"""NPS configuration schemas for API requests/responses."""

from pydantic import BaseModel


class BrandingUpdate(BaseModel):
    primary_color: str | None = None
    logo_url: str | None = None


class ConfigUpdate(BaseModel):
    """Partial configuration update.

    Fields left out revert to their defaults on save.
    """

    question: str | None = None
    follow_up_question: str | None = None
    trigger_delay_hours: int | None = None
    frequency_limit_days: int | None = None
    branding: BrandingUpdate | None = None
    enabled: bool | None = None

    def to_partial(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
